"""Record a visit and run symptom analysis for it."""

import logging
from dataclasses import dataclass

from ...domain.entities.analysis import AnalysisResult
from ...domain.entities.check_in import CheckInRecord
from ...domain.enums.clinical import UrgencyTier
from ..ports.repositories.check_in_repo import CheckInRepository
from ..ports.services.analysis_service import SymptomAnalysisService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordedCheckIn:
    check_in: CheckInRecord
    analysis: AnalysisResult


class RecordCheckInUseCase:
    """Creates the check-in, links extracted symptoms, analyzes and stores the result.

    Steps run sequentially and commit independently; a failure part-way
    leaves earlier rows in place.
    """

    def __init__(self, check_ins: CheckInRepository, analysis_service: SymptomAnalysisService):
        self._check_ins = check_ins
        self._analysis_service = analysis_service

    async def execute(
        self, patient_id: str, description: str, urgency: UrgencyTier
    ) -> RecordedCheckIn:
        check_in = await self._check_ins.create_check_in(patient_id, description, urgency)

        symptoms = await self._check_ins.extract_symptoms(description)
        if symptoms:
            await self._check_ins.link_symptoms(check_in.check_in_id, symptoms)

        analysis = await self._analysis_service.analyze(description)
        await self._check_ins.save_analysis(check_in.check_in_id, analysis)

        logger.info(
            f"Check-in recorded: check_in_id={check_in.check_in_id} patient_id={patient_id} "
            f"symptoms={len(symptoms)} specialty={analysis.specialty.value}"
        )
        return RecordedCheckIn(
            check_in=CheckInRecord(
                check_in_id=check_in.check_in_id,
                patient_id=check_in.patient_id,
                description=check_in.description,
                urgency=check_in.urgency,
                created_at=check_in.created_at,
                symptoms=tuple(symptoms),
            ),
            analysis=analysis,
        )
