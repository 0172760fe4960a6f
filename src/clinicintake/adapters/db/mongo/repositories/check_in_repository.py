"""
MongoDB implementation of CheckInRepository.
"""

import logging
import re
from typing import List, Optional, Sequence

from pydantic import ValidationError
from pymongo.errors import PyMongoError

from .....application.ports.repositories.check_in_repo import CheckInRepository
from .....core.exceptions import StoreError
from .....domain.entities.analysis import AnalysisResult
from .....domain.entities.check_in import CheckInRecord, SymptomTag
from .....domain.enums.clinical import UrgencyTier
from ..models.check_in_m import (
    AnalysisResultMongo,
    CheckInMongo,
    CheckInSymptomMongo,
    SymptomMongo,
)

logger = logging.getLogger(__name__)


class MongoCheckInRepository(CheckInRepository):
    """Each method is a single round-trip that commits on its own."""

    async def create_check_in(
        self, patient_id: str, description: str, urgency: UrgencyTier
    ) -> CheckInRecord:
        check_in = CheckInMongo(
            patient_id=patient_id, symptoms_description=description, urgency=urgency
        )
        try:
            await check_in.insert()
        except PyMongoError as e:
            raise StoreError(f"Failed to create check-in: {e}", {"patient_id": patient_id}) from e
        return check_in.to_record()

    async def extract_symptoms(self, text: str) -> List[SymptomTag]:
        """Whole-word, case-insensitive match of vocabulary names in ``text``."""
        try:
            vocabulary = [row.to_tag() for row in await SymptomMongo.find_all().to_list()]
        except PyMongoError as e:
            raise StoreError(f"Failed to load symptom vocabulary: {e}") from e

        matched = [
            tag
            for tag in vocabulary
            if re.search(rf"\b{re.escape(tag.name)}\b", text or "", re.IGNORECASE)
        ]
        return sorted(matched, key=lambda tag: tag.name)

    async def link_symptoms(self, check_in_id: str, symptoms: Sequence[SymptomTag]) -> None:
        if not symptoms:
            return
        rows = [
            CheckInSymptomMongo(
                id=f"{check_in_id}:{tag.symptom_id}",
                check_in_id=check_in_id,
                symptom_id=tag.symptom_id,
            )
            for tag in symptoms
        ]
        try:
            await CheckInSymptomMongo.insert_many(rows)
        except PyMongoError as e:
            raise StoreError(
                f"Failed to link symptoms: {e}", {"check_in_id": check_in_id}
            ) from e

    async def save_analysis(self, check_in_id: str, analysis: AnalysisResult) -> str:
        row = AnalysisResultMongo.from_analysis(check_in_id, analysis)
        try:
            await row.insert()
        except PyMongoError as e:
            raise StoreError(
                f"Failed to save analysis: {e}", {"check_in_id": check_in_id}
            ) from e
        return row.id

    async def find_analysis(self, check_in_id: str) -> Optional[AnalysisResult]:
        try:
            row = await AnalysisResultMongo.find_one(
                AnalysisResultMongo.check_in_id == check_in_id
            )
            if row is None:
                return None
            return row.to_result()
        except PyMongoError as e:
            raise StoreError(f"Failed to load analysis: {e}", {"check_in_id": check_in_id}) from e
        except (ValidationError, ValueError) as e:
            raise StoreError(
                f"Stored analysis is malformed: {e}", {"check_in_id": check_in_id}
            ) from e
