"""
Deterministic symptom analysis used until a real model is configured.
"""

import logging

from ...application.ports.services.analysis_service import SymptomAnalysisService
from ...domain.entities.analysis import AnalysisResult, ConditionLikelihood
from ...domain.enums.clinical import Severity, Specialty
from ...domain.errors import IntakeValidationError

logger = logging.getLogger(__name__)


class MockSymptomAnalysisService(SymptomAnalysisService):
    """Returns the same general-medicine result for every description."""

    async def analyze(self, description: str) -> AnalysisResult:
        if not description or not description.strip():
            raise IntakeValidationError("Symptom description is required.", ["description"])
        logger.debug(f"Mock analysis for description of {len(description)} chars")
        return AnalysisResult(
            specialty=Specialty.GENERAL_MEDICINE,
            possible_conditions=(
                ConditionLikelihood("Common Cold", 0.75),
                ConditionLikelihood("Seasonal Allergies", 0.65),
                ConditionLikelihood("Viral Infection", 0.45),
            ),
            recommended_actions=(
                "Rest and hydration",
                "Over-the-counter pain relievers",
                "Follow-up if symptoms persist beyond 7 days",
            ),
            severity=Severity.MILD,
            triage_recommendation="standard",
        )
