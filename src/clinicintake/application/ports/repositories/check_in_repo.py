"""
Check-in repository interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ....domain.entities.analysis import AnalysisResult
from ....domain.entities.check_in import CheckInRecord, SymptomTag
from ....domain.enums.clinical import UrgencyTier


class CheckInRepository(ABC):
    """Abstract repository for visits, symptom links and analysis rows.

    Every method commits on its own; there is no cross-call transaction.
    """

    @abstractmethod
    async def create_check_in(
        self, patient_id: str, description: str, urgency: UrgencyTier
    ) -> CheckInRecord:
        """Create a check-in row; the store assigns id and timestamp."""
        pass

    @abstractmethod
    async def extract_symptoms(self, text: str) -> List[SymptomTag]:
        """Map free text onto the symptom vocabulary."""
        pass

    @abstractmethod
    async def link_symptoms(self, check_in_id: str, symptoms: Sequence[SymptomTag]) -> None:
        """Link vocabulary entries to a check-in."""
        pass

    @abstractmethod
    async def save_analysis(self, check_in_id: str, analysis: AnalysisResult) -> str:
        """Store the analysis for a check-in and return its row id."""
        pass

    @abstractmethod
    async def find_analysis(self, check_in_id: str) -> Optional[AnalysisResult]:
        """Load the analysis stored for a check-in."""
        pass
