"""
Symptom analysis service interface.
"""

from abc import ABC, abstractmethod

from ....domain.entities.analysis import AnalysisResult


class SymptomAnalysisService(ABC):
    """Classifies a free-text symptom description.

    Results are not deterministic across calls; a model behind this
    interface may be retrained at any time.
    """

    @abstractmethod
    async def analyze(self, description: str) -> AnalysisResult:
        """
        Analyze a symptom description.

        Args:
            description: Non-empty free text written or dictated by the patient

        Returns:
            AnalysisResult with specialty, candidate conditions, actions,
            severity and triage recommendation
        """
        pass
