"""
Domain entities package.
"""

from .analysis import AnalysisResult, ConditionLikelihood
from .check_in import CheckInRecord, SymptomTag
from .patient import NewPatient, PatientRecord

__all__ = [
    "AnalysisResult",
    "ConditionLikelihood",
    "CheckInRecord",
    "SymptomTag",
    "NewPatient",
    "PatientRecord",
]
