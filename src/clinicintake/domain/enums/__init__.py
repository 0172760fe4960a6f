"""
Enumerations shared by the check-in domain.
"""

from .clinical import AppointmentType, Severity, Specialty, UrgencyTier
from .workflow import CheckInState, Journey, NoticeLevel, SpeechTarget

__all__ = [
    "AppointmentType",
    "Severity",
    "Specialty",
    "UrgencyTier",
    "CheckInState",
    "Journey",
    "NoticeLevel",
    "SpeechTarget",
]
