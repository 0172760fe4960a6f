"""
Check-in workflow states and selectors.
"""

from enum import Enum


class Journey(str, Enum):
    """User journeys served by the check-in workflow."""
    NEW_PATIENT = "new_patient"              # Full registration form
    RETURNING_PATIENT = "returning_patient"  # Quick check-in by patient id


class CheckInState(str, Enum):
    """Workflow states. Submitting and ReportPending are transient."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    ANALYZED = "analyzed"
    REPORT_PENDING = "report_pending"
    REPORT_READY = "report_ready"

    # Returning-patient sub-path
    IDENTITY_PENDING = "identity_pending"
    IDENTITY_VERIFIED = "identity_verified"

    @property
    def is_busy(self) -> bool:
        return self in (CheckInState.SUBMITTING, CheckInState.REPORT_PENDING)


class SpeechTarget(str, Enum):
    """Form field that receives a dictated transcript."""
    SYMPTOMS = "symptoms"
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    PHONE = "phone"
    EMAIL = "email"


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"
