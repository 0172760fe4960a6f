"""
Domain-specific error types for business rule violations.
"""

from typing import Any, Dict, List, Optional


class DomainError(Exception):
    """Base domain error."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class IntakeValidationError(DomainError):
    """Required field missing or too short. Raised before any remote call."""

    def __init__(self, message: str, fields: Optional[List[str]] = None) -> None:
        self.fields = list(fields or [])
        super().__init__(message, "VALIDATION_ERROR", {"fields": self.fields})


class PatientNotFoundError(DomainError):
    """Patient not found."""

    def __init__(self, patient_id: str) -> None:
        message = f"Patient with ID '{patient_id}' not found"
        super().__init__(message, "PATIENT_NOT_FOUND", {"patient_id": patient_id})


class SpeechUnavailableError(DomainError):
    """The runtime has no speech recognition capability."""

    def __init__(self) -> None:
        super().__init__(
            "Speech recognition is not supported in this runtime.",
            "SPEECH_UNAVAILABLE",
        )


class InvalidTransitionError(DomainError):
    """Operation not allowed from the workflow's current state."""

    def __init__(self, operation: str, state: str) -> None:
        message = f"Cannot {operation} while check-in is '{state}'"
        super().__init__(
            message, "INVALID_TRANSITION", {"operation": operation, "state": state}
        )
