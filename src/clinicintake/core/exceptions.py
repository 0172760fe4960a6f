"""
Exception handling for Clinic-Intake.

This module provides infrastructure exception classes raised by the
adapters layer. Business rule violations live in ``domain.errors``.
"""

from typing import Any, Dict, Optional


class ClinicIntakeException(Exception):
    """Base exception class for Clinic-Intake."""

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


class ConfigurationError(ClinicIntakeException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "CONFIG_ERROR", details)


class StoreError(ClinicIntakeException):
    """Raised when a remote persistence, lookup or upload call fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "STORE_ERROR", details)


class ExternalServiceError(ClinicIntakeException):
    """Raised when there's an external service error."""

    def __init__(
        self, service: str, message: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.service = service
        full_message = f"{service} service error: {message}"
        super().__init__(full_message, "EXTERNAL_SERVICE_ERROR", details)


class IdentityProviderError(ClinicIntakeException):
    """Raised with the identity provider's own status and message."""

    def __init__(
        self,
        status: int,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.status = status
        super().__init__(message, "IDENTITY_PROVIDER_ERROR", details)


class ArtifactNotFoundError(StoreError):
    """Raised when a stored artifact does not exist."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Artifact not found: {key}", {"key": key})
        self.error_code = "ARTIFACT_NOT_FOUND"
