"""
API schemas for Clinic-Intake.
"""

from .auth import RefreshSessionRequest, SignInRequest, SignUpRequest
from .check_in import (
    CheckInSessionSchema,
    NoticeSchema,
    RegistrationRequest,
    StartSessionRequest,
    StepResultSchema,
    SymptomsRequest,
    VerifyIdentityRequest,
)
from .common import ApiResponse, ErrorResponse
from .patients import CreatePatientRequest, PatientSchema

__all__ = [
    "ApiResponse",
    "ErrorResponse",
    "CreatePatientRequest",
    "PatientSchema",
    "StartSessionRequest",
    "RegistrationRequest",
    "VerifyIdentityRequest",
    "SymptomsRequest",
    "NoticeSchema",
    "CheckInSessionSchema",
    "StepResultSchema",
    "SignInRequest",
    "SignUpRequest",
    "RefreshSessionRequest",
]
