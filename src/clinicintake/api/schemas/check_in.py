"""
Check-in session request/response schemas.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ...application.dto.check_in_dto import RegistrationForm
from ...domain.enums.clinical import UrgencyTier
from ...domain.enums.workflow import Journey


class StartSessionRequest(BaseModel):
    journey: Journey = Field(Journey.NEW_PATIENT, description="new_patient or returning_patient")


class RegistrationRequest(BaseModel):
    """New-patient form. Blank fields may be filled from dictated drafts."""

    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    date_of_birth: str = Field("", description="YYYY-MM-DD")
    symptoms: str = ""
    appointment_type: Optional[str] = None
    email: Optional[str] = None
    urgency: str = UrgencyTier.REGULAR.value
    existing_conditions: List[str] = Field(default_factory=list)

    def to_form(self) -> RegistrationForm:
        return RegistrationForm(**self.model_dump())


class VerifyIdentityRequest(BaseModel):
    patient_id: str = ""


class SymptomsRequest(BaseModel):
    description: Optional[str] = Field(None, description="Uses the dictated draft when omitted")
    urgency: str = UrgencyTier.REGULAR.value


class NoticeSchema(BaseModel):
    level: str
    message: str
    code: Optional[str] = None


class CheckInSessionSchema(BaseModel):
    session_id: str
    journey: str
    state: str
    patient: Optional[Dict[str, Any]] = None
    check_in_id: Optional[str] = None
    analysis: Optional[Dict[str, Any]] = None
    artifact_key: Optional[str] = None
    drafts: Dict[str, str] = Field(default_factory=dict)
    active_dictation: Optional[str] = None
    last_notice: Optional[NoticeSchema] = None


class StepResultSchema(BaseModel):
    notice: NoticeSchema
    session: CheckInSessionSchema
