"""
Patient directory request/response schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ...core.utils import is_valid_date, validate_email
from ...domain.entities.patient import NewPatient, PatientRecord, normalize_conditions


class CreatePatientRequest(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=80, description="First name")
    last_name: str = Field(..., min_length=1, max_length=80, description="Last name")
    date_of_birth: str = Field(..., description="Date of birth (YYYY-MM-DD)")
    phone: str = Field(..., min_length=1, max_length=32, description="Phone number")
    email: Optional[str] = Field(None, description="Email address")
    existing_conditions: List[str] = Field(default_factory=list, description="Existing condition labels")

    @field_validator("first_name", "last_name", "phone")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field cannot be blank")
        return v.strip()

    @field_validator("date_of_birth")
    @classmethod
    def validate_date_of_birth(cls, v: str) -> str:
        v = (v or "").strip()
        if not is_valid_date(v):
            raise ValueError("Date of birth must use the YYYY-MM-DD format")
        return v

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v: Optional[str]) -> Optional[str]:
        v = (v or "").strip()
        if not v:
            return None
        if not validate_email(v):
            raise ValueError("Invalid email address")
        return v

    def to_new_patient(self) -> NewPatient:
        return NewPatient(
            first_name=self.first_name,
            last_name=self.last_name,
            date_of_birth=self.date_of_birth,
            phone=self.phone,
            email=self.email,
            existing_conditions=normalize_conditions(self.existing_conditions),
        )


class PatientSchema(BaseModel):
    patient_id: str
    first_name: str
    last_name: str
    date_of_birth: str
    phone: str
    email: Optional[str] = None
    existing_conditions: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: PatientRecord) -> "PatientSchema":
        return cls(
            patient_id=record.id,
            first_name=record.first_name,
            last_name=record.last_name,
            date_of_birth=record.date_of_birth,
            phone=record.phone,
            email=record.email,
            existing_conditions=sorted(record.existing_conditions),
            created_at=record.created_at,
        )
