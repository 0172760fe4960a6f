"""
MongoDB Beanie models for patients and their existing conditions.
"""

from datetime import datetime
from typing import Iterable, Optional

from beanie import Document
from pydantic import Field

from .....core.utils import generate_id, get_current_timestamp
from .....domain.entities.patient import NewPatient, PatientRecord
from .....domain.value_objects.patient_id import PatientId


class PatientMongo(Document):
    """MongoDB model for a patient. Conditions are stored as separate rows."""

    id: str = Field(default_factory=generate_id, description="Patient ID")
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    date_of_birth: str = Field(..., description="Date of birth (YYYY-MM-DD)")
    phone: str = Field(..., description="Phone number")
    email: Optional[str] = Field(None, description="Email address")
    created_at: datetime = Field(default_factory=get_current_timestamp)
    updated_at: datetime = Field(default_factory=get_current_timestamp)

    class Settings:
        name = "patients"

    @classmethod
    def from_new_patient(cls, patient: NewPatient, created_at: datetime) -> "PatientMongo":
        return cls(
            first_name=patient.first_name,
            last_name=patient.last_name,
            date_of_birth=patient.date_of_birth,
            phone=patient.phone,
            email=patient.email,
            created_at=created_at,
            updated_at=created_at,
        )

    def to_record(self, conditions: Iterable[str]) -> PatientRecord:
        return PatientRecord(
            patient_id=PatientId(self.id),
            first_name=self.first_name,
            last_name=self.last_name,
            date_of_birth=self.date_of_birth,
            phone=self.phone,
            email=self.email,
            existing_conditions=frozenset(conditions),
            created_at=self.created_at,
        )


class PatientConditionMongo(Document):
    """One existing-condition label of a patient."""

    id: str = Field(..., description="'{patient_id}:{casefolded label}'")
    patient_id: str = Field(..., description="Patient ID reference")
    condition_name: str = Field(..., description="Condition label as entered")
    created_at: datetime = Field(default_factory=get_current_timestamp)

    class Settings:
        name = "patient_conditions"

    @classmethod
    def for_patient(
        cls, patient_id: str, labels: Iterable[str], created_at: datetime
    ) -> list:
        # Sorted so inserts are reproducible.
        return [
            cls(
                id=f"{patient_id}:{label.casefold()}",
                patient_id=patient_id,
                condition_name=label,
                created_at=created_at,
            )
            for label in sorted(labels)
        ]
