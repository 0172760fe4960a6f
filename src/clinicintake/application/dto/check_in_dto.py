"""Check-in DTOs passed between the API layer and the workflow."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ...core.utils.datetime_utils import is_valid_date
from ...domain.entities.patient import NewPatient, normalize_conditions
from ...domain.enums.clinical import AppointmentType, UrgencyTier
from ...domain.enums.workflow import NoticeLevel
from ...domain.errors import IntakeValidationError

REQUIRED_REGISTRATION_FIELDS = (
    "first_name",
    "last_name",
    "phone",
    "date_of_birth",
    "symptoms",
    "appointment_type",
)


@dataclass
class RegistrationForm:
    """Everything the new-patient form collects."""

    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    date_of_birth: str = ""
    symptoms: str = ""
    appointment_type: Optional[str] = None
    email: Optional[str] = None
    urgency: str = UrgencyTier.REGULAR.value
    existing_conditions: List[str] = field(default_factory=list)

    def missing_fields(self) -> List[str]:
        missing = []
        for name in REQUIRED_REGISTRATION_FIELDS:
            value = getattr(self, name)
            if value is None or not str(value).strip():
                missing.append(name)
        return missing

    def validate(self, min_description_length: int) -> None:
        """Raise IntakeValidationError unless the form can be submitted."""
        missing = self.missing_fields()
        if missing:
            raise IntakeValidationError(
                "Please fill in all required fields: " + ", ".join(missing), missing
            )
        if not is_valid_date(self.date_of_birth.strip()):
            raise IntakeValidationError(
                "Date of birth must use the YYYY-MM-DD format.", ["date_of_birth"]
            )
        if self.appointment_type not in {t.value for t in AppointmentType}:
            raise IntakeValidationError(
                f"Unknown appointment type: {self.appointment_type}", ["appointment_type"]
            )
        if self.urgency not in {u.value for u in UrgencyTier}:
            raise IntakeValidationError(f"Unknown urgency: {self.urgency}", ["urgency"])
        if len(self.symptoms.strip()) < min_description_length:
            raise IntakeValidationError(
                "Please describe your symptoms in more detail.", ["symptoms"]
            )

    def to_new_patient(self) -> NewPatient:
        return NewPatient(
            first_name=self.first_name.strip(),
            last_name=self.last_name.strip(),
            date_of_birth=self.date_of_birth.strip(),
            phone=self.phone.strip(),
            email=(self.email or "").strip() or None,
            existing_conditions=normalize_conditions(self.existing_conditions),
        )


@dataclass(frozen=True)
class Notice:
    """Transient user-visible message."""

    level: NoticeLevel
    message: str
    code: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"level": self.level.value, "message": self.message, "code": self.code}


@dataclass(frozen=True)
class StepOutcome:
    """Result of one workflow operation."""

    ok: bool
    notice: Notice
    error_code: Optional[str] = None

    @classmethod
    def success(cls, message: str, level: NoticeLevel = NoticeLevel.SUCCESS) -> "StepOutcome":
        return cls(ok=True, notice=Notice(level, message))

    @classmethod
    def failure(cls, error_code: str, message: str) -> "StepOutcome":
        return cls(ok=False, notice=Notice(NoticeLevel.ERROR, message, error_code), error_code=error_code)
