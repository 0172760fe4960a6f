"""Patient domain entities for registration and lookup."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Iterable, Optional

from ...core.utils.string_utils import normalize_whitespace
from ..value_objects.patient_id import PatientId


def normalize_conditions(conditions: Iterable[str]) -> FrozenSet[str]:
    """Trim labels, drop blanks and de-duplicate case-insensitively.

    The first spelling of a label wins.
    """
    seen = {}
    for label in conditions or ():
        cleaned = normalize_whitespace(str(label))
        if not cleaned:
            continue
        seen.setdefault(cleaned.casefold(), cleaned)
    return frozenset(seen.values())


@dataclass(frozen=True)
class NewPatient:
    """Patient data collected at registration, before the store assigns an id."""

    first_name: str
    last_name: str
    date_of_birth: str
    phone: str
    email: Optional[str] = None
    existing_conditions: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "existing_conditions", normalize_conditions(self.existing_conditions)
        )
        if self.email is not None and not self.email.strip():
            object.__setattr__(self, "email", None)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def with_id(self, patient_id: PatientId, created_at: Optional[datetime] = None) -> "PatientRecord":
        return PatientRecord(
            patient_id=patient_id,
            first_name=self.first_name,
            last_name=self.last_name,
            date_of_birth=self.date_of_birth,
            phone=self.phone,
            email=self.email,
            existing_conditions=self.existing_conditions,
            created_at=created_at,
        )


@dataclass(frozen=True)
class PatientRecord:
    """Read-only copy of a stored patient. The store is the source of truth."""

    patient_id: PatientId
    first_name: str
    last_name: str
    date_of_birth: str
    phone: str
    email: Optional[str] = None
    existing_conditions: FrozenSet[str] = field(default_factory=frozenset)
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "existing_conditions", normalize_conditions(self.existing_conditions)
        )

    @property
    def id(self) -> str:
        return self.patient_id.value

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
