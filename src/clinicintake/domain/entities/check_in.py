"""Check-in domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple

from ..enums.clinical import UrgencyTier


@dataclass(frozen=True)
class SymptomTag:
    """Canonical symptom vocabulary entry."""

    symptom_id: str
    name: str


@dataclass(frozen=True)
class CheckInRecord:
    """A single visit: patient, free-text description and urgency.

    Created once per visit and never mutated by the workflow.
    """

    check_in_id: str
    patient_id: str
    description: str
    urgency: UrgencyTier
    created_at: datetime
    symptoms: Tuple[SymptomTag, ...] = field(default_factory=tuple)
