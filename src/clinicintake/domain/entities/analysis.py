"""Symptom analysis result entity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..enums.clinical import Severity, Specialty


@dataclass(frozen=True)
class ConditionLikelihood:
    """Candidate condition with an independent likelihood in [0, 1]."""

    name: str
    probability: float

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Condition name cannot be empty")
        if not 0.0 <= float(self.probability) <= 1.0:
            raise ValueError(
                f"Probability for '{self.name}' must be within [0, 1], got {self.probability}"
            )

    @property
    def percent(self) -> int:
        """Probability as a rounded percentage."""
        return int(round(self.probability * 100))


@dataclass(frozen=True)
class AnalysisResult:
    """Structured classification of a symptom description.

    Probabilities are independent likelihoods and need not sum to 1.
    """

    specialty: Specialty
    possible_conditions: Tuple[ConditionLikelihood, ...]
    recommended_actions: Tuple[str, ...]
    severity: Severity
    triage_recommendation: str
    doctor_notes: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.triage_recommendation or not self.triage_recommendation.strip():
            raise ValueError("Triage recommendation cannot be empty")
        object.__setattr__(self, "possible_conditions", tuple(self.possible_conditions))
        object.__setattr__(self, "recommended_actions", tuple(self.recommended_actions))

    def to_document(self) -> Dict[str, Any]:
        """JSON shape persisted in ``analysis_results``."""
        return {
            "specialty": self.specialty.value,
            "possible_conditions": [
                {"name": c.name, "probability": c.probability}
                for c in self.possible_conditions
            ],
            "recommended_actions": list(self.recommended_actions),
            "severity": self.severity.value,
            "triage_recommendation": self.triage_recommendation,
            "doctor_notes": self.doctor_notes,
        }

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "AnalysisResult":
        """Build from the persisted/JSON shape. Raises ValueError on shape drift."""
        try:
            conditions = tuple(
                ConditionLikelihood(name=str(item["name"]), probability=float(item["probability"]))
                for item in data["possible_conditions"]
            )
            actions = data["recommended_actions"]
            if not isinstance(actions, list) or not all(isinstance(a, str) for a in actions):
                raise ValueError("recommended_actions must be a list of strings")
            return cls(
                specialty=Specialty(data["specialty"]),
                possible_conditions=conditions,
                recommended_actions=tuple(actions),
                severity=Severity(str(data["severity"]).lower()),
                triage_recommendation=str(data["triage_recommendation"]),
                doctor_notes=data.get("doctor_notes"),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed analysis payload: {e}") from e
