"""
Patient ID value object for type-safe patient identification.
The value is opaque: it is assigned by the store and never parsed.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PatientId:
    """Immutable patient identifier value object."""

    value: str

    def __post_init__(self) -> None:
        """Validate patient ID."""
        if not isinstance(self.value, str):
            raise ValueError("Patient ID must be a string")

        if not self.value.strip():
            raise ValueError("Patient ID cannot be empty")

    def __str__(self) -> str:
        """String representation."""
        return self.value
