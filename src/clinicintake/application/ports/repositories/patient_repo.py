"""
Patient directory interface for data access abstraction.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ....domain.entities.patient import NewPatient, PatientRecord


class PatientDirectory(ABC):
    """Looks up and creates patient records in the remote store."""

    @abstractmethod
    async def create(self, patient: NewPatient) -> PatientRecord:
        """Persist a patient and its existing conditions; the store assigns the id.

        Raises StoreError on any write failure.
        """
        pass

    @abstractmethod
    async def find_by_id(self, patient_id: str) -> Optional[PatientRecord]:
        """Find a patient and its condition labels.

        Returns None when no such record exists; other failures raise StoreError.
        """
        pass
