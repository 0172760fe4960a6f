"""
MongoDB implementation of PatientDirectory.
"""

import logging
from typing import Optional

from pydantic import ValidationError
from pymongo.errors import PyMongoError

from .....application.ports.repositories.patient_repo import PatientDirectory
from .....core.exceptions import StoreError
from .....core.utils import get_current_timestamp
from .....domain.entities.patient import NewPatient, PatientRecord
from ..models.patient_m import PatientConditionMongo, PatientMongo

logger = logging.getLogger(__name__)


class MongoPatientDirectory(PatientDirectory):
    """Patients live in ``patients``; each existing condition is a row in ``patient_conditions``."""

    async def create(self, patient: NewPatient) -> PatientRecord:
        """Insert the patient, then its condition rows.

        If the condition insert fails the patient document is removed again
        so a failed registration leaves no half-written patient behind.
        """
        created_at = get_current_timestamp()
        patient_mongo = PatientMongo.from_new_patient(patient, created_at)

        try:
            await patient_mongo.insert()
        except PyMongoError as e:
            raise StoreError(f"Failed to create patient: {e}") from e

        rows = PatientConditionMongo.for_patient(
            patient_mongo.id, patient.existing_conditions, created_at
        )
        if rows:
            try:
                await PatientConditionMongo.insert_many(rows)
            except PyMongoError as e:
                await self._discard(patient_mongo)
                raise StoreError(
                    f"Failed to store existing conditions: {e}", {"patient_id": patient_mongo.id}
                ) from e

        logger.info(
            f"Patient created: patient_id={patient_mongo.id} conditions={len(rows)}"
        )
        return patient_mongo.to_record(patient.existing_conditions)

    async def _discard(self, patient_mongo: PatientMongo) -> None:
        try:
            await PatientConditionMongo.find(
                PatientConditionMongo.patient_id == patient_mongo.id
            ).delete()
            await patient_mongo.delete()
        except PyMongoError as e:
            logger.error(
                f"Could not remove partially created patient {patient_mongo.id}: {e}",
                exc_info=True,
            )

    async def find_by_id(self, patient_id: str) -> Optional[PatientRecord]:
        try:
            patient_mongo = await PatientMongo.get(patient_id)
            if patient_mongo is None:
                return None
            rows = await PatientConditionMongo.find(
                PatientConditionMongo.patient_id == patient_id
            ).to_list()
        except PyMongoError as e:
            raise StoreError(f"Failed to look up patient: {e}", {"patient_id": patient_id}) from e
        except ValidationError as e:
            raise StoreError(
                f"Stored patient is malformed: {e}", {"patient_id": patient_id}
            ) from e

        return patient_mongo.to_record(row.condition_name for row in rows)
