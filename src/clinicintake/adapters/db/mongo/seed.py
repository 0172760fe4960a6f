"""
Demo data for local runs and tests.

Seeding is idempotent: existing documents are left untouched.
"""

import logging
from typing import Dict, List

from ....core.utils import get_current_timestamp
from .models.check_in_m import SymptomMongo
from .models.patient_m import PatientConditionMongo, PatientMongo

logger = logging.getLogger(__name__)

DEMO_PATIENTS: List[Dict[str, str]] = [
    {"id": "1234", "first_name": "John", "last_name": "Doe", "condition": "Hypertension"},
    {"id": "5678", "first_name": "Jane", "last_name": "Smith", "condition": "Diabetes"},
    {"id": "9012", "first_name": "Alex", "last_name": "Johnson", "condition": "Asthma"},
]

SYMPTOM_VOCABULARY = [
    "headache",
    "fever",
    "cough",
    "nausea",
    "fatigue",
    "dizziness",
    "sore throat",
    "chest pain",
    "shortness of breath",
    "rash",
    "back pain",
    "abdominal pain",
]


async def seed_demo_patients() -> int:
    """Insert the demo patients that are missing. Returns how many were added."""
    added = 0
    now = get_current_timestamp()
    for demo in DEMO_PATIENTS:
        patient_id = demo["id"]
        if await PatientMongo.get(patient_id) is not None:
            continue
        await PatientMongo(
            id=patient_id,
            first_name=demo["first_name"],
            last_name=demo["last_name"],
            date_of_birth="1990-01-01",
            phone="555-123-4567",
            email=f"patient{patient_id}@example.com",
            created_at=now,
            updated_at=now,
        ).insert()
        await PatientConditionMongo.insert_many(
            PatientConditionMongo.for_patient(patient_id, [demo["condition"]], now)
        )
        added += 1
    if added:
        logger.info(f"Seeded {added} demo patients")
    return added


async def seed_symptom_vocabulary() -> int:
    added = 0
    for name in SYMPTOM_VOCABULARY:
        symptom_id = f"sym-{name.replace(' ', '-')}"
        if await SymptomMongo.get(symptom_id) is not None:
            continue
        await SymptomMongo(id=symptom_id, name=name).insert()
        added += 1
    if added:
        logger.info(f"Seeded {added} symptom vocabulary entries")
    return added
