#!/usr/bin/env python3
"""
Seed the demo patients (1234, 5678, 9012) and the symptom vocabulary.

Usage:
    python scripts/seed_demo.py

Reads MONGO_URI / MONGO_DB_NAME from the environment or a discovered .env.
"""

import asyncio
import logging
import os
import sys

# Add the src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from clinicintake.adapters.db.mongo.client import connect_database  # noqa: E402
from clinicintake.adapters.db.mongo.seed import (  # noqa: E402
    seed_demo_patients,
    seed_symptom_vocabulary,
)
from clinicintake.core.config import get_settings  # noqa: E402
from clinicintake.core.structured_logger import configure_logging  # noqa: E402

logger = logging.getLogger("clinicintake.scripts.seed_demo")


async def main() -> int:
    settings = get_settings()
    configure_logging(settings.logging)
    database = await connect_database(settings.database)
    try:
        patients = await seed_demo_patients()
        symptoms = await seed_symptom_vocabulary()
    finally:
        database.client.close()
    logger.info(f"Seed complete: {patients} patients and {symptoms} symptoms added")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
