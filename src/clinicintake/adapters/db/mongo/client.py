"""
MongoDB connection helpers.
"""

import logging

import certifi
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from ....core.config import DatabaseSettings
from .models.check_in_m import (
    AnalysisResultMongo,
    CheckInMongo,
    CheckInSymptomMongo,
    SymptomMongo,
)
from .models.patient_m import PatientConditionMongo, PatientMongo

logger = logging.getLogger(__name__)

DOCUMENT_MODELS = [
    PatientMongo,
    PatientConditionMongo,
    CheckInMongo,
    CheckInSymptomMongo,
    SymptomMongo,
    AnalysisResultMongo,
]


def create_mongo_client(settings: DatabaseSettings) -> AsyncIOMotorClient:
    """Create a motor client. TLS is enabled only for Atlas SRV URIs."""
    if settings.uri.startswith("mongodb+srv://"):
        return AsyncIOMotorClient(
            settings.uri,
            serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
            tls=True,
            tlsCAFile=certifi.where(),
            tlsAllowInvalidCertificates=False,
        )
    # Local/standard connection (no TLS)
    return AsyncIOMotorClient(
        settings.uri,
        serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
    )


async def init_document_models(database: AsyncIOMotorDatabase) -> None:
    """Bind the Beanie documents to ``database``."""
    await init_beanie(database=database, document_models=DOCUMENT_MODELS)


async def connect_database(settings: DatabaseSettings) -> AsyncIOMotorDatabase:
    """Connect, ping and register the document models; raises if the server cannot be selected."""
    client = create_mongo_client(settings)
    await client.admin.command("ping")
    database = client[settings.db_name]
    await init_document_models(database)
    logger.info(f"Database connection established: db={settings.db_name}")
    return database
