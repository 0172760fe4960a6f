"""FastAPI dependency providers.

Stateless adapters are cached per process. Mongo-backed repositories use the
Beanie documents bound in the app lifespan.
"""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..adapters.db.mongo.repositories.check_in_repository import MongoCheckInRepository
from ..adapters.db.mongo.repositories.patient_repository import MongoPatientDirectory
from ..adapters.external.analysis_service_mock import MockSymptomAnalysisService
from ..adapters.speech.capture import SpeechCaptureAdapter
from ..adapters.storage import AzureBlobReportStorage, LocalReportStorage
from ..application.ports.repositories.check_in_repo import CheckInRepository
from ..application.ports.repositories.patient_repo import PatientDirectory
from ..application.ports.services.analysis_service import SymptomAnalysisService
from ..application.ports.services.identity_provider import IdentityProvider
from ..application.ports.services.report_storage import ReportStorage
from ..application.use_cases.check_in_sessions import CheckInSessionRegistry
from ..application.use_cases.generate_report import ReportGenerator
from ..core.config import CheckInSettings, get_settings
from ..core.exceptions import ConfigurationError
from .errors import ServiceUnavailableError

logger = logging.getLogger(__name__)


def get_database(request: Request) -> AsyncIOMotorDatabase:
    """Database handle opened at startup."""
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise ServiceUnavailableError("DATABASE_UNAVAILABLE", "Database connection is not available")
    return database


# 503 while the database is down.
def get_patient_directory(
    database: Annotated[AsyncIOMotorDatabase, Depends(get_database)],
) -> PatientDirectory:
    return MongoPatientDirectory()


def get_check_in_repository(
    database: Annotated[AsyncIOMotorDatabase, Depends(get_database)],
) -> CheckInRepository:
    return MongoCheckInRepository()


@lru_cache()
def get_analysis_service() -> SymptomAnalysisService:
    """Get the analysis service selected by ANALYSIS_PROVIDER."""
    settings = get_settings()
    if settings.analysis.provider == "azure_openai":
        from ..adapters.external.analysis_service_openai import OpenAISymptomAnalysisService

        logger.info(f"Using Azure OpenAI analysis: deployment={settings.azure_openai.deployment_name}")
        return OpenAISymptomAnalysisService(settings.azure_openai, settings.analysis)
    return MockSymptomAnalysisService()


@lru_cache()
def get_report_storage() -> ReportStorage:
    """Get the report storage selected by FILE_STORAGE_TYPE."""
    settings = get_settings()
    if settings.file_storage.storage_type == "azure":
        return AzureBlobReportStorage(settings.azure_blob)
    return LocalReportStorage(settings.file_storage.storage_path)


@lru_cache()
def get_report_generator() -> ReportGenerator:
    # One generator per process so report keys stay unique per patient.
    return ReportGenerator(get_report_storage())


@lru_cache()
def get_speech_capture() -> SpeechCaptureAdapter:
    """Speech capture; the recognizer is absent when Azure Speech is not configured."""
    settings = get_settings().azure_speech
    recognizer = None
    if settings.is_configured:
        from ..adapters.external.speech_recognizer_azure import AzureSpeechRecognizer

        recognizer = AzureSpeechRecognizer(settings)
    else:
        logger.info("Azure Speech not configured; dictation is unavailable")
    return SpeechCaptureAdapter(recognizer, locale=settings.locale)


@lru_cache()
def _identity_provider() -> IdentityProvider:
    from ..adapters.external.identity_provider_gotrue import GoTrueIdentityProvider

    return GoTrueIdentityProvider(get_settings().auth)


def get_identity_provider() -> IdentityProvider:
    try:
        return _identity_provider()
    except ConfigurationError as e:
        raise ServiceUnavailableError("AUTH_NOT_CONFIGURED", e.message) from e


@lru_cache()
def get_session_registry() -> CheckInSessionRegistry:
    return CheckInSessionRegistry()


def get_check_in_settings() -> CheckInSettings:
    return get_settings().checkin


PatientDirectoryDep = Annotated[PatientDirectory, Depends(get_patient_directory)]
CheckInRepositoryDep = Annotated[CheckInRepository, Depends(get_check_in_repository)]
AnalysisServiceDep = Annotated[SymptomAnalysisService, Depends(get_analysis_service)]
ReportStorageDep = Annotated[ReportStorage, Depends(get_report_storage)]
ReportGeneratorDep = Annotated[ReportGenerator, Depends(get_report_generator)]
SpeechCaptureDep = Annotated[SpeechCaptureAdapter, Depends(get_speech_capture)]
IdentityProviderDep = Annotated[IdentityProvider, Depends(get_identity_provider)]
SessionRegistryDep = Annotated[CheckInSessionRegistry, Depends(get_session_registry)]
CheckInSettingsDep = Annotated[CheckInSettings, Depends(get_check_in_settings)]
