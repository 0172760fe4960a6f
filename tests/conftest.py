"""
Shared fakes and fixtures.

The fakes count their calls so tests can assert which remote operations a
workflow step issued.
"""

import itertools
from datetime import datetime
from typing import Dict, List, Optional, Sequence

import pytest

from clinicintake.adapters.external.analysis_service_mock import MockSymptomAnalysisService
from clinicintake.application.ports.repositories.check_in_repo import CheckInRepository
from clinicintake.application.ports.repositories.patient_repo import PatientDirectory
from clinicintake.application.ports.services.report_storage import ReportStorage
from clinicintake.application.ports.services.speech_service import SpeechRecognizer
from clinicintake.application.use_cases.check_in_workflow import CheckInWorkflow
from clinicintake.application.use_cases.generate_report import ReportGenerator
from clinicintake.core.config import CheckInSettings
from clinicintake.core.exceptions import ArtifactNotFoundError, ExternalServiceError, StoreError
from clinicintake.domain.entities.analysis import AnalysisResult
from clinicintake.domain.entities.check_in import CheckInRecord, SymptomTag
from clinicintake.domain.entities.patient import NewPatient, PatientRecord
from clinicintake.domain.enums.clinical import UrgencyTier
from clinicintake.domain.enums.workflow import Journey
from clinicintake.domain.value_objects.patient_id import PatientId

FIXED_TIME = datetime(2024, 1, 15, 9, 30)


class FakePatientDirectory(PatientDirectory):
    def __init__(self):
        self.records: Dict[str, PatientRecord] = {}
        self.create_calls = 0
        self.find_calls = 0
        self.fail_create = False
        self.fail_find = False
        self._ids = itertools.count(1000)

    def add(self, patient_id: str, first: str, last: str, conditions=()) -> PatientRecord:
        record = NewPatient(
            first_name=first,
            last_name=last,
            date_of_birth="1990-01-01",
            phone="555-123-4567",
            email=f"patient{patient_id}@example.com",
            existing_conditions=frozenset(conditions),
        ).with_id(PatientId(patient_id), FIXED_TIME)
        self.records[patient_id] = record
        return record

    async def create(self, patient: NewPatient) -> PatientRecord:
        self.create_calls += 1
        if self.fail_create:
            raise StoreError("insert rejected")
        record = patient.with_id(PatientId(f"p{next(self._ids)}"), FIXED_TIME)
        self.records[record.id] = record
        return record

    async def find_by_id(self, patient_id: str) -> Optional[PatientRecord]:
        self.find_calls += 1
        if self.fail_find:
            raise StoreError("lookup failed")
        return self.records.get(patient_id)


class FakeCheckInRepository(CheckInRepository):
    def __init__(self, vocabulary: Sequence[str] = ("headache", "fever", "cough")):
        self.vocabulary = [SymptomTag(f"sym-{name}", name) for name in vocabulary]
        self.check_ins: Dict[str, CheckInRecord] = {}
        self.links: Dict[str, List[SymptomTag]] = {}
        self.analyses: Dict[str, AnalysisResult] = {}
        self.create_calls = 0
        self.fail_create = False
        self._ids = itertools.count(1)

    async def create_check_in(self, patient_id: str, description: str, urgency: UrgencyTier) -> CheckInRecord:
        self.create_calls += 1
        if self.fail_create:
            raise StoreError("check-in insert rejected")
        record = CheckInRecord(
            check_in_id=f"c{next(self._ids)}",
            patient_id=patient_id,
            description=description,
            urgency=urgency,
            created_at=FIXED_TIME,
        )
        self.check_ins[record.check_in_id] = record
        return record

    async def extract_symptoms(self, text: str) -> List[SymptomTag]:
        lowered = text.lower()
        return [tag for tag in self.vocabulary if tag.name in lowered]

    async def link_symptoms(self, check_in_id: str, symptoms: Sequence[SymptomTag]) -> None:
        self.links.setdefault(check_in_id, []).extend(symptoms)

    async def save_analysis(self, check_in_id: str, analysis: AnalysisResult) -> str:
        self.analyses[check_in_id] = analysis
        return f"a-{check_in_id}"

    async def find_analysis(self, check_in_id: str) -> Optional[AnalysisResult]:
        return self.analyses.get(check_in_id)


class CountingAnalysisService(MockSymptomAnalysisService):
    def __init__(self):
        self.calls: List[str] = []
        self.fail = False

    async def analyze(self, description: str) -> AnalysisResult:
        self.calls.append(description)
        if self.fail:
            raise ExternalServiceError("Analysis", "model unavailable")
        return await super().analyze(description)


class InMemoryReportStorage(ReportStorage):
    def __init__(self):
        self.objects: Dict[str, str] = {}
        self.upload_calls = 0
        self.fail = False

    async def upload_text(self, key: str, text: str) -> str:
        self.upload_calls += 1
        if self.fail:
            raise StoreError("upload rejected")
        if key in self.objects:
            raise StoreError(f"Report already exists: {key}")
        self.objects[key] = text
        return key

    async def download_text(self, key: str) -> str:
        if key not in self.objects:
            raise ArtifactNotFoundError(key)
        return self.objects[key]


class FakeRecognizer(SpeechRecognizer):
    def __init__(self, text: str = "", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls = 0

    async def recognize_once(self, audio: bytes, locale: str) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.text


class FrozenClock:
    """Millisecond clock that never advances unless told to."""

    def __init__(self, millis: int = 1_700_000_000_000):
        self.millis = millis

    def __call__(self) -> int:
        return self.millis


@pytest.fixture
def patients():
    directory = FakePatientDirectory()
    directory.add("1234", "John", "Doe", ["Hypertension"])
    directory.add("5678", "Jane", "Smith", ["Diabetes"])
    directory.add("9012", "Alex", "Johnson", ["Asthma"])
    return directory


@pytest.fixture
def check_ins():
    return FakeCheckInRepository()


@pytest.fixture
def analysis_service():
    return CountingAnalysisService()


@pytest.fixture
def report_storage():
    return InMemoryReportStorage()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def report_generator(report_storage, clock):
    return ReportGenerator(report_storage, clock=clock)


@pytest.fixture
def make_workflow(patients, check_ins, analysis_service, report_generator):
    def factory(journey: Journey = Journey.NEW_PATIENT) -> CheckInWorkflow:
        return CheckInWorkflow(
            patients=patients,
            analysis_service=analysis_service,
            reports=report_generator,
            check_ins=check_ins,
            journey=journey,
            settings=CheckInSettings(),
        )

    return factory
