"""Check-in workflow for new and returning patients.

State machine::

    new patient:        Idle -> Submitting -> Analyzed
    returning patient:  IdentityPending -> IdentityVerified -> Submitting -> Analyzed
    both:               Analyzed -> ReportPending -> ReportReady
                        reset() -> Idle / IdentityPending

Remote failures never escape an operation: they are logged, turned into an
error notice and the workflow falls back to the last stable state.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from ...core.config import CheckInSettings
from ...domain.entities.analysis import AnalysisResult
from ...domain.entities.check_in import CheckInRecord
from ...domain.entities.patient import PatientRecord
from ...domain.enums.clinical import UrgencyTier
from ...domain.enums.workflow import CheckInState, Journey, NoticeLevel, SpeechTarget
from ...domain.errors import IntakeValidationError, InvalidTransitionError
from ..dto.check_in_dto import Notice, RegistrationForm, StepOutcome
from ..ports.repositories.check_in_repo import CheckInRepository
from ..ports.repositories.patient_repo import PatientDirectory
from ..ports.services.analysis_service import SymptomAnalysisService
from .generate_report import ReportGenerator
from .record_check_in import RecordCheckInUseCase

logger = logging.getLogger(__name__)

# User-facing wording
MSG_REGISTERED = "Check-in successful! We'll call your name shortly. Your patient ID is {patient_id}."
MSG_REGISTRATION_FAILED = "We couldn't complete your check-in. Please try again."
MSG_INVALID_PATIENT_ID = "Please enter a valid patient ID"
MSG_PATIENT_NOT_FOUND = "Patient ID not found. Please try again or register as a new patient."
MSG_VERIFY_FAILED = "Error verifying patient ID. Please try again."
MSG_WELCOME_BACK = "Welcome back, {name}!"
MSG_DESCRIPTION_TOO_SHORT = "Please describe your symptoms in more detail."
MSG_ANALYSIS_COMPLETE = "Analysis complete!"
MSG_ANALYSIS_FAILED = "Error analyzing symptoms. Please try again."
MSG_REPORT_READY = "Report generated successfully!"
MSG_REPORT_FAILED = "Error generating report. Please try again."
MSG_LISTENING = "Listening... Speak now."
MSG_SPEECH_CAPTURED = "Speech captured successfully!"
MSG_SPEECH_BUSY = "Finish dictating into '{active}' before starting another field."

QUICK_CHECK_IN_TARGETS = frozenset({SpeechTarget.SYMPTOMS})


class CheckInWorkflow:
    """One patient's check-in session."""

    def __init__(
        self,
        patients: PatientDirectory,
        analysis_service: SymptomAnalysisService,
        reports: ReportGenerator,
        check_ins: CheckInRepository,
        journey: Journey = Journey.NEW_PATIENT,
        settings: Optional[CheckInSettings] = None,
    ) -> None:
        self._patients = patients
        self._reports = reports
        self._record_check_in = RecordCheckInUseCase(check_ins, analysis_service)
        self._settings = settings or CheckInSettings()
        self.journey = journey
        self._lock = asyncio.Lock()
        self._clear()

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    @property
    def initial_state(self) -> CheckInState:
        if self.journey is Journey.RETURNING_PATIENT:
            return CheckInState.IDENTITY_PENDING
        return CheckInState.IDLE

    @property
    def state(self) -> CheckInState:
        return self._state

    @property
    def patient(self) -> Optional[PatientRecord]:
        return self._patient

    @property
    def analysis(self) -> Optional[AnalysisResult]:
        return self._analysis

    @property
    def artifact_key(self) -> Optional[str]:
        return self._artifact_key

    @property
    def last_notice(self) -> Optional[Notice]:
        return self._last_notice

    def _clear(self) -> None:
        self._state = self.initial_state
        self._patient: Optional[PatientRecord] = None
        self._check_in: Optional[CheckInRecord] = None
        self._analysis: Optional[AnalysisResult] = None
        self._artifact_key: Optional[str] = None
        self._drafts: Dict[SpeechTarget, str] = {}
        self._active_dictation: Optional[SpeechTarget] = None
        self._last_notice: Optional[Notice] = None

    def _require(self, operation: str, *allowed: CheckInState) -> None:
        if self._state not in allowed:
            raise InvalidTransitionError(operation, self._state.value)

    def _finish(self, outcome: StepOutcome) -> StepOutcome:
        self._last_notice = outcome.notice
        return outcome

    def _fail_remote(self, operation: str, error: Exception, message: str) -> StepOutcome:
        logger.error(
            f"Check-in {operation} failed in state={self._state.value}: {error}",
            exc_info=error,
        )
        code = getattr(error, "error_code", None) or "UNEXPECTED_ERROR"
        return self._finish(StepOutcome.failure(code, message))

    # ------------------------------------------------------------------
    # New-patient journey
    # ------------------------------------------------------------------

    async def submit_registration(self, form: RegistrationForm) -> StepOutcome:
        """Register a new patient, record the visit and analyze the symptoms.

        Blank form fields are filled from dictated drafts. Validation runs
        before any remote call; on failure the state stays Idle.
        """
        async with self._lock:
            if self.journey is not Journey.NEW_PATIENT:
                raise InvalidTransitionError("register", self._state.value)
            self._require("register", CheckInState.IDLE)

            form = self._merge_drafts(form)
            try:
                form.validate(self._settings.min_description_length)
            except IntakeValidationError as e:
                return self._finish(StepOutcome.failure(e.error_code, e.message))

            self._state = CheckInState.SUBMITTING
            try:
                patient = await self._patients.create(form.to_new_patient())
                recorded = await self._record_check_in.execute(
                    patient.id, form.symptoms.strip(), UrgencyTier(form.urgency)
                )
            except Exception as e:
                self._state = CheckInState.IDLE
                return self._fail_remote("registration", e, MSG_REGISTRATION_FAILED)

            self._patient = patient
            self._check_in = recorded.check_in
            self._analysis = recorded.analysis
            self._state = CheckInState.ANALYZED
            return self._finish(
                StepOutcome.success(MSG_REGISTERED.format(patient_id=patient.id))
            )

    def _merge_drafts(self, form: RegistrationForm) -> RegistrationForm:
        changes = {}
        for target, text in self._drafts.items():
            if not (getattr(form, target.value) or "").strip():
                changes[target.value] = text
        return replace(form, **changes) if changes else form

    # ------------------------------------------------------------------
    # Returning-patient journey
    # ------------------------------------------------------------------

    async def verify_identity(self, patient_id: str) -> StepOutcome:
        """Look up a returning patient. Not-found keeps the workflow in IdentityPending."""
        async with self._lock:
            self._require("verify identity", CheckInState.IDENTITY_PENDING)

            patient_id = (patient_id or "").strip()
            if len(patient_id) < self._settings.min_patient_id_length:
                return self._finish(
                    StepOutcome.failure("VALIDATION_ERROR", MSG_INVALID_PATIENT_ID)
                )

            try:
                patient = await self._patients.find_by_id(patient_id)
            except Exception as e:
                return self._fail_remote("identity lookup", e, MSG_VERIFY_FAILED)

            if patient is None:
                return self._finish(
                    StepOutcome.failure("PATIENT_NOT_FOUND", MSG_PATIENT_NOT_FOUND)
                )

            self._patient = patient
            self._state = CheckInState.IDENTITY_VERIFIED
            return self._finish(
                StepOutcome.success(MSG_WELCOME_BACK.format(name=patient.full_name))
            )

    async def submit_symptoms(
        self, description: Optional[str] = None, urgency: str = UrgencyTier.REGULAR.value
    ) -> StepOutcome:
        """Quick check-in for a verified patient. Patient creation is skipped."""
        async with self._lock:
            self._require("submit symptoms", CheckInState.IDENTITY_VERIFIED)

            if description is None:
                description = self._drafts.get(SpeechTarget.SYMPTOMS, "")
            description = description.strip()
            if len(description) < self._settings.min_description_length:
                return self._finish(
                    StepOutcome.failure("VALIDATION_ERROR", MSG_DESCRIPTION_TOO_SHORT)
                )
            try:
                urgency_tier = UrgencyTier(urgency)
            except ValueError:
                return self._finish(
                    StepOutcome.failure("VALIDATION_ERROR", f"Unknown urgency: {urgency}")
                )

            self._state = CheckInState.SUBMITTING
            try:
                recorded = await self._record_check_in.execute(
                    self._patient.id, description, urgency_tier
                )
            except Exception as e:
                self._state = CheckInState.IDENTITY_VERIFIED
                return self._fail_remote("symptom analysis", e, MSG_ANALYSIS_FAILED)

            self._check_in = recorded.check_in
            self._analysis = recorded.analysis
            self._state = CheckInState.ANALYZED
            return self._finish(StepOutcome.success(MSG_ANALYSIS_COMPLETE))

    # ------------------------------------------------------------------
    # Shared tail
    # ------------------------------------------------------------------

    async def generate_report(self) -> StepOutcome:
        """Store a report for the analyzed check-in. Failure is retryable."""
        async with self._lock:
            self._require("generate report", CheckInState.ANALYZED)

            self._state = CheckInState.REPORT_PENDING
            try:
                key = await self._reports.generate(self._patient, self._analysis)
            except Exception as e:
                self._state = CheckInState.ANALYZED
                return self._fail_remote("report generation", e, MSG_REPORT_FAILED)

            self._artifact_key = key
            self._state = CheckInState.REPORT_READY
            return self._finish(StepOutcome.success(MSG_REPORT_READY))

    def reset(self) -> None:
        """Discard all session-local state and return to the journey's start.

        Rejected while another operation holds the session, including an
        identity lookup that has not changed the state yet.
        """
        if self._lock.locked() or self._state.is_busy:
            raise InvalidTransitionError("reset", self._state.value)
        self._clear()

    # ------------------------------------------------------------------
    # Dictation routing
    # ------------------------------------------------------------------

    def allowed_targets(self) -> frozenset:
        if self.journey is Journey.RETURNING_PATIENT:
            return QUICK_CHECK_IN_TARGETS
        return frozenset(SpeechTarget)

    def begin_dictation(self, target: SpeechTarget) -> StepOutcome:
        """Claim the single dictation slot for ``target``."""
        if target not in self.allowed_targets():
            return self._finish(
                StepOutcome.failure(
                    "VALIDATION_ERROR", f"Dictation is not available for '{target.value}'."
                )
            )
        if self._active_dictation is not None and self._active_dictation is not target:
            return self._finish(
                StepOutcome.failure(
                    "SPEECH_BUSY", MSG_SPEECH_BUSY.format(active=self._active_dictation.value)
                )
            )
        self._active_dictation = target
        return self._finish(StepOutcome.success(MSG_LISTENING, NoticeLevel.INFO))

    def apply_transcript(self, target: SpeechTarget, text: str) -> None:
        """Append a final transcript to the target's draft and release the slot."""
        text = (text or "").strip()
        if text:
            previous = self._drafts.get(target, "")
            self._drafts[target] = f"{previous} {text}" if previous else text
        if self._active_dictation is target:
            self._active_dictation = None
        self._finish(StepOutcome.success(MSG_SPEECH_CAPTURED))

    def dictation_failed(self, target: SpeechTarget, message: str) -> None:
        if self._active_dictation is target:
            self._active_dictation = None
        self._finish(StepOutcome.failure("SPEECH_ERROR", message))

    def end_dictation(self, target: SpeechTarget) -> None:
        if self._active_dictation is target:
            self._active_dictation = None

    # ------------------------------------------------------------------
    # Read model
    # ------------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        patient = None
        if self._patient is not None:
            patient = {
                "id": self._patient.id,
                "first_name": self._patient.first_name,
                "last_name": self._patient.last_name,
                "date_of_birth": self._patient.date_of_birth,
                "phone": self._patient.phone,
                "email": self._patient.email,
                "existing_conditions": sorted(self._patient.existing_conditions),
            }
        return {
            "journey": self.journey.value,
            "state": self._state.value,
            "patient": patient,
            "check_in_id": self._check_in.check_in_id if self._check_in else None,
            "analysis": self._analysis.to_document() if self._analysis else None,
            "artifact_key": self._artifact_key,
            "drafts": {target.value: text for target, text in self._drafts.items()},
            "active_dictation": self._active_dictation.value if self._active_dictation else None,
            "last_notice": self._last_notice.to_dict() if self._last_notice else None,
        }
