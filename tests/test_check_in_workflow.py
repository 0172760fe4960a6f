"""
Check-in workflow tests: state transitions, validation gates and failure recovery.
"""

import asyncio

import pytest

from clinicintake.application.dto.check_in_dto import RegistrationForm
from clinicintake.application.use_cases.check_in_workflow import CheckInWorkflow
from clinicintake.domain.enums.clinical import Severity
from clinicintake.domain.enums.workflow import CheckInState, Journey, NoticeLevel, SpeechTarget
from clinicintake.domain.errors import InvalidTransitionError

from conftest import FakePatientDirectory

LONG_DESCRIPTION = "Headache and mild fever since two days ago"  # 42 chars


def complete_form(**overrides) -> RegistrationForm:
    values = dict(
        first_name="Maria",
        last_name="Lopez",
        phone="555-987-6543",
        date_of_birth="1985-06-02",
        symptoms=LONG_DESCRIPTION,
        appointment_type="general",
        email="maria@example.com",
        existing_conditions=["Asthma", " asthma ", ""],
    )
    values.update(overrides)
    return RegistrationForm(**values)


class TestNewPatientJourney:
    @pytest.mark.asyncio
    async def test_registration_reaches_analyzed(self, make_workflow, patients, analysis_service):
        workflow = make_workflow()
        assert workflow.state == CheckInState.IDLE

        outcome = await workflow.submit_registration(complete_form())

        assert outcome.ok
        assert outcome.notice.level == NoticeLevel.SUCCESS
        assert "Check-in successful" in outcome.notice.message
        assert workflow.state == CheckInState.ANALYZED
        assert patients.create_calls == 1
        assert analysis_service.calls == [LONG_DESCRIPTION]
        assert workflow.patient.existing_conditions == frozenset({"Asthma"})
        assert workflow.patient.id in outcome.notice.message

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "missing", ["first_name", "last_name", "phone", "date_of_birth", "symptoms", "appointment_type"]
    )
    async def test_missing_required_field_issues_no_calls(
        self, make_workflow, patients, check_ins, analysis_service, missing
    ):
        workflow = make_workflow()

        outcome = await workflow.submit_registration(complete_form(**{missing: ""}))

        assert not outcome.ok
        assert outcome.error_code == "VALIDATION_ERROR"
        assert missing in outcome.notice.message
        assert workflow.state == CheckInState.IDLE
        assert patients.create_calls == 0
        assert check_ins.create_calls == 0
        assert analysis_service.calls == []

    @pytest.mark.asyncio
    async def test_short_description_rejected_before_remote_calls(
        self, make_workflow, patients, analysis_service
    ):
        workflow = make_workflow()

        outcome = await workflow.submit_registration(complete_form(symptoms="ouch"))

        assert not outcome.ok
        assert outcome.notice.message == "Please describe your symptoms in more detail."
        assert patients.create_calls == 0
        assert analysis_service.calls == []

    @pytest.mark.asyncio
    async def test_store_failure_returns_to_idle_with_generic_notice(self, make_workflow, patients):
        patients.fail_create = True
        workflow = make_workflow()

        outcome = await workflow.submit_registration(complete_form())

        assert not outcome.ok
        assert outcome.error_code == "STORE_ERROR"
        assert outcome.notice.message == "We couldn't complete your check-in. Please try again."
        assert "insert rejected" not in outcome.notice.message
        assert workflow.state == CheckInState.IDLE
        assert workflow.patient is None
        assert workflow.analysis is None

    @pytest.mark.asyncio
    async def test_analysis_failure_keeps_no_partial_result(
        self, make_workflow, analysis_service
    ):
        analysis_service.fail = True
        workflow = make_workflow()

        outcome = await workflow.submit_registration(complete_form())

        assert not outcome.ok
        assert outcome.error_code == "EXTERNAL_SERVICE_ERROR"
        assert workflow.state == CheckInState.IDLE
        assert workflow.patient is None

    @pytest.mark.asyncio
    async def test_verify_not_allowed_on_new_patient_journey(self, make_workflow):
        workflow = make_workflow()
        with pytest.raises(InvalidTransitionError):
            await workflow.verify_identity("1234")


class TestReturningPatientJourney:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "patient_id,name", [("1234", "John Doe"), ("5678", "Jane Smith"), ("9012", "Alex Johnson")]
    )
    async def test_known_ids_are_welcomed(self, make_workflow, patient_id, name):
        workflow = make_workflow(Journey.RETURNING_PATIENT)
        assert workflow.state == CheckInState.IDENTITY_PENDING

        outcome = await workflow.verify_identity(patient_id)

        assert outcome.ok
        assert outcome.notice.message == f"Welcome back, {name}!"
        assert workflow.state == CheckInState.IDENTITY_VERIFIED
        assert workflow.patient.full_name == name

    @pytest.mark.asyncio
    async def test_unknown_id_stays_pending(self, make_workflow):
        workflow = make_workflow(Journey.RETURNING_PATIENT)

        outcome = await workflow.verify_identity("0000")

        assert not outcome.ok
        assert outcome.error_code == "PATIENT_NOT_FOUND"
        assert outcome.notice.level == NoticeLevel.ERROR
        assert workflow.state == CheckInState.IDENTITY_PENDING

    @pytest.mark.asyncio
    @pytest.mark.parametrize("patient_id", ["", "12", "   1  "])
    async def test_short_id_rejected_without_lookup(self, make_workflow, patients, patient_id):
        workflow = make_workflow(Journey.RETURNING_PATIENT)

        outcome = await workflow.verify_identity(patient_id)

        assert outcome.notice.message == "Please enter a valid patient ID"
        assert patients.find_calls == 0

    @pytest.mark.asyncio
    async def test_lookup_failure_shows_retry_notice(self, make_workflow, patients):
        patients.fail_find = True
        workflow = make_workflow(Journey.RETURNING_PATIENT)

        outcome = await workflow.verify_identity("1234")

        assert outcome.notice.message == "Error verifying patient ID. Please try again."
        assert workflow.state == CheckInState.IDENTITY_PENDING

    @pytest.mark.asyncio
    async def test_quick_check_in_analyzes_once(self, make_workflow, patients, analysis_service):
        workflow = make_workflow(Journey.RETURNING_PATIENT)
        await workflow.verify_identity("1234")

        outcome = await workflow.submit_symptoms(LONG_DESCRIPTION, "soon")

        assert outcome.ok
        assert outcome.notice.message == "Analysis complete!"
        assert workflow.state == CheckInState.ANALYZED
        assert len(analysis_service.calls) == 1
        assert patients.create_calls == 0
        assert workflow.analysis.severity in {Severity.MILD, Severity.MODERATE, Severity.SEVERE}

    @pytest.mark.asyncio
    async def test_quick_check_in_short_description(self, make_workflow, analysis_service):
        workflow = make_workflow(Journey.RETURNING_PATIENT)
        await workflow.verify_identity("1234")

        outcome = await workflow.submit_symptoms("ouch")

        assert outcome.notice.message == "Please describe your symptoms in more detail."
        assert workflow.state == CheckInState.IDENTITY_VERIFIED
        assert analysis_service.calls == []

    @pytest.mark.asyncio
    async def test_quick_check_in_failure_returns_to_verified(self, make_workflow, check_ins):
        check_ins.fail_create = True
        workflow = make_workflow(Journey.RETURNING_PATIENT)
        await workflow.verify_identity("1234")

        outcome = await workflow.submit_symptoms(LONG_DESCRIPTION)

        assert outcome.notice.message == "Error analyzing symptoms. Please try again."
        assert workflow.state == CheckInState.IDENTITY_VERIFIED
        assert workflow.analysis is None

    @pytest.mark.asyncio
    async def test_symptoms_before_verification_rejected(self, make_workflow):
        workflow = make_workflow(Journey.RETURNING_PATIENT)
        with pytest.raises(InvalidTransitionError):
            await workflow.submit_symptoms(LONG_DESCRIPTION)


class TestReportAndReset:
    @pytest.mark.asyncio
    async def test_report_ready_records_key(self, make_workflow, report_storage):
        workflow = make_workflow(Journey.RETURNING_PATIENT)
        await workflow.verify_identity("5678")
        await workflow.submit_symptoms(LONG_DESCRIPTION)

        outcome = await workflow.generate_report()

        assert outcome.ok
        assert outcome.notice.message == "Report generated successfully!"
        assert workflow.state == CheckInState.REPORT_READY
        assert workflow.artifact_key.startswith("patient-report-5678-")
        assert workflow.artifact_key in report_storage.objects

    @pytest.mark.asyncio
    async def test_report_failure_is_retryable(self, make_workflow, report_storage):
        workflow = make_workflow()
        await workflow.submit_registration(complete_form())
        report_storage.fail = True

        outcome = await workflow.generate_report()

        assert outcome.notice.message == "Error generating report. Please try again."
        assert workflow.state == CheckInState.ANALYZED
        assert workflow.artifact_key is None

        report_storage.fail = False
        retry = await workflow.generate_report()
        assert retry.ok
        assert workflow.state == CheckInState.REPORT_READY

    @pytest.mark.asyncio
    async def test_report_requires_analysis(self, make_workflow):
        workflow = make_workflow()
        with pytest.raises(InvalidTransitionError):
            await workflow.generate_report()

    @pytest.mark.asyncio
    async def test_reset_clears_session(self, make_workflow):
        workflow = make_workflow(Journey.RETURNING_PATIENT)
        await workflow.verify_identity("9012")
        await workflow.submit_symptoms(LONG_DESCRIPTION)
        await workflow.generate_report()

        workflow.reset()

        snapshot = workflow.snapshot()
        assert snapshot["state"] == CheckInState.IDENTITY_PENDING.value
        assert snapshot["patient"] is None
        assert snapshot["analysis"] is None
        assert snapshot["artifact_key"] is None
        assert snapshot["last_notice"] is None


class TestDictation:
    def test_transcripts_append_with_space(self, make_workflow):
        workflow = make_workflow()
        assert workflow.begin_dictation(SpeechTarget.SYMPTOMS).ok
        workflow.apply_transcript(SpeechTarget.SYMPTOMS, "Sore throat")
        workflow.begin_dictation(SpeechTarget.SYMPTOMS)
        workflow.apply_transcript(SpeechTarget.SYMPTOMS, "and a cough")

        assert workflow.snapshot()["drafts"] == {"symptoms": "Sore throat and a cough"}
        assert workflow.snapshot()["active_dictation"] is None

    def test_second_target_rejected_while_active(self, make_workflow):
        workflow = make_workflow()
        workflow.begin_dictation(SpeechTarget.FIRST_NAME)

        outcome = workflow.begin_dictation(SpeechTarget.SYMPTOMS)

        assert not outcome.ok
        assert outcome.error_code == "SPEECH_BUSY"
        assert workflow.snapshot()["active_dictation"] == "first_name"

        workflow.end_dictation(SpeechTarget.FIRST_NAME)
        assert workflow.begin_dictation(SpeechTarget.SYMPTOMS).ok

    def test_quick_check_in_only_dictates_symptoms(self, make_workflow):
        workflow = make_workflow(Journey.RETURNING_PATIENT)

        outcome = workflow.begin_dictation(SpeechTarget.EMAIL)

        assert not outcome.ok
        assert outcome.error_code == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_dictated_draft_fills_blank_form_field(self, make_workflow, analysis_service):
        workflow = make_workflow()
        workflow.begin_dictation(SpeechTarget.SYMPTOMS)
        workflow.apply_transcript(SpeechTarget.SYMPTOMS, LONG_DESCRIPTION)

        outcome = await workflow.submit_registration(complete_form(symptoms=""))

        assert outcome.ok
        assert analysis_service.calls == [LONG_DESCRIPTION]


class SlowPatientDirectory(FakePatientDirectory):
    """Lookups block until ``release`` is set."""

    def __init__(self):
        super().__init__()
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def find_by_id(self, patient_id):
        self.entered.set()
        await self.release.wait()
        return await super().find_by_id(patient_id)


class TestConcurrentReset:
    @pytest.mark.asyncio
    async def test_reset_rejected_while_lookup_in_flight(
        self, check_ins, analysis_service, report_generator
    ):
        patients = SlowPatientDirectory()
        patients.add("1234", "John", "Doe")
        workflow = CheckInWorkflow(
            patients=patients,
            analysis_service=analysis_service,
            reports=report_generator,
            check_ins=check_ins,
            journey=Journey.RETURNING_PATIENT,
        )

        lookup = asyncio.create_task(workflow.verify_identity("1234"))
        await patients.entered.wait()

        with pytest.raises(InvalidTransitionError):
            workflow.reset()

        patients.release.set()
        outcome = await lookup

        assert outcome.ok
        assert workflow.state == CheckInState.IDENTITY_VERIFIED

        workflow.reset()
        assert workflow.state == CheckInState.IDENTITY_PENDING
        assert workflow.patient is None


class TestNotices:
    @pytest.mark.asyncio
    async def test_only_latest_notice_is_kept(self, make_workflow):
        workflow = make_workflow(Journey.RETURNING_PATIENT)

        await workflow.verify_identity("12")
        await workflow.verify_identity("0000")
        await workflow.verify_identity("1234")

        assert workflow.last_notice.message == "Welcome back, John Doe!"
        assert workflow.snapshot()["last_notice"]["level"] == "success"
