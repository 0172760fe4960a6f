"""Check-in session endpoints.

A session wraps one CheckInWorkflow. Step endpoints return the workflow's
notice plus a fresh snapshot; failed steps carry the snapshot in the error
details.
"""

import logging

from fastapi import APIRouter, File, Request, UploadFile, status

from ...application.dto.check_in_dto import StepOutcome
from ...application.use_cases.check_in_workflow import CheckInWorkflow
from ...core.structured_logger import log_event
from ...domain.enums.workflow import SpeechTarget
from ..deps import (
    AnalysisServiceDep,
    CheckInRepositoryDep,
    CheckInSettingsDep,
    PatientDirectoryDep,
    ReportGeneratorDep,
    SessionRegistryDep,
    SpeechCaptureDep,
)
from ..errors import SessionNotFoundError, ValidationError
from ..schemas.check_in import (
    CheckInSessionSchema,
    RegistrationRequest,
    StartSessionRequest,
    StepResultSchema,
    SymptomsRequest,
    VerifyIdentityRequest,
)
from ..schemas.common import ApiResponse, ErrorResponse
from ..utils.responses import fail, ok

router = APIRouter(prefix="/check-in/sessions", tags=["Check-in"])
logger = logging.getLogger("clinicintake")

OUTCOME_STATUS = {
    "VALIDATION_ERROR": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "PATIENT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "SPEECH_BUSY": status.HTTP_409_CONFLICT,
    "SPEECH_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
}

STEP_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Session or patient not found"},
    409: {"model": ErrorResponse, "description": "Step not allowed in the current state"},
    422: {"model": ErrorResponse, "description": "Validation failed"},
    502: {"model": ErrorResponse, "description": "Store or downstream failure"},
}


def _session_view(session_id: str, workflow: CheckInWorkflow) -> CheckInSessionSchema:
    return CheckInSessionSchema(session_id=session_id, **workflow.snapshot())


def _step_response(request: Request, session_id: str, workflow: CheckInWorkflow, outcome: StepOutcome):
    session = _session_view(session_id, workflow)
    if outcome.ok:
        return ok(
            request,
            data=StepResultSchema(notice=outcome.notice.to_dict(), session=session),
            message=outcome.notice.message,
        )
    return fail(
        request,
        error=outcome.error_code or "CHECK_IN_FAILED",
        message=outcome.notice.message,
        details={"session": session.model_dump(mode="json")},
        status_code=OUTCOME_STATUS.get(outcome.error_code, status.HTTP_502_BAD_GATEWAY),
    )


def _lookup(sessions, session_id: str) -> CheckInWorkflow:
    workflow = sessions.get(session_id)
    if workflow is None:
        raise SessionNotFoundError(session_id)
    return workflow


@router.post(
    "",
    response_model=ApiResponse[CheckInSessionSchema],
    status_code=status.HTTP_201_CREATED,
    summary="Start a check-in session",
)
async def start_session(
    http_request: Request,
    request: StartSessionRequest,
    sessions: SessionRegistryDep,
    patients: PatientDirectoryDep,
    check_ins: CheckInRepositoryDep,
    analysis_service: AnalysisServiceDep,
    reports: ReportGeneratorDep,
    settings: CheckInSettingsDep,
):
    workflow = CheckInWorkflow(
        patients=patients,
        analysis_service=analysis_service,
        reports=reports,
        check_ins=check_ins,
        journey=request.journey,
        settings=settings,
    )
    session_id = sessions.add(workflow)
    log_event(
        logger,
        logging.INFO,
        "Check-in session started",
        session_id=session_id,
        journey=request.journey.value,
    )
    return ok(http_request, data=_session_view(session_id, workflow), message="Created")


@router.get("/{session_id}", response_model=ApiResponse[CheckInSessionSchema])
async def get_session(http_request: Request, session_id: str, sessions: SessionRegistryDep):
    workflow = _lookup(sessions, session_id)
    return ok(http_request, data=_session_view(session_id, workflow))


@router.delete("/{session_id}", response_model=ApiResponse[dict])
async def end_session(http_request: Request, session_id: str, sessions: SessionRegistryDep):
    if not sessions.discard(session_id):
        raise SessionNotFoundError(session_id)
    return ok(http_request, data={"session_id": session_id}, message="Deleted")


@router.post(
    "/{session_id}/register",
    response_model=ApiResponse[StepResultSchema],
    responses=STEP_RESPONSES,
    summary="Submit the new-patient registration form",
)
async def submit_registration(
    http_request: Request, session_id: str, request: RegistrationRequest, sessions: SessionRegistryDep
):
    workflow = _lookup(sessions, session_id)
    outcome = await workflow.submit_registration(request.to_form())
    return _step_response(http_request, session_id, workflow, outcome)


@router.post(
    "/{session_id}/verify",
    response_model=ApiResponse[StepResultSchema],
    responses=STEP_RESPONSES,
    summary="Verify a returning patient's id",
)
async def verify_identity(
    http_request: Request, session_id: str, request: VerifyIdentityRequest, sessions: SessionRegistryDep
):
    workflow = _lookup(sessions, session_id)
    outcome = await workflow.verify_identity(request.patient_id)
    return _step_response(http_request, session_id, workflow, outcome)


@router.post(
    "/{session_id}/symptoms",
    response_model=ApiResponse[StepResultSchema],
    responses=STEP_RESPONSES,
    summary="Submit symptoms for a verified returning patient",
)
async def submit_symptoms(
    http_request: Request, session_id: str, request: SymptomsRequest, sessions: SessionRegistryDep
):
    workflow = _lookup(sessions, session_id)
    outcome = await workflow.submit_symptoms(request.description, request.urgency)
    return _step_response(http_request, session_id, workflow, outcome)


@router.post(
    "/{session_id}/report",
    response_model=ApiResponse[StepResultSchema],
    responses=STEP_RESPONSES,
    summary="Generate and store the check-in report",
)
async def generate_report(http_request: Request, session_id: str, sessions: SessionRegistryDep):
    workflow = _lookup(sessions, session_id)
    outcome = await workflow.generate_report()
    return _step_response(http_request, session_id, workflow, outcome)


@router.post("/{session_id}/reset", response_model=ApiResponse[CheckInSessionSchema])
async def reset_session(http_request: Request, session_id: str, sessions: SessionRegistryDep):
    workflow = _lookup(sessions, session_id)
    workflow.reset()
    return ok(http_request, data=_session_view(session_id, workflow), message="Reset")


@router.post(
    "/{session_id}/dictation/{target}",
    response_model=ApiResponse[StepResultSchema],
    responses={**STEP_RESPONSES, 503: {"model": ErrorResponse, "description": "Speech unavailable"}},
    summary="Dictate one utterance into a form field",
)
async def dictate(
    http_request: Request,
    session_id: str,
    target: SpeechTarget,
    sessions: SessionRegistryDep,
    capture: SpeechCaptureDep,
    audio: UploadFile = File(..., description="WAV audio of a single utterance"),
):
    """Recognize one utterance and append the transcript to the target's draft."""
    workflow = _lookup(sessions, session_id)
    data = await audio.read()
    if not data:
        raise ValidationError("Audio upload is empty", {"field": "audio"})

    outcome = workflow.begin_dictation(target)
    if not outcome.ok:
        return _step_response(http_request, session_id, workflow, outcome)

    handle = capture.begin(
        data,
        on_text=lambda text: workflow.apply_transcript(target, text),
        on_error=lambda message: workflow.dictation_failed(target, message),
        target=target,
    )
    if handle is None:
        return _step_response(
            http_request,
            session_id,
            workflow,
            StepOutcome.failure("SPEECH_UNAVAILABLE", workflow.last_notice.message),
        )

    try:
        await handle.wait()
    finally:
        capture.end(handle)
        workflow.end_dictation(target)

    last = workflow.last_notice
    if last.code:
        return _step_response(
            http_request, session_id, workflow, StepOutcome.failure(last.code, last.message)
        )
    return _step_response(http_request, session_id, workflow, StepOutcome.success(last.message))
