"""Patient directory endpoints."""

import logging

from fastapi import APIRouter, Request, status

from ..deps import PatientDirectoryDep
from ..errors import PatientNotFoundError
from ..schemas.common import ApiResponse, ErrorResponse
from ..schemas.patients import CreatePatientRequest, PatientSchema
from ..utils.responses import ok

router = APIRouter(prefix="/patients", tags=["Patients"])
logger = logging.getLogger("clinicintake")


@router.post(
    "",
    response_model=ApiResponse[PatientSchema],
    status_code=status.HTTP_201_CREATED,
    summary="Create a patient record",
    responses={
        422: {"model": ErrorResponse, "description": "Invalid input"},
        502: {"model": ErrorResponse, "description": "Patient store unavailable"},
    },
)
async def create_patient(
    http_request: Request,
    request: CreatePatientRequest,
    patients: PatientDirectoryDep,
):
    """Create a patient and its existing conditions. The store assigns the id."""
    record = await patients.create(request.to_new_patient())
    return ok(http_request, data=PatientSchema.from_record(record), message="Created")


@router.get(
    "/{patient_id}",
    response_model=ApiResponse[PatientSchema],
    summary="Look up a patient by id",
    responses={404: {"model": ErrorResponse, "description": "Patient not found"}},
)
async def get_patient(http_request: Request, patient_id: str, patients: PatientDirectoryDep):
    record = await patients.find_by_id(patient_id)
    if record is None:
        raise PatientNotFoundError(patient_id)
    return ok(http_request, data=PatientSchema.from_record(record))
