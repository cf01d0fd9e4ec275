"""API endpoints for the patient service."""

from datetime import UTC, datetime
from typing import Annotated, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Response, status

from patient_service import __version__
from patient_service.dependencies import get_patient_service
from patient_service.models.health import HealthResponse
from patient_service.models.patient import PatientRequest, PatientResponse
from patient_service.services.patients import PatientService
from patient_service.services.results import Failure, FailureKind, Ok
from patient_service.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

PatientServiceDep = Annotated[PatientService, Depends(get_patient_service)]

FAILURE_STATUS_CODES = {
    FailureKind.EMAIL_CONFLICT: status.HTTP_409_CONFLICT,
    FailureKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureKind.VALIDATION_FAILURE: status.HTTP_400_BAD_REQUEST,
    FailureKind.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    FailureKind.BILLING_FAILURE: status.HTTP_502_BAD_GATEWAY,
    FailureKind.PUBLISH_FAILURE: status.HTTP_502_BAD_GATEWAY,
}


def raise_for_failure(failure: Failure) -> NoReturn:
    """Translate a service failure into an HTTP error."""
    detail: dict[str, str] = {"error": failure.kind.value, "message": failure.message}
    if failure.patient_id is not None:
        # The record exists even though the request failed
        detail["patient_id"] = failure.patient_id

    raise HTTPException(status_code=FAILURE_STATUS_CODES[failure.kind], detail=detail)


async def ensure_patient_exists(service: PatientService, patient_id: str) -> None:
    """Raise 404 if the patient is unknown."""
    match await service.exists_by_id(patient_id):
        case Ok(value=True):
            return
        case Ok(value=False):
            logger.warning(f"Patient not found with ID: {patient_id}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Patient not found: {patient_id}")
        case Failure() as failure:
            raise_for_failure(failure)


@router.get("/patients", response_model=list[PatientResponse], tags=["Patients"])
async def get_patients(service: PatientServiceDep) -> list[PatientResponse]:
    """Retrieve all patients."""
    match await service.list_patients():
        case Ok(value=patients):
            return patients
        case Failure() as failure:
            raise_for_failure(failure)


@router.post(
    "/patients",
    response_model=PatientResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Patients"],
)
async def create_patient(request: PatientRequest, service: PatientServiceDep) -> PatientResponse:
    """Create a new patient.

    A 502 response means the patient record was stored but billing or event
    publishing failed; the detail carries the stored ``patient_id``.
    """
    match await service.create_patient(request):
        case Ok(value=patient):
            return patient
        case Failure() as failure:
            raise_for_failure(failure)


@router.put("/patients/{patient_id}", response_model=PatientResponse, tags=["Patients"])
async def update_patient(patient_id: str, request: PatientRequest, service: PatientServiceDep) -> PatientResponse:
    """Update a patient."""
    await ensure_patient_exists(service, patient_id)

    match await service.update_patient(patient_id, request):
        case Ok(value=patient):
            return patient
        case Failure() as failure:
            raise_for_failure(failure)


@router.delete("/patients/{patient_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Patients"])
async def delete_patient(patient_id: str, service: PatientServiceDep) -> Response:
    """Delete a patient."""
    await ensure_patient_exists(service, patient_id)

    match await service.delete_patient(patient_id):
        case Ok():
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        case Failure() as failure:
            raise_for_failure(failure)


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        version=__version__,
    )
