"""Job lifecycle and application endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.api.dependencies import (
    ActorIdDep,
    ApplicationRegistryDep,
    JobLifecycleEngineDep,
)
from src.api.schemas.application import (
    ApplicationCreateRequest,
    ApplicationListResponse,
    ApplicationSubmitResponse,
)
from src.api.schemas.job import (
    ApplicationResponse,
    ArrivalRequest,
    AssignWorkerRequest,
    CancelJobRequest,
    EtaUpdateRequest,
    JobCreateRequest,
    JobListResponse,
    JobOperationResponse,
    JobResponse,
)
from src.application.services.job_lifecycle_engine import (
    CreateJobRequest,
    LifecycleResult,
)
from src.config.logging import get_logger
from src.domain.value_objects import JobStatus

logger = get_logger(__name__)
router = APIRouter(prefix="/jobs", tags=["jobs"])


def _operation_response(result: LifecycleResult) -> JobOperationResponse:
    return JobOperationResponse(
        job=JobResponse.from_entity(result.job),
        warnings=JobOperationResponse.warnings_from(result.warnings),
    )


@router.post("", response_model=JobOperationResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    job_data: JobCreateRequest,
    engine: JobLifecycleEngineDep,
    actor_id: ActorIdDep,
):
    """Post a new open job for the acting household."""
    request = CreateJobRequest(
        title=job_data.title,
        service_type=job_data.service_type,
        description=job_data.description,
        schedule=job_data.schedule,
        salary=job_data.salary,
        pay_frequency=job_data.pay_frequency,
        household_id=job_data.household_id or actor_id,
        household_name=job_data.household_name,
        household_location=job_data.household_location,
        benefits=job_data.benefits_value(),
    )
    result = await engine.create_job(request, actor_id)
    return _operation_response(result)


@router.get("", response_model=JobListResponse)
async def list_jobs(
    engine: JobLifecycleEngineDep,
    job_status: Optional[JobStatus] = Query(None, alias="status"),
    service_type: Optional[str] = None,
    household_id: Optional[str] = None,
    worker_id: Optional[str] = None,
    limit: int = Query(20, ge=1),
    offset: int = Query(0, ge=0),
):
    """List jobs, newest first."""
    jobs = await engine.list_jobs(
        status=job_status,
        service_type=service_type,
        household_id=household_id,
        worker_id=worker_id,
        limit=limit,
        offset=offset,
    )
    return JobListResponse(
        items=[JobResponse.from_entity(job) for job in jobs],
        limit=limit,
        offset=offset,
    )


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: UUID, engine: JobLifecycleEngineDep):
    """Get a job; each read counts as a view."""
    job = await engine.get_job(job_id, count_view=True)
    return JobResponse.from_entity(job)


@router.post("/{job_id}/assign", response_model=JobOperationResponse)
async def assign_worker(
    job_id: UUID,
    body: AssignWorkerRequest,
    engine: JobLifecycleEngineDep,
    actor_id: ActorIdDep,
):
    result = await engine.assign_worker(job_id, body.worker_id, body.worker_name, actor_id)
    return _operation_response(result)


@router.post("/{job_id}/eta", response_model=JobOperationResponse)
async def update_eta(
    job_id: UUID,
    body: EtaUpdateRequest,
    engine: JobLifecycleEngineDep,
    actor_id: ActorIdDep,
):
    location = body.location.to_value_object() if body.location else None
    result = await engine.update_eta(job_id, body.eta, location, actor_id)
    return _operation_response(result)


@router.post("/{job_id}/arrival", response_model=JobOperationResponse)
async def confirm_arrival(
    job_id: UUID,
    engine: JobLifecycleEngineDep,
    actor_id: ActorIdDep,
    body: Optional[ArrivalRequest] = None,
):
    location = body.location.to_value_object() if body and body.location else None
    result = await engine.confirm_arrival(job_id, location, actor_id)
    return _operation_response(result)


@router.post("/{job_id}/start", response_model=JobOperationResponse)
async def start_work(job_id: UUID, engine: JobLifecycleEngineDep, actor_id: ActorIdDep):
    result = await engine.start_work(job_id, actor_id)
    return _operation_response(result)


@router.post("/{job_id}/complete", response_model=JobOperationResponse)
async def complete_job(job_id: UUID, engine: JobLifecycleEngineDep, actor_id: ActorIdDep):
    result = await engine.complete_job(job_id, actor_id)
    return _operation_response(result)


@router.post("/{job_id}/cancel", response_model=JobOperationResponse)
async def cancel_job(
    job_id: UUID,
    engine: JobLifecycleEngineDep,
    actor_id: ActorIdDep,
    body: Optional[CancelJobRequest] = None,
):
    result = await engine.cancel_job(job_id, actor_id, reason=body.reason if body else None)
    return _operation_response(result)


@router.post(
    "/{job_id}/applications",
    response_model=ApplicationSubmitResponse,
    status_code=status.HTTP_201_CREATED,
)
async def apply_for_job(
    job_id: UUID,
    body: ApplicationCreateRequest,
    registry: ApplicationRegistryDep,
    actor_id: ActorIdDep,
):
    """Apply for an open job as the acting worker."""
    result = await registry.apply(
        job_id,
        worker_id=actor_id,
        worker_name=body.worker_name,
        cover_letter=body.cover_letter,
        proposed_rate=body.proposed_rate,
    )
    return ApplicationSubmitResponse(
        application=ApplicationResponse.from_entity(result.application),
        warnings=ApplicationSubmitResponse.warnings_from(result.warnings),
    )


@router.get("/{job_id}/applications", response_model=ApplicationListResponse)
async def list_applications(job_id: UUID, registry: ApplicationRegistryDep):
    applications = await registry.list_applications(job_id)
    return ApplicationListResponse(
        items=[ApplicationResponse.from_entity(a) for a in applications]
    )
