"""
Job-related API schemas.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.domain.entities import Application, Job
from src.domain.value_objects import Benefits, Location

from .common import TimestampMixin, WarningsMixin


class LocationSchema(BaseModel):
    """Reported worker position."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: Optional[str] = Field(None, max_length=500)

    def to_value_object(self) -> Location:
        return Location(latitude=self.latitude, longitude=self.longitude, address=self.address)

    @classmethod
    def from_value_object(cls, location: Optional[Location]) -> Optional["LocationSchema"]:
        if location is None:
            return None
        return cls(**location.to_dict())


class BenefitsSchema(BaseModel):
    """Benefits offered with a job."""

    accommodation: bool = False
    meals: bool = False
    transportation: bool = False


class JobCreateRequest(BaseModel):
    """Job creation request schema."""

    title: str = Field(..., max_length=255)
    service_type: str = Field(..., max_length=100)
    description: str = Field(..., max_length=5000)
    schedule: str = Field(..., max_length=255)
    salary: float = Field(..., gt=0, allow_inf_nan=False)
    pay_frequency: str = Field(..., max_length=50)
    household_id: Optional[str] = Field(
        None, description="Defaults to the acting user"
    )
    household_name: Optional[str] = Field(None, max_length=255)
    household_location: Optional[str] = Field(None, max_length=500)
    benefits: BenefitsSchema = Field(default_factory=BenefitsSchema)

    def benefits_value(self) -> Benefits:
        return Benefits(**self.benefits.model_dump())


class AssignWorkerRequest(BaseModel):
    """Pick an applicant for an open job."""

    worker_id: str = Field(..., min_length=1)
    worker_name: Optional[str] = Field(
        None, description="Defaults to the name given on the application"
    )


class EtaUpdateRequest(BaseModel):
    """Worker's estimated arrival."""

    eta: str = Field(..., description="ISO 8601 timestamp; naive values are UTC")
    location: Optional[LocationSchema] = None

    @field_validator("eta")
    @classmethod
    def validate_eta(cls, v):
        if not v.strip():
            raise ValueError("ETA is required")
        return v.strip()


class ArrivalRequest(BaseModel):
    """Arrival confirmation with the worker's position."""

    location: Optional[LocationSchema] = None


class CancelJobRequest(BaseModel):
    """Cancellation with an optional reason shown to the other party."""

    reason: Optional[str] = Field(None, max_length=1000)


class ApplicationResponse(BaseModel):
    """Application response schema."""

    id: UUID
    job_id: UUID
    worker_id: str
    worker_name: str
    cover_letter: Optional[str] = None
    proposed_rate: Optional[float] = None
    status: str
    applied_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, application: Application) -> "ApplicationResponse":
        return cls(
            id=application.id,
            job_id=application.job_id,
            worker_id=application.worker_id,
            worker_name=application.worker_name,
            cover_letter=application.cover_letter,
            proposed_rate=application.proposed_rate,
            status=application.status.value,
            applied_at=application.applied_at,
        )


class JobResponse(TimestampMixin):
    """Job response schema."""

    id: UUID
    title: str
    service_type: str
    description: str
    schedule: str
    salary: float
    pay_frequency: str
    household_id: str
    household_name: Optional[str] = None
    household_location: Optional[str] = None
    benefits: BenefitsSchema
    status: str = Field(..., description="Current job status")
    worker_id: Optional[str] = None
    worker_name: Optional[str] = None
    applicant_count: int = 0
    view_count: int = 0
    version: int
    estimated_arrival: Optional[datetime] = None
    current_location: Optional[LocationSchema] = None
    arrived_at: Optional[datetime] = None
    worker_location: Optional[LocationSchema] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancelled_by: Optional[str] = None

    @classmethod
    def from_entity(cls, job: Job) -> "JobResponse":
        return cls(
            id=job.id,
            title=job.title,
            service_type=job.service_type,
            description=job.description,
            schedule=job.schedule,
            salary=job.salary,
            pay_frequency=job.pay_frequency,
            household_id=job.household_id,
            household_name=job.household_name,
            household_location=job.household_location,
            benefits=BenefitsSchema(**job.benefits.to_dict()),
            status=job.status.value,
            worker_id=job.worker_id,
            worker_name=job.worker_name,
            applicant_count=len(job.applicants),
            view_count=job.view_count,
            version=job.version,
            estimated_arrival=job.estimated_arrival,
            current_location=LocationSchema.from_value_object(job.current_location),
            arrived_at=job.arrived_at,
            worker_location=LocationSchema.from_value_object(job.worker_location),
            started_at=job.started_at,
            completed_at=job.completed_at,
            cancelled_at=job.cancelled_at,
            cancelled_by=job.cancelled_by,
            created_at=job.created_at,
            updated_at=job.updated_at,
        )


class JobOperationResponse(WarningsMixin):
    """Job after a committed lifecycle operation."""

    job: JobResponse


class JobListResponse(BaseModel):
    """Page of jobs."""

    items: List[JobResponse]
    limit: int
    offset: int
