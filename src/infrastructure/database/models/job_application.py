"""
Job application SQLAlchemy model.
"""

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship

from .base import BaseModel


class JobApplicationModel(BaseModel):
    """Job application database model."""

    __tablename__ = "job_applications"
    __table_args__ = (
        UniqueConstraint("job_id", "worker_id", name="uq_job_applications_job_worker"),
    )

    job_id = Column(Uuid, ForeignKey("jobs.id"), nullable=False, index=True)
    worker_id = Column(String(128), nullable=False, index=True)
    worker_name = Column(String(255), nullable=False)
    cover_letter = Column(Text)
    proposed_rate = Column(Float)
    status = Column(String(20), nullable=False, default="pending")
    applied_at = Column(DateTime(timezone=True), nullable=False)
    # Job version at the time of the application; orders applicants
    sequence = Column(Integer, nullable=False)

    job = relationship("JobModel", back_populates="applications")

    def __repr__(self) -> str:
        return (
            f"<JobApplication(job_id={self.job_id}, worker_id={self.worker_id}, "
            f"status={self.status})>"
        )
