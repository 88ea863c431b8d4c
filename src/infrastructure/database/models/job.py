"""
Job SQLAlchemy model.
"""

from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel


class JobModel(BaseModel):
    """Job database model."""

    __tablename__ = "jobs"

    title = Column(String(255), nullable=False)
    service_type = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False)
    schedule = Column(String(255), nullable=False)
    salary = Column(Float, nullable=False)
    pay_frequency = Column(String(50), nullable=False)

    # Household, denormalized
    household_id = Column(String(128), nullable=False, index=True)
    household_name = Column(String(255))
    household_location = Column(String(255))
    benefits = Column(JSON, nullable=False, default=dict)

    status = Column(String(20), nullable=False, default="open", index=True)
    worker_id = Column(String(128), index=True)
    worker_name = Column(String(255))
    view_count = Column(Integer, nullable=False, default=0)

    # Worker progress
    estimated_arrival = Column(DateTime(timezone=True))
    current_location = Column(JSON)
    arrived_at = Column(DateTime(timezone=True))
    worker_location = Column(JSON)
    started_at = Column(DateTime(timezone=True))
    completed_at = Column(DateTime(timezone=True))

    cancelled_at = Column(DateTime(timezone=True))
    cancelled_by = Column(String(128))

    # Incremented by every state-changing write
    version = Column(Integer, nullable=False, default=1)

    applications = relationship(
        "JobApplicationModel",
        back_populates="job",
        order_by="JobApplicationModel.sequence",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, title={self.title[:50]}, status={self.status})>"
