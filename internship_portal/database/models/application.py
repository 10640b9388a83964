import uuid
from sqlalchemy import (
    Column, String, Text, Integer, DateTime, ForeignKey, Enum as SQLEnum, Index, UniqueConstraint
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from enum import Enum

from internship_portal.database.config.db import Base


# ==================== ENUMS ====================

class ApplicationStatus(str, Enum):
    """Application status throughout the internship lifecycle."""
    SUBMITTED = "SUBMITTED"
    REVIEWED = "REVIEWED"
    MENTOR_ASSIGNED = "MENTOR_ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"


TERMINAL_APPLICATION_STATUSES = frozenset(
    {ApplicationStatus.COMPLETED, ApplicationStatus.REJECTED}
)

# Students with an application in one of these states work on the tasks
ACTIVE_APPLICATION_STATUSES = (
    ApplicationStatus.IN_PROGRESS,
    ApplicationStatus.MENTOR_ASSIGNED,
)


class SlaMode(str, Enum):
    """Committed mentor response cadence."""
    LIGHT = "LIGHT"  # weekly check-in, reply within 48h
    STANDARD = "STANDARD"  # reply within 24h


# ==================== MODELS ====================

class Application(Base):
    """A student's application to a micro-internship."""
    __tablename__ = "applications"

    # Primary Key
    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        unique=True,
        nullable=False,
    )

    # ==================== REFERENCES ====================
    student_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    micro_internship_id = Column(
        UUID(as_uuid=True),
        ForeignKey("micro_internships.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # ==================== SUBMITTED DATA ====================
    motivation = Column(Text, nullable=False)
    interests = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    linkedin_url = Column(String(500), nullable=True)
    portfolio_url = Column(String(500), nullable=True)

    # ==================== STATUS ====================
    status = Column(
        SQLEnum(ApplicationStatus, name="applicationstatus"),
        nullable=False,
        default=ApplicationStatus.SUBMITTED,
        index=True,
    )
    rejection_reason = Column(Text, nullable=True)

    # ==================== TRANSITION DATES ====================
    # Each is set once, on the first transition into its state
    submitted_at = Column(DateTime(timezone=True), nullable=False)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    mentor_assigned_at = Column(DateTime(timezone=True), nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    rejected_at = Column(DateTime(timezone=True), nullable=True)

    # ==================== METADATA ====================
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # ==================== RELATIONSHIPS ====================
    student = relationship("User", foreign_keys=[student_id], back_populates="applications")
    micro_internship = relationship("MicroInternship", back_populates="applications")
    mentor_assignment = relationship(
        "MentorAssignment",
        back_populates="application",
        uselist=False,
        cascade="all, delete-orphan",
    )

    # ==================== INDEXES ====================
    __table_args__ = (
        UniqueConstraint(
            "student_id", "micro_internship_id", name="uq_application_student_internship"
        ),
        Index("ix_application_status_submitted", "status", "submitted_at"),
    )


class MentorAssignment(Base):
    """Binding of exactly one mentor to one application."""
    __tablename__ = "mentor_assignments"

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        unique=True,
        nullable=False,
    )

    mentor_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    application_id = Column(
        UUID(as_uuid=True),
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
    )

    sla_mode = Column(
        SQLEnum(SlaMode, name="slamode"),
        nullable=False,
        default=SlaMode.LIGHT,
    )

    # ==================== SLA COUNTERS ====================
    total_replies = Column(Integer, nullable=False, default=0)
    on_time_replies = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # ==================== RELATIONSHIPS ====================
    mentor = relationship("User", back_populates="mentor_assignments")
    application = relationship("Application", back_populates="mentor_assignment")

    __table_args__ = (
        UniqueConstraint("application_id", name="uq_mentor_assignment_application"),
    )
