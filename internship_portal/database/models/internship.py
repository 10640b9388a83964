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

class InternshipStatus(str, Enum):
    """Publication state of a micro-internship."""
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CLOSED = "CLOSED"


class TaskType(str, Enum):
    """Kind of work a weekly task asks for."""
    LEARNING = "LEARNING"
    PRACTICAL = "PRACTICAL"
    REFLECTION = "REFLECTION"


# ==================== MODELS ====================

class MicroInternship(Base):
    """A short, mentored internship made of weekly plans."""
    __tablename__ = "micro_internships"

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        unique=True,
        nullable=False,
    )

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    duration_in_weeks = Column(Integer, nullable=False)
    tags = Column(String(500), nullable=True)  # comma separated

    status = Column(
        SQLEnum(InternshipStatus, name="internshipstatus"),
        nullable=False,
        default=InternshipStatus.DRAFT,
        index=True,
    )

    owner_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # ==================== RELATIONSHIPS ====================
    owner = relationship("User", foreign_keys=[owner_id])
    weekly_plans = relationship(
        "WeeklyPlan",
        back_populates="micro_internship",
        cascade="all, delete-orphan",
        order_by="WeeklyPlan.week_number",
    )
    applications = relationship("Application", back_populates="micro_internship")


class WeeklyPlan(Base):
    """One week of an internship. Week numbers are unique per internship."""
    __tablename__ = "weekly_plans"

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        unique=True,
        nullable=False,
    )

    micro_internship_id = Column(
        UUID(as_uuid=True),
        ForeignKey("micro_internships.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    week_number = Column(Integer, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    deadline_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # ==================== RELATIONSHIPS ====================
    micro_internship = relationship("MicroInternship", back_populates="weekly_plans")
    tasks = relationship(
        "Task",
        back_populates="weekly_plan",
        cascade="all, delete-orphan",
        order_by="Task.position",
    )

    __table_args__ = (
        UniqueConstraint(
            "micro_internship_id", "week_number", name="uq_weekly_plan_internship_week"
        ),
    )


class ArtifactTemplate(Base):
    """Reusable scaffold for what a student hands in (CV bullet, README, ...)."""
    __tablename__ = "artifact_templates"

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        unique=True,
        nullable=False,
    )
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    body = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Task(Base):
    __tablename__ = "tasks"

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        unique=True,
        nullable=False,
    )

    weekly_plan_id = Column(
        UUID(as_uuid=True),
        ForeignKey("weekly_plans.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    artifact_template_id = Column(
        UUID(as_uuid=True),
        ForeignKey("artifact_templates.id", ondelete="SET NULL"),
        nullable=True,
    )

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(SQLEnum(TaskType, name="tasktype"), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # ==================== RELATIONSHIPS ====================
    weekly_plan = relationship("WeeklyPlan", back_populates="tasks")
    artifact_template = relationship("ArtifactTemplate")
    task_progresses = relationship(
        "TaskProgress", back_populates="task", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_task_weekly_plan_position", "weekly_plan_id", "position"),
    )
