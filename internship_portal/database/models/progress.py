import uuid
from sqlalchemy import (
    Column, String, Text, DateTime, ForeignKey, Enum as SQLEnum, Index, UniqueConstraint
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from enum import Enum

from internship_portal.database.config.db import Base


class TaskProgressStatus(str, Enum):
    """Per (task, student) progress. PENDING is implied by a missing row."""
    PENDING = "PENDING"
    SUBMITTED = "SUBMITTED"
    IN_PROGRESS = "IN_PROGRESS"
    APPROVED = "APPROVED"


class TaskProgress(Base):
    __tablename__ = "task_progress"

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        unique=True,
        nullable=False,
    )

    task_id = Column(
        UUID(as_uuid=True),
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    student_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    status = Column(
        SQLEnum(TaskProgressStatus, name="taskprogressstatus"),
        nullable=False,
        default=TaskProgressStatus.PENDING,
        index=True,
    )
    artifact_url = Column(String(1000), nullable=True)

    # Overwritten on every resubmission
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # ==================== RELATIONSHIPS ====================
    task = relationship("Task", back_populates="task_progresses")
    student = relationship("User", foreign_keys=[student_id])
    feedbacks = relationship(
        "Feedback",
        back_populates="task_progress",
        cascade="all, delete-orphan",
        order_by="Feedback.created_at.desc()",
    )

    __table_args__ = (
        UniqueConstraint("task_id", "student_id", name="uq_task_progress_task_student"),
    )


class Feedback(Base):
    """Mentor feedback on a task submission. Append-only."""
    __tablename__ = "feedbacks"

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        unique=True,
        nullable=False,
    )

    task_progress_id = Column(
        UUID(as_uuid=True),
        ForeignKey("task_progress.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    text = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # ==================== RELATIONSHIPS ====================
    task_progress = relationship("TaskProgress", back_populates="feedbacks")
    author = relationship("User", foreign_keys=[author_id])

    __table_args__ = (
        Index("ix_feedback_progress_created", "task_progress_id", "created_at"),
    )
