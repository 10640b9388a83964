import uuid
from sqlalchemy import Column, Boolean, DateTime, ForeignKey, JSON, Enum as SQLEnum, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from enum import Enum

from internship_portal.database.config.db import Base


class NotificationType(str, Enum):
    APPLICATION_STATUS_CHANGED = "APPLICATION_STATUS_CHANGED"
    TASK_SUBMITTED = "TASK_SUBMITTED"
    FEEDBACK_RECEIVED = "FEEDBACK_RECEIVED"


class Notification(Base):
    """In-app notification record. Delivery happens elsewhere."""
    __tablename__ = "notifications"

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        unique=True,
        nullable=False,
    )
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type = Column(SQLEnum(NotificationType, name="notificationtype"), nullable=False)
    payload = Column(JSON, nullable=False, default=dict)
    # Format: {"message": "...", "applicationId": "...", ...}
    read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="notifications")

    __table_args__ = (
        Index("ix_notification_user_read", "user_id", "read"),
    )
