import uuid
import enum
from sqlalchemy import Column, String, Text, DateTime, Enum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from internship_portal.database.config.db import Base


class UserRole(str, enum.Enum):
    """User role enumeration. Fixed at registration."""

    STUDENT = "STUDENT"
    MENTOR = "MENTOR"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        unique=True,
        nullable=False,
    )
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String(200), nullable=False)
    role = Column(
        Enum(*[e.value for e in UserRole], name="user_role"),
        nullable=False,
        default=UserRole.STUDENT.value,
        index=True,
    )

    # Profile
    city = Column(String(100), nullable=True)
    interests = Column(Text, nullable=True)
    linkedin_url = Column(String(500), nullable=True)
    portfolio_url = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    applications = relationship(
        "Application", back_populates="student", foreign_keys="Application.student_id"
    )
    mentor_assignments = relationship("MentorAssignment", back_populates="mentor")
    notifications = relationship(
        "Notification", back_populates="user", cascade="all, delete-orphan"
    )
