"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, fresh for each test
- Users for each role and a published internship with tasks
- Bearer token headers and a TestClient wired to the test session
"""
import os
import uuid
from datetime import timedelta

os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from internship_portal.main import app
from internship_portal.database.config.db import Base, configure_sqlite, get_db
from internship_portal.database.models import (
    Application,
    ApplicationStatus,
    InternshipStatus,
    MentorAssignment,
    MicroInternship,
    SlaMode,
    Task,
    TaskType,
    User,
    UserRole,
    WeeklyPlan,
)
from internship_portal.lifecycle.guard import Principal
from internship_portal.utils.auth import create_access_token
from internship_portal.utils.dates import utcnow


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite(engine)

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def db(engine) -> Session:
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


# =============================================================================
# Factories
# =============================================================================

def make_user(db: Session, role: UserRole, name: str = None) -> User:
    user = User(
        email=f"{role.value.lower()}-{uuid.uuid4().hex[:8]}@example.com",
        name=name or f"Test {role.value.title()}",
        role=role.value,
        password_hash="not-a-real-hash",
    )
    db.add(user)
    db.commit()
    return user


def make_internship(db: Session, owner: User, status=InternshipStatus.PUBLISHED) -> MicroInternship:
    internship = MicroInternship(
        title="Web Development Fundamentals",
        description="Build a small project with a mentor.",
        duration_in_weeks=4,
        tags="IT,Web",
        status=status,
        owner_id=owner.id,
    )
    plan = WeeklyPlan(
        week_number=1,
        title="Project Setup",
        deadline_at=utcnow() + timedelta(days=7),
    )
    plan.tasks.append(Task(title="Environment Setup", type=TaskType.LEARNING, position=0))
    plan.tasks.append(Task(title="Project Plan", type=TaskType.PRACTICAL, position=1))
    internship.weekly_plans.append(plan)
    db.add(internship)
    db.commit()
    return internship


def make_application(
    db: Session,
    student: User,
    internship: MicroInternship,
    status=ApplicationStatus.SUBMITTED,
) -> Application:
    application = Application(
        student_id=student.id,
        micro_internship_id=internship.id,
        motivation="- Learn\n- Build",
        status=status,
        submitted_at=utcnow(),
    )
    db.add(application)
    db.commit()
    return application


def assign(db: Session, application: Application, mentor: User) -> MentorAssignment:
    assignment = MentorAssignment(
        mentor_id=mentor.id,
        application_id=application.id,
        sla_mode=SlaMode.LIGHT,
        total_replies=0,
        on_time_replies=0,
    )
    db.add(assignment)
    db.commit()
    return assignment


def principal_for(user: User) -> Principal:
    return Principal(id=user.id, role=UserRole(user.role), name=user.name)


def auth_headers(user: User) -> dict:
    token = create_access_token(data={"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


class _NoMatch:
    def filter(self, *criteria):
        return self

    def first(self):
        return None


def hide_existing_rows(monkeypatch, db: Session, model) -> None:
    """
    Make ``db.query(model)...first()`` find nothing, as if a concurrent
    request inserted its row after this one looked.
    """
    real_query = db.query

    def query(entity, *entities, **kwargs):
        if entity is model and not entities:
            return _NoMatch()
        return real_query(entity, *entities, **kwargs)

    monkeypatch.setattr(db, "query", query)


# =============================================================================
# Entity Fixtures
# =============================================================================

@pytest.fixture
def admin(db) -> User:
    return make_user(db, UserRole.ADMIN, "Admin User")


@pytest.fixture
def mentor(db) -> User:
    return make_user(db, UserRole.MENTOR, "Maria Petrenko")


@pytest.fixture
def student(db) -> User:
    return make_user(db, UserRole.STUDENT, "Andriy Kovalenko")


@pytest.fixture
def internship(db, admin) -> MicroInternship:
    return make_internship(db, admin)


@pytest.fixture
def task(internship) -> Task:
    return internship.weekly_plans[0].tasks[0]


@pytest.fixture
def active_application(db, student, internship, mentor) -> Application:
    """A MENTOR_ASSIGNED application with the mentor fixture attached."""
    application = make_application(db, student, internship, ApplicationStatus.MENTOR_ASSIGNED)
    assign(db, application, mentor)
    return application


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def client(db) -> TestClient:
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
