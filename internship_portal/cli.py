"""CLI tools for portal administration."""

from datetime import timedelta

import click
from sqlalchemy.orm import Session

from internship_portal.database.config.db import Base, SessionLocal, engine
from internship_portal.database.models import (
    ArtifactTemplate,
    InternshipStatus,
    MicroInternship,
    Task,
    TaskType,
    User,
    UserRole,
    WeeklyPlan,
)
from internship_portal.utils.auth import get_password_hash
from internship_portal.utils.dates import utcnow

DEMO_PASSWORD = "password123"


def _get_or_create_user(db: Session, email: str, name: str, role: UserRole, password: str, **profile) -> User:
    user = db.query(User).filter(User.email == email).first()
    if user:
        return user
    user = User(
        email=email,
        name=name,
        role=role.value,
        password_hash=get_password_hash(password),
        **profile,
    )
    db.add(user)
    db.flush()
    return user


def seed_demo_data(db: Session) -> MicroInternship:
    """
    Create demo accounts and one published four-week internship.

    Safe to run twice: existing accounts and the demo internship are reused.
    """
    admin = _get_or_create_user(
        db, "admin@ngo.org", "Admin User", UserRole.ADMIN, DEMO_PASSWORD, city="Kyiv"
    )
    _get_or_create_user(
        db,
        "mentor@company.com",
        "Maria Petrenko",
        UserRole.MENTOR,
        DEMO_PASSWORD,
        city="Kyiv",
        interests="IT,Software Development,Web Development",
    )
    _get_or_create_user(
        db,
        "andriy@example.com",
        "Andriy Kovalenko",
        UserRole.STUDENT,
        DEMO_PASSWORD,
        city="Kyiv",
        interests="IT,Web Development,JavaScript",
    )

    existing = (
        db.query(MicroInternship)
        .filter(MicroInternship.title == "Web Development Fundamentals")
        .first()
    )
    if existing:
        db.commit()
        return existing

    readme = ArtifactTemplate(
        name="GitHub README",
        description="Template for a professional project README",
        body="# [Project Name]\n\n## Description\n[Brief description]\n\n## Learning Outcomes\n- [What you learned]",
    )
    reflection = ArtifactTemplate(
        name="Case Study One-Pager",
        description="Template for a case study document",
        body="# Case Study: [Project Name]\n\n## Problem\n\n## Solution\n\n## Reflection",
    )
    db.add_all([readme, reflection])
    db.flush()

    internship = MicroInternship(
        title="Web Development Fundamentals",
        description="Build a small real-world project with React and TypeScript under the guidance of an industry mentor.",
        duration_in_weeks=4,
        tags="IT,Web Development,React,TypeScript",
        status=InternshipStatus.PUBLISHED,
        owner_id=admin.id,
    )
    weeks = [
        ("Project Setup & Planning", [("Environment Setup", TaskType.LEARNING, None), ("Project Plan", TaskType.PRACTICAL, readme)]),
        ("Core Features", [("Build the main page", TaskType.PRACTICAL, None), ("Weekly reflection", TaskType.REFLECTION, None)]),
        ("Polish & Testing", [("Write tests", TaskType.PRACTICAL, None)]),
        ("Presentation", [("Case study", TaskType.REFLECTION, reflection)]),
    ]
    now = utcnow()
    for number, (title, tasks) in enumerate(weeks, start=1):
        plan = WeeklyPlan(
            week_number=number,
            title=title,
            deadline_at=now + timedelta(weeks=number),
        )
        for position, (task_title, task_type, template) in enumerate(tasks):
            plan.tasks.append(
                Task(
                    title=task_title,
                    type=task_type,
                    position=position,
                    artifact_template_id=template.id if template else None,
                )
            )
        internship.weekly_plans.append(plan)

    db.add(internship)
    db.commit()
    return internship


@click.group()
def cli():
    """Micro-internship portal CLI tools."""
    pass


@cli.command()
def init_db():
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)
    click.echo("✅ Database tables created")


@cli.command()
def seed():
    """
    Load demo users and a published internship.

    Example:
        internship-portal seed
    """
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        internship = seed_demo_data(db)
        click.echo(f"✅ Seeded demo data (internship {internship.id})")
        click.echo(f"   Accounts use password '{DEMO_PASSWORD}'")
    finally:
        db.close()


@cli.command()
@click.option("--email", required=True, help="Admin email address")
@click.option("--name", required=True, help="Display name")
@click.password_option(help="Admin password")
def create_admin(email: str, name: str, password: str):
    """
    Provision an admin account. Admins cannot self-register.
    """
    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == email).first():
            click.echo(f"❌ A user with email {email} already exists")
            return
        _get_or_create_user(db, email, name, UserRole.ADMIN, password)
        db.commit()
        click.echo(f"✅ Admin {email} created")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
