import logging
import uuid

from sqlalchemy.exc import OperationalError

from internship_portal.database.models import (
    Application,
    ApplicationStatus,
    InternshipStatus,
    MentorAssignment,
    Notification,
    TaskProgress,
    TaskProgressStatus,
    UserRole,
)
from tests.conftest import (
    auth_headers,
    hide_existing_rows,
    make_application,
    make_internship,
    make_user,
)


# ==================== APPLICATIONS ====================


def test_apply_and_duplicate(client, db, student, internship):
    body = {"microInternshipId": str(internship.id), "motivation": "- A\n- B"}

    response = client.post("/api/v1/applications", json=body, headers=auth_headers(student))
    assert response.status_code == 201
    application_id = response.json()["applicationId"]
    assert db.get(Application, uuid.UUID(application_id)).status == ApplicationStatus.SUBMITTED

    response = client.post("/api/v1/applications", json=body, headers=auth_headers(student))
    assert response.status_code == 400
    assert db.query(Application).count() == 1


def test_apply_requires_motivation(client, student, internship):
    response = client.post(
        "/api/v1/applications",
        json={"microInternshipId": str(internship.id)},
        headers=auth_headers(student),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required fields"


def test_apply_without_token(client, db, internship):
    response = client.post(
        "/api/v1/applications",
        json={"microInternshipId": str(internship.id), "motivation": "Hi"},
    )

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert db.query(Application).count() == 0


def test_apply_to_draft_internship(client, db, admin, student):
    draft = make_internship(db, admin, status=InternshipStatus.DRAFT)

    response = client.post(
        "/api/v1/applications",
        json={"microInternshipId": str(draft.id), "motivation": "Hi"},
        headers=auth_headers(student),
    )

    assert response.status_code == 404


def test_list_my_applications(client, db, student, internship):
    make_application(db, student, internship)

    response = client.get("/api/v1/applications", headers=auth_headers(student))

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["status"] == "SUBMITTED"
    assert data[0]["microInternship"]["id"] == str(internship.id)


# ==================== ADMIN TRANSITIONS ====================


def test_unauthenticated_transition_changes_nothing(client, db, student, internship):
    application = make_application(db, student, internship)

    response = client.patch(
        f"/api/v1/admin/applications/{application.id}", json={"status": "REVIEWED"}
    )

    assert response.status_code == 401
    db.refresh(application)
    assert application.status == ApplicationStatus.SUBMITTED


def test_student_cannot_transition(client, db, student, internship):
    application = make_application(db, student, internship)

    response = client.patch(
        f"/api/v1/admin/applications/{application.id}",
        json={"status": "REVIEWED"},
        headers=auth_headers(student),
    )

    assert response.status_code == 401


def test_admin_assigns_and_removes_mentor(client, db, admin, mentor, student, internship):
    application = make_application(db, student, internship)
    url = f"/api/v1/admin/applications/{application.id}"

    response = client.patch(
        url,
        json={"status": "MENTOR_ASSIGNED", "mentorId": str(mentor.id)},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    data = response.json()["application"]
    assert data["status"] == "MENTOR_ASSIGNED"
    assert data["mentorAssignment"]["mentorId"] == str(mentor.id)
    assert data["mentorAssignment"]["slaMode"] == "LIGHT"

    # mentorId omitted keeps the mentor
    response = client.patch(url, json={"status": "IN_PROGRESS"}, headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["application"]["mentorAssignment"] is not None

    # mentorId empty removes it
    response = client.patch(
        url, json={"status": "IN_PROGRESS", "mentorId": ""}, headers=auth_headers(admin)
    )
    assert response.status_code == 200
    assert response.json()["application"]["mentorAssignment"] is None
    assert db.query(MentorAssignment).count() == 0


def test_transition_errors(client, db, admin, student, internship):
    completed = make_application(db, student, internship, ApplicationStatus.COMPLETED)

    response = client.patch(
        f"/api/v1/admin/applications/{completed.id}",
        json={"status": "IN_PROGRESS"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 400

    response = client.patch(
        f"/api/v1/admin/applications/{uuid.uuid4()}",
        json={"status": "REVIEWED"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 404

    response = client.patch(
        f"/api/v1/admin/applications/{completed.id}",
        json={"status": "COMPLETED", "mentorId": str(student.id)},
        headers=auth_headers(admin),
    )
    assert response.status_code == 400


def test_admin_lists_applications_by_status(client, db, admin, student, internship):
    make_application(db, student, internship)
    other = make_user(db, UserRole.STUDENT, "Olena")
    make_application(db, other, internship, ApplicationStatus.REJECTED)

    response = client.get(
        "/api/v1/admin/applications?status=REJECTED", headers=auth_headers(admin)
    )

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["student"]["name"] == "Olena"

    response = client.get("/api/v1/admin/applications?status=NOPE", headers=auth_headers(admin))
    assert response.status_code == 400


def test_admin_stats(client, db, admin, mentor, student, internship):
    make_application(db, student, internship, ApplicationStatus.COMPLETED)
    other = make_user(db, UserRole.STUDENT)
    make_application(db, other, internship, ApplicationStatus.IN_PROGRESS)

    response = client.get("/api/v1/admin/stats", headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.json()
    assert data["totalApplications"] == 2
    assert data["publishedInternships"] == 1
    assert data["students"] == 2
    assert data["mentors"] == 1
    assert data["completionRate"] == 50.0


def test_database_failure_is_a_generic_500(
    client, db, admin, student, internship, monkeypatch, caplog
):
    application = make_application(db, student, internship)

    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error at /var/db"))

    monkeypatch.setattr(db, "commit", failing_commit)
    with caplog.at_level(logging.ERROR, logger="internship_portal.main"):
        response = client.patch(
            f"/api/v1/admin/applications/{application.id}",
            json={"status": "REVIEWED"},
            headers=auth_headers(admin),
        )

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
    assert "disk" not in response.text
    assert any(
        record.levelno == logging.ERROR and "Database error" in record.getMessage()
        for record in caplog.records
    )

    monkeypatch.undo()
    db.rollback()
    db.refresh(application)
    assert application.status == ApplicationStatus.SUBMITTED


# ==================== INTERNSHIPS ====================


def test_public_catalogue_lists_published_only(client, db, admin, internship):
    make_internship(db, admin, status=InternshipStatus.DRAFT)

    response = client.get("/api/v1/internships")

    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [str(internship.id)]

    response = client.get(f"/api/v1/internships/{internship.id}")
    assert response.status_code == 200
    assert response.json()["weeklyPlans"][0]["tasks"][0]["title"] == "Environment Setup"

    response = client.get(f"/api/v1/internships/{uuid.uuid4()}")
    assert response.status_code == 404


def test_admin_authors_and_publishes_internship(client, admin):
    headers = auth_headers(admin)
    response = client.post(
        "/api/v1/admin/artifact-templates",
        json={"name": "Project Plan", "body": "## Goals"},
        headers=headers,
    )
    assert response.status_code == 201
    template_id = response.json()["id"]

    response = client.post(
        "/api/v1/admin/internships",
        json={
            "title": "Data Basics",
            "description": "Spreadsheets to SQL",
            "durationInWeeks": 2,
            "weeklyPlans": [
                {
                    "weekNumber": 1,
                    "title": "Intro",
                    "tasks": [
                        {"title": "Read", "type": "LEARNING"},
                        {"title": "Plan", "type": "PRACTICAL", "artifactTemplateId": template_id},
                    ],
                }
            ],
        },
        headers=headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "DRAFT"
    tasks = data["weeklyPlans"][0]["tasks"]
    assert [t["position"] for t in tasks] == [0, 1]
    assert tasks[1]["artifactTemplate"]["id"] == template_id

    url = f"/api/v1/admin/internships/{data['id']}/status"
    assert client.patch(url, json={"status": "PUBLISHED"}, headers=headers).status_code == 200
    assert client.patch(url, json={"status": "CLOSED"}, headers=headers).status_code == 200
    assert client.patch(url, json={"status": "PUBLISHED"}, headers=headers).status_code == 400


# ==================== TASKS ====================


def test_submit_and_review_task(client, db, mentor, student, task, active_application):
    response = client.post(
        f"/api/v1/tasks/{task.id}/submit",
        json={"artifactUrl": "https://github.com/andriy/project"},
        headers=auth_headers(student),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["internshipId"] == str(active_application.micro_internship_id)
    assert data["taskProgress"]["status"] == "SUBMITTED"
    progress_id = data["taskProgress"]["id"]

    response = client.post(
        f"/api/v1/mentor/tasks/{progress_id}/review",
        json={"action": "request_changes", "feedback": "Add a README"},
        headers=auth_headers(mentor),
    )
    assert response.status_code == 200
    assert response.json()["taskProgress"]["status"] == "IN_PROGRESS"

    response = client.get(f"/api/v1/mentor/tasks/{progress_id}", headers=auth_headers(mentor))
    assert response.status_code == 200
    assert response.json()["feedbacks"][0]["text"] == "Add a README"
    assert response.json()["student"]["name"] == "Andriy Kovalenko"

    response = client.get(f"/api/v1/tasks/{task.id}", headers=auth_headers(student))
    assert response.status_code == 200
    assert response.json()["taskProgress"]["status"] == "IN_PROGRESS"


def test_submit_task_errors(client, db, student, task, internship):
    url = f"/api/v1/tasks/{task.id}/submit"
    body = {"artifactUrl": "https://example.com"}

    assert client.post(url, json=body, headers=auth_headers(student)).status_code == 403

    make_application(db, student, internship, ApplicationStatus.IN_PROGRESS)
    response = client.post(url, json={}, headers=auth_headers(student))
    assert response.status_code == 400
    assert response.json()["detail"] == "Artifact URL is required"

    response = client.post(
        f"/api/v1/tasks/{uuid.uuid4()}/submit", json=body, headers=auth_headers(student)
    )
    assert response.status_code == 404


def test_review_errors(client, db, mentor, student, task, active_application):
    progress = TaskProgress(
        task_id=task.id,
        student_id=student.id,
        status=TaskProgressStatus.SUBMITTED,
        artifact_url="https://example.com",
    )
    db.add(progress)
    db.commit()
    url = f"/api/v1/mentor/tasks/{progress.id}/review"

    response = client.post(url, json={"action": "reject"}, headers=auth_headers(mentor))
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid action"

    stranger = make_user(db, UserRole.MENTOR, "Other Mentor")
    response = client.post(url, json={"action": "approve"}, headers=auth_headers(stranger))
    assert response.status_code == 403

    response = client.post(url, json={"action": "approve"}, headers=auth_headers(student))
    assert response.status_code == 401

    response = client.post(
        f"/api/v1/mentor/tasks/{uuid.uuid4()}/review",
        json={"action": "approve"},
        headers=auth_headers(mentor),
    )
    assert response.status_code == 404

    db.refresh(progress)
    assert progress.status == TaskProgressStatus.SUBMITTED


def test_mentor_assignments_and_student_dashboard(
    client, db, mentor, student, task, internship, active_application
):
    response = client.get("/api/v1/mentor/assignments", headers=auth_headers(mentor))
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["application"]["student"]["id"] == str(student.id)
    assert data[0]["totalReplies"] == 0

    response = client.get("/api/v1/student/dashboard", headers=auth_headers(student))
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["microInternship"]["id"] == str(internship.id)
    assert data[0]["taskProgress"] == []


# ==================== NOTIFICATIONS ====================


def test_notifications_list_and_mark_read(client, db, mentor, student, internship):
    client.post(
        "/api/v1/applications",
        json={"microInternshipId": str(internship.id), "motivation": "Keen"},
        headers=auth_headers(student),
    )

    response = client.get("/api/v1/notifications?unread_only=true", headers=auth_headers(student))
    assert response.status_code == 200
    items = response.json()
    assert len(items) == 1
    assert items[0]["type"] == "APPLICATION_STATUS_CHANGED"
    notification_id = items[0]["id"]

    url = f"/api/v1/notifications/{notification_id}/read"
    assert client.post(url, headers=auth_headers(mentor)).status_code == 403

    response = client.post(url, headers=auth_headers(student))
    assert response.status_code == 200
    assert response.json()["read"] is True

    response = client.get("/api/v1/notifications?unread_only=true", headers=auth_headers(student))
    assert response.json() == []
    assert db.query(Notification).count() == 1


def test_concurrent_task_submission_is_a_conflict(
    client, db, student, task, active_application, monkeypatch
):
    url = f"/api/v1/tasks/{task.id}/submit"
    first = client.post(
        url, json={"artifactUrl": "https://example.com/v1"}, headers=auth_headers(student)
    )
    assert first.status_code == 200
    hide_existing_rows(monkeypatch, db, TaskProgress)

    response = client.post(
        url, json={"artifactUrl": "https://example.com/v2"}, headers=auth_headers(student)
    )

    assert response.status_code == 409
    monkeypatch.undo()
    assert db.query(TaskProgress).count() == 1
    assert db.query(TaskProgress).one().artifact_url == "https://example.com/v1"
