from internship_portal.cli import seed_demo_data
from internship_portal.database.models import (
    ArtifactTemplate,
    InternshipStatus,
    MicroInternship,
    User,
    UserRole,
)


def test_seed_demo_data_is_idempotent(db):
    internship = seed_demo_data(db)

    assert internship.status == InternshipStatus.PUBLISHED
    assert [plan.week_number for plan in internship.weekly_plans] == [1, 2, 3, 4]
    assert {user.role for user in db.query(User).all()} == {
        UserRole.ADMIN.value,
        UserRole.MENTOR.value,
        UserRole.STUDENT.value,
    }

    again = seed_demo_data(db)

    assert again.id == internship.id
    assert db.query(MicroInternship).count() == 1
    assert db.query(User).count() == 3
    assert db.query(ArtifactTemplate).count() == 2
