import pytest
from fastapi.testclient import TestClient

from mini_lms.core.database import get_db
from mini_lms.core.dependencies import get_caller
from mini_lms.crud import module_progress_crud as ledger
from mini_lms.main import app
from mini_lms.models import Module, ModuleProgress, Notification
from mini_lms.models.enums import NotificationType

from tests.factories import add_module, as_caller, enroll, make_course


@pytest.fixture
def acting(db):
    """Sets who the API believes is calling: `acting.as_(user)`."""
    class _Acting:
        caller = None

        def as_(self, user):
            self.caller = as_caller(user)

    acting = _Acting()

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_caller] = lambda: acting.caller
    yield acting
    app.dependency_overrides.clear()


@pytest.fixture
def client(acting):
    return TestClient(app)


def test_missing_bearer_token_is_401(db):
    app.dependency_overrides[get_db] = lambda: db
    try:
        response = TestClient(app).get("/api/v1/auth/users/me")
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 401
    assert "Bearer" in response.json()["detail"]


def test_list_and_get_courses(client, acting, learner, course, trainer):
    acting.as_(learner)

    listed = client.get("/api/v1/courses/")
    assert listed.status_code == 200
    assert [c["name"] for c in listed.json()] == ["Python 101"]
    assert listed.json()[0]["trainer"]["id"] == trainer.id

    assert client.get(f"/api/v1/courses/{course.id}").json()["id"] == course.id
    missing = client.get("/api/v1/courses/4242")
    assert missing.status_code == 404
    assert missing.json() == {"detail": "Course with ID 4242 not found."}


def test_learner_cannot_create_course(client, acting, learner):
    acting.as_(learner)
    response = client.post("/api/v1/courses/", json={"name": "Nope"})
    assert response.status_code == 403


def test_trainer_creates_course(client, acting, trainer, learner):
    acting.as_(trainer)
    response = client.post("/api/v1/courses/", json={"name": "Data 101", "type": "Tech", "duration": 3})
    assert response.status_code == 201
    assert response.json()["trainer_id"] == trainer.id
    assert response.json()["visibility"] == "Public"


def test_create_module_form(client, acting, db, trainer, course, learner):
    enroll(db, learner, course)
    acting.as_(trainer)

    response = client.post("/api/v1/modules/", data={"course_id": course.id, "title": "Intro", "content": "Hello"})

    assert response.status_code == 201
    module_id = response.json()["id"]
    assert response.json()["file_path"] is None
    assert ledger.get_progress(db, learner.id, module_id).progress_percentage == 0.0


def test_modules_listed_with_callers_progress(client, acting, db, course, learner):
    m1 = add_module(db, course, name="One")
    m2 = add_module(db, course, name="Two")
    ledger.mark_complete(db, learner.id, m2.id, course.id)
    db.commit()
    acting.as_(learner)

    response = client.get(f"/api/v1/modules/course/{course.id}")

    assert response.status_code == 200
    assert [(m["id"], m["progress_percentage"], m["is_completed"]) for m in response.json()] == [
        (m1.id, 0.0, False),
        (m2.id, 100.0, True),
    ]


def test_progress_update_and_course_average(client, acting, db, course, learner):
    m1 = add_module(db, course, name="One")
    m2 = add_module(db, course, name="Two")
    enroll(db, learner, course)
    acting.as_(learner)

    response = client.post("/api/v1/progress/", json={"module_id": m1.id, "progress_percentage": 50})
    assert response.status_code == 200
    assert response.json()["course_id"] == course.id
    assert client.post("/api/v1/progress/complete", json={"module_id": m2.id}).status_code == 200

    average = client.get(f"/api/v1/progress/course/{course.id}")
    assert average.json() == {"course_id": course.id, "progress": 75.0}


def test_progress_out_of_range_is_422(client, acting, db, course, learner):
    module = add_module(db, course)
    enroll(db, learner, course)
    acting.as_(learner)

    response = client.post("/api/v1/progress/", json={"module_id": module.id, "progress_percentage": 150})

    assert response.status_code == 422
    assert ledger.get_progress(db, learner.id, module.id) is None


def test_progress_requires_enrollment(client, acting, db, course, learner):
    module = add_module(db, course)
    acting.as_(learner)

    update = client.post("/api/v1/progress/", json={"module_id": module.id, "progress_percentage": 40})
    complete = client.post("/api/v1/progress/complete", json={"module_id": module.id})

    assert update.status_code == 403
    assert complete.status_code == 403
    assert db.query(ModuleProgress).count() == 0


def test_progress_rejects_a_foreign_course_id(client, acting, db, trainer, course, learner):
    module = add_module(db, course)
    other = make_course(db, trainer, name="Python 201")
    enroll(db, learner, course)
    enroll(db, learner, other)
    acting.as_(learner)

    mismatched = client.post(
        "/api/v1/progress/", json={"module_id": module.id, "course_id": other.id, "progress_percentage": 40}
    )
    assert mismatched.status_code == 422
    assert ledger.get_progress(db, learner.id, module.id) is None

    matching = client.post(
        "/api/v1/progress/", json={"module_id": module.id, "course_id": course.id, "progress_percentage": 40}
    )
    assert matching.status_code == 200
    assert matching.json()["course_id"] == module.course_id


def test_progress_for_unknown_module_is_404(client, acting, learner):
    acting.as_(learner)
    response = client.post("/api/v1/progress/", json={"module_id": 4242, "progress_percentage": 10})
    assert response.status_code == 404


def test_enroll_then_drop(client, acting, db, course, learner):
    acting.as_(learner)

    enrolled = client.post("/api/v1/enrollments/", json={"course_id": course.id})
    assert enrolled.status_code == 201
    enrollment_id = enrolled.json()["id"]
    assert [e["id"] for e in client.get("/api/v1/enrollments/me").json()] == [enrollment_id]

    dropped = client.delete(f"/api/v1/enrollments/{enrollment_id}")
    assert dropped.status_code == 200
    assert dropped.json()["enrollment_id"] == enrollment_id
    assert client.delete(f"/api/v1/enrollments/{enrollment_id}").status_code == 404


def test_feedback_requires_enrollment(client, acting, db, course, learner):
    acting.as_(learner)
    payload = {"course_id": course.id, "message": "Great", "rating": 5}

    assert client.post("/api/v1/feedback/", json=payload).status_code == 403
    enroll(db, learner, course)
    assert client.post("/api/v1/feedback/", json=payload).status_code == 201
    assert client.post("/api/v1/feedback/", json={**payload, "rating": 6}).status_code == 422
    assert [f["rating"] for f in client.get(f"/api/v1/feedback/course/{course.id}").json()] == [5]


def test_takedown_flow(client, acting, db, admin, trainer, course):
    acting.as_(trainer)
    response = client.post("/api/v1/courses/request-takedown", json={"course_id": course.id, "reason": "Old"})
    assert response.status_code == 200
    assert client.get("/api/v1/notifications/takedowns/count").status_code == 403

    acting.as_(admin)
    assert client.get("/api/v1/notifications/takedowns/count").json() == {"count": 1}
    assert client.delete(f"/api/v1/courses/{course.id}").status_code == 200
    assert client.get("/api/v1/notifications/takedowns/count").json() == {"count": 0}


def test_notifications_mark_read_and_delete(client, acting, db, admin, trainer, learner, course):
    acting.as_(trainer)
    client.post("/api/v1/modules/", data={"course_id": course.id, "title": "Intro"})
    [notice] = client.get("/api/v1/notifications/me").json()
    assert notice["type"] == NotificationType.MODULE_UPDATE.value

    acting.as_(learner)
    assert client.get("/api/v1/notifications/me").json() == []
    assert client.put(f"/api/v1/notifications/{notice['id']}/read").status_code == 404

    acting.as_(trainer)
    assert client.put(f"/api/v1/notifications/{notice['id']}/read").json()["is_read"] is True
    assert client.delete(f"/api/v1/notifications/{notice['id']}").status_code == 403

    acting.as_(admin)
    assert len(client.get("/api/v1/notifications/me").json()) == 1
    assert client.delete(f"/api/v1/notifications/{notice['id']}").status_code == 200
    assert db.query(Notification).count() == 0


def test_analytics_visible_to_self_and_admin_only(client, acting, admin, trainer, other_trainer, course):
    acting.as_(other_trainer)
    assert client.get(f"/api/v1/analytics/trainer/{trainer.id}").status_code == 403

    acting.as_(trainer)
    own = client.get(f"/api/v1/analytics/trainer/{trainer.id}")
    assert own.status_code == 200
    assert own.json()["total_courses"] == 1

    acting.as_(admin)
    assert client.get(f"/api/v1/analytics/trainer/{trainer.id}/learners").json() == []


def test_delete_module_route(client, acting, db, trainer, course):
    module = add_module(db, course)
    acting.as_(trainer)
    assert client.delete(f"/api/v1/modules/{module.id}").status_code == 200
    assert db.query(Module).count() == 0
