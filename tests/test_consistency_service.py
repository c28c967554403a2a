import pytest

from mini_lms.core.config import settings
from mini_lms.core.exceptions import DependencyFailure, Forbidden, NotFound
from mini_lms.crud import feedback_crud, module_progress_crud as ledger, notification_crud
from mini_lms.models import Course, Enrollment, Feedback, Module, ModuleProgress, Notification
from mini_lms.models.enums import NotificationType, UserRole
from mini_lms.schemas.course_schema import CourseCreate, CourseUpdate
from mini_lms.schemas.feedback_schema import FeedbackCreate
from mini_lms.services import blob_service, consistency_service as engine, email_service
from mini_lms.services.blob_service import Attachment

from tests.factories import add_module, as_caller, enroll, make_course, make_user


def _notifications(db, notification_type):
    return db.query(Notification).filter(Notification.type == notification_type.value).order_by(Notification.id).all()


# --- Modules ---

def test_create_module_initializes_progress_for_enrolled_learners(db, trainer, course, learner, learner2, sent_emails):
    bystander = make_user(db, "bystander", UserRole.LEARNER)
    enroll(db, learner, course)
    enroll(db, learner, course)
    enroll(db, learner2, course)

    module = engine.create_module(db, as_caller(trainer), course.id, "Variables", "x = 1")

    rows = db.query(ModuleProgress).filter(ModuleProgress.module_id == module.id).order_by(ModuleProgress.learner_id).all()
    assert [r.learner_id for r in rows] == [learner.id, learner2.id]
    assert all(r.progress_percentage == 0.0 and r.is_completed is False and r.course_id == course.id for r in rows)
    assert ledger.get_progress(db, bystander.id, module.id) is None

    [notice] = _notifications(db, NotificationType.MODULE_UPDATE)
    assert notice.user_id == trainer.id
    assert notice.message == "Module 'Variables' added to course 'Python 101'."
    assert [m["to"] for m in sent_emails] == [trainer.email]


def test_create_module_requires_owning_trainer(db, course, other_trainer, learner):
    with pytest.raises(Forbidden):
        engine.create_module(db, as_caller(other_trainer), course.id, "Nope", None)
    with pytest.raises(Forbidden):
        engine.create_module(db, as_caller(learner), course.id, "Nope", None)
    with pytest.raises(NotFound):
        engine.create_module(db, as_caller(other_trainer), 4242, "Nope", None)
    assert db.query(Module).count() == 0


def test_create_module_stores_uploaded_attachment(db, trainer, course, monkeypatch):
    uploads = []

    def fake_upload(file_bytes, filename, content_type=None):
        uploads.append((filename, content_type))
        return f"https://storage.example.com/{filename}"

    monkeypatch.setattr(blob_service, "upload", fake_upload)
    attachment = Attachment("notes.pdf", b"%PDF", "application/pdf")

    module = engine.create_module(db, as_caller(trainer), course.id, "Reading", None, attachment)

    assert module.file_path == "https://storage.example.com/notes.pdf"
    assert uploads == [("notes.pdf", "application/pdf")]


def test_failed_upload_leaves_no_module(db, trainer, course, learner, monkeypatch, sent_emails):
    enroll(db, learner, course)

    def broken_upload(file_bytes, filename, content_type=None):
        raise DependencyFailure("storage down")

    monkeypatch.setattr(blob_service, "upload", broken_upload)

    with pytest.raises(DependencyFailure):
        engine.create_module(db, as_caller(trainer), course.id, "Reading", None, Attachment("a.pdf", b"x"))

    assert db.query(Module).count() == 0
    assert db.query(ModuleProgress).count() == 0
    assert db.query(Notification).count() == 0
    assert sent_emails == []


def test_email_failure_does_not_undo_module(db, trainer, course, learner, monkeypatch):
    enroll(db, learner, course)

    def exploding_email(*args, **kwargs):
        raise RuntimeError("smtp unreachable")

    monkeypatch.setattr(email_service, "send_course_update_email", exploding_email)

    module = engine.create_module(db, as_caller(trainer), course.id, "Loops", None)

    db.expire_all()
    assert db.query(Module).filter(Module.id == module.id).count() == 1
    assert ledger.get_progress(db, learner.id, module.id) is not None
    assert len(_notifications(db, NotificationType.MODULE_UPDATE)) == 1


def test_update_module_resets_progress(db, trainer, course, learner, learner2):
    enroll(db, learner, course)
    enroll(db, learner2, course)
    module = engine.create_module(db, as_caller(trainer), course.id, "Loops", "for")
    ledger.upsert(db, learner.id, module.id, course.id, 70.0, False)
    ledger.mark_complete(db, learner2.id, module.id, course.id)
    db.commit()

    updated = engine.update_module(db, as_caller(trainer), module.id, "Loops v2", "while")

    assert updated.name == "Loops v2"
    assert updated.description == "while"
    db.expire_all()
    for learner_id in (learner.id, learner2.id):
        row = ledger.get_progress(db, learner_id, module.id)
        assert row.progress_percentage == 0.0
        assert row.is_completed is False
    messages = [n.message for n in _notifications(db, NotificationType.MODULE_UPDATE)]
    assert "Module 'Loops v2' updated in course 'Python 101'." in messages


def test_update_module_rejects_non_owner(db, course, other_trainer):
    module = add_module(db, course)
    with pytest.raises(Forbidden):
        engine.update_module(db, as_caller(other_trainer), module.id, "Hijack", None)
    with pytest.raises(NotFound):
        engine.update_module(db, as_caller(other_trainer), 4242, "Missing", None)


def test_delete_module_removes_its_progress(db, trainer, course, learner):
    enroll(db, learner, course)
    doomed = engine.create_module(db, as_caller(trainer), course.id, "Doomed", None)
    kept = engine.create_module(db, as_caller(trainer), course.id, "Kept", None)

    engine.delete_module(db, as_caller(trainer), doomed.id)

    assert db.query(Module).filter(Module.id == doomed.id).count() == 0
    assert db.query(ModuleProgress).filter(ModuleProgress.module_id == doomed.id).count() == 0
    assert ledger.get_progress(db, learner.id, kept.id) is not None
    messages = [n.message for n in _notifications(db, NotificationType.MODULE_UPDATE)]
    assert messages[-1] == "Module 'Doomed' deleted from course 'Python 101'."


# --- Courses ---

def test_create_course_announces_to_active_learners(db, trainer, learner, learner2, sent_emails):
    make_user(db, "dormant", UserRole.LEARNER, is_active=False)

    course = engine.create_course(db, as_caller(trainer), CourseCreate(name="Data 101", type="Tech", duration=5))

    assert course.trainer_id == trainer.id
    notices = _notifications(db, NotificationType.COURSE_CREATED)
    assert [n.user_id for n in notices] == [learner.id, learner2.id]
    assert all(n.course_id == course.id for n in notices)
    assert sorted(m["to"] for m in sent_emails) == sorted([learner.email, learner2.email])


def test_create_course_requires_trainer(db, learner):
    with pytest.raises(Forbidden):
        engine.create_course(db, as_caller(learner), CourseCreate(name="Nope"))
    assert db.query(Course).count() == 0


def test_update_course_by_owner_only(db, trainer, other_trainer, course):
    with pytest.raises(Forbidden):
        engine.update_course(db, as_caller(other_trainer), course.id, CourseUpdate(name="Hijacked"))

    updated = engine.update_course(db, as_caller(trainer), course.id, CourseUpdate(name="Python 102", duration=12))
    assert updated.name == "Python 102"
    assert updated.duration == 12
    # Full replacement: the omitted type is cleared
    assert updated.type is None


def test_delete_course_removes_everything_hanging_off_it(db, admin, trainer, other_trainer, course, learner):
    other_course = make_course(db, other_trainer, name="Rust 101")
    enroll(db, learner, course)
    m1 = engine.create_module(db, as_caller(trainer), course.id, "One", None)
    m2 = engine.create_module(db, as_caller(trainer), course.id, "Two", None)
    ledger.upsert(db, learner.id, m1.id, course.id, 50.0, False)
    feedback_crud.create_feedback(db, learner.id, FeedbackCreate(course_id=course.id, rating=4))
    db.commit()
    engine.request_course_takedown(db, as_caller(trainer), course.id, "Outdated")
    engine.request_course_takedown(db, as_caller(other_trainer), other_course.id, "Duplicate")

    engine.delete_course(db, as_caller(admin), course.id)

    assert db.query(Course).filter(Course.id == course.id).count() == 0
    assert db.query(Module).filter(Module.id.in_([m1.id, m2.id])).count() == 0
    assert db.query(ModuleProgress).count() == 0
    assert db.query(Enrollment).count() == 0
    assert db.query(Feedback).count() == 0
    takedowns = _notifications(db, NotificationType.TAKEDOWN_REQUESTED)
    assert [t.course_id for t in takedowns] == [other_course.id]
    # Module notices outlive the course
    assert len(_notifications(db, NotificationType.MODULE_UPDATE)) == 2


def test_delete_course_matches_takedowns_by_quoted_name(db, admin, trainer, course):
    lookalike = make_course(db, trainer, name="Python 1010")
    # Rows written without a course_id can only be matched through the message
    for name in ("Python 101", "Python 1010"):
        notification_crud.create_notification(
            db, user_id=trainer.id, notification_type=NotificationType.TAKEDOWN_REQUESTED,
            message=f"Trainer '{trainer.email}' requested takedown of '{name}'. Reason: Old",
        )
    db.commit()

    engine.delete_course(db, as_caller(admin), course.id)

    [survivor] = _notifications(db, NotificationType.TAKEDOWN_REQUESTED)
    assert survivor.course_id is None
    assert "'Python 1010'" in survivor.message
    assert db.query(Course).filter(Course.id == lookalike.id).count() == 1


def test_delete_course_is_admin_only(db, trainer, course):
    with pytest.raises(Forbidden):
        engine.delete_course(db, as_caller(trainer), course.id)
    assert db.query(Course).count() == 1


def test_delete_missing_course(db, admin):
    with pytest.raises(NotFound):
        engine.delete_course(db, as_caller(admin), 4242)


def test_request_course_takedown(db, trainer, other_trainer, course, sent_emails):
    with pytest.raises(Forbidden):
        engine.request_course_takedown(db, as_caller(other_trainer), course.id, "Not mine")

    result = engine.request_course_takedown(db, as_caller(trainer), course.id, "Outdated material")

    assert result == {"message": "Takedown request recorded and emailed."}
    [notice] = _notifications(db, NotificationType.TAKEDOWN_REQUESTED)
    assert notice.message == "Trainer 'trainer@example.com' requested takedown of 'Python 101'. Reason: Outdated material"
    assert notice.course_id == course.id
    [mail] = sent_emails
    assert mail["to"] == settings.ADMIN_NOTIFICATION_EMAIL
    assert "Python 101" in mail["subject"]


# --- Enrollments ---

def test_create_enrollment_does_not_backfill_progress(db, course, learner):
    module = add_module(db, course)

    enrollment = engine.create_enrollment(db, as_caller(learner), course.id)

    assert enrollment.learner_id == learner.id
    assert enrollment.status == "Active"
    assert ledger.get_progress(db, learner.id, module.id) is None


def test_create_enrollment_checks(db, trainer, course, learner):
    with pytest.raises(Forbidden):
        engine.create_enrollment(db, as_caller(trainer), course.id)
    with pytest.raises(NotFound):
        engine.create_enrollment(db, as_caller(learner), 4242)


def test_drop_enrollment_only_touches_that_learner_and_course(db, trainer, course, learner, learner2):
    other_course = make_course(db, trainer, name="Python 201")
    mine = enroll(db, learner, course)
    enroll(db, learner, other_course)
    enroll(db, learner2, course)
    m1 = add_module(db, course, name="One")
    m2 = add_module(db, other_course, name="Two")
    ledger.upsert(db, learner.id, m1.id, course.id, 50.0, False)
    ledger.upsert(db, learner.id, m2.id, other_course.id, 50.0, False)
    ledger.upsert(db, learner2.id, m1.id, course.id, 50.0, False)
    feedback_crud.create_feedback(db, learner.id, FeedbackCreate(course_id=course.id, rating=5))
    feedback_crud.create_feedback(db, learner.id, FeedbackCreate(course_id=other_course.id, rating=3))
    db.commit()

    result = engine.drop_enrollment(db, as_caller(learner), mine.id)

    assert result["progress_rows_removed"] == 1
    assert result["feedback_rows_removed"] == 1
    assert result["course_id"] == course.id
    assert db.query(Enrollment).filter(Enrollment.id == mine.id).count() == 0
    assert ledger.get_progress(db, learner.id, m1.id) is None
    assert ledger.get_progress(db, learner.id, m2.id) is not None
    assert ledger.get_progress(db, learner2.id, m1.id) is not None
    assert [f.course_id for f in db.query(Feedback).all()] == [other_course.id]


def test_drop_someone_elses_enrollment_is_not_found(db, course, learner, learner2):
    theirs = enroll(db, learner2, course)
    module = add_module(db, course)
    ledger.upsert(db, learner2.id, module.id, course.id, 10.0, False)
    db.commit()

    with pytest.raises(NotFound):
        engine.drop_enrollment(db, as_caller(learner), theirs.id)
    with pytest.raises(NotFound):
        engine.drop_enrollment(db, as_caller(learner), 4242)

    assert db.query(Enrollment).filter(Enrollment.id == theirs.id).count() == 1
    assert ledger.get_progress(db, learner2.id, module.id) is not None
