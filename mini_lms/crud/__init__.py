# This file makes the 'crud' directory a Python package.

from .user_crud import (
    get_user_by_email,
    get_user_by_firebase_uid,
    get_active_learners,
    create_user,
)

from .course_crud import (
    create_course, get_course, get_courses, update_course, delete_course,
    create_module, get_module, get_modules_for_course, delete_module,
)

from .enrollment_crud import (
    create_enrollment, get_enrollment, get_enrollments_for_learner, get_enrolled_learner_ids,
    is_enrolled, delete_enrollment, delete_enrollments_for_course,
)

from .module_progress_crud import (
    get_progress,
    initialize_for_module,
    reset_for_module,
    upsert,
    mark_complete,
    remove_by_module,
    remove_by_learner_and_course,
    average_progress_for_learner_course,
    get_progress_for_learner_course,
)

from .feedback_crud import (
    create_feedback, get_feedback_for_course, delete_feedback_for_course, delete_feedback_for_learner_course,
)

from .notification_crud import (
    create_notification, get_notification, get_notifications, get_takedown_notifications,
    count_takedown_notifications, mark_read, delete_notification, delete_takedowns_for_course,
)

from .analytics_crud import (
    get_trainer_analytics,
    get_trainer_learners,
)


__all__ = [
    # User CRUD
    "get_user_by_email", "get_user_by_firebase_uid", "get_active_learners", "create_user",

    # Course & Module CRUD
    "create_course", "get_course", "get_courses", "update_course", "delete_course",
    "create_module", "get_module", "get_modules_for_course", "delete_module",

    # Enrollment CRUD
    "create_enrollment", "get_enrollment", "get_enrollments_for_learner", "get_enrolled_learner_ids",
    "is_enrolled", "delete_enrollment", "delete_enrollments_for_course",

    # Progress Ledger
    "get_progress", "initialize_for_module", "reset_for_module", "upsert", "mark_complete",
    "remove_by_module", "remove_by_learner_and_course", "average_progress_for_learner_course",
    "get_progress_for_learner_course",

    # Feedback CRUD
    "create_feedback", "get_feedback_for_course", "delete_feedback_for_course", "delete_feedback_for_learner_course",

    # Notification CRUD
    "create_notification", "get_notification", "get_notifications", "get_takedown_notifications",
    "count_takedown_notifications", "mark_read", "delete_notification", "delete_takedowns_for_course",

    # Analytics
    "get_trainer_analytics", "get_trainer_learners",
]
