# This file makes the 'schemas' directory a Python package.

from .user_schema import (
    UserBase, UserCreateInternal, UserDisplay, TokenData, Caller,
    UserRegisterRequest, UserLoginRequest, AuthResponse
)

from .course_schema import (
    CourseBase, CourseCreate, CourseUpdate, CourseDisplay, TrainerRef,
    TakedownRequest, ModuleDisplay, ModuleWithProgress, MessageResponse
)

from .module_progress_schema import (
    ModuleProgressUpdate, ModuleCompleteRequest, ModuleProgressDisplay,
    ModuleProgressSummary, CourseProgressDisplay
)

from .enrollment_schema import EnrollmentCreate, EnrollmentDisplay, EnrollmentDropResult

from .feedback_schema import FeedbackCreate, FeedbackDisplay

from .notification_schema import NotificationDisplay, TakedownNotificationDisplay, TakedownCount

from .analytics_schema import (
    CourseAnalytics, TrainerAnalytics, LearnerCourseProgress, LearnerRosterEntry
)


__all__ = [
    # User Schemas
    "UserBase", "UserCreateInternal", "UserDisplay", "TokenData", "Caller",
    "UserRegisterRequest", "UserLoginRequest", "AuthResponse",

    # Course & Module Schemas
    "CourseBase", "CourseCreate", "CourseUpdate", "CourseDisplay", "TrainerRef",
    "TakedownRequest", "ModuleDisplay", "ModuleWithProgress", "MessageResponse",

    # Module Progress Schemas
    "ModuleProgressUpdate", "ModuleCompleteRequest", "ModuleProgressDisplay",
    "ModuleProgressSummary", "CourseProgressDisplay",

    # Enrollment Schemas
    "EnrollmentCreate", "EnrollmentDisplay", "EnrollmentDropResult",

    # Feedback Schemas
    "FeedbackCreate", "FeedbackDisplay",

    # Notification Schemas
    "NotificationDisplay", "TakedownNotificationDisplay", "TakedownCount",

    # Analytics Schemas
    "CourseAnalytics", "TrainerAnalytics", "LearnerCourseProgress", "LearnerRosterEntry",
]
