# This file makes the 'models' directory a Python package.

from mini_lms.core.database import Base # Base must be imported before models that use it

from .enums import UserRole, NotificationType, EnrollmentStatus, CourseVisibility

from .user_model import User
from .course_model import Course, Module
from .enrollment_model import Enrollment
from .module_progress_model import ModuleProgress
from .feedback_model import Feedback
from .notification_model import Notification


__all__ = [
    "Base",
    # Models
    "User",
    "Course",
    "Module",
    "Enrollment",
    "ModuleProgress",
    "Feedback",
    "Notification",
    # Enums
    "UserRole",
    "NotificationType",
    "EnrollmentStatus",
    "CourseVisibility",
]
