import enum

class UserRole(str, enum.Enum):
    TRAINER = "Trainer"
    LEARNER = "Learner"
    ADMIN = "Admin"

class NotificationType(str, enum.Enum):
    MODULE_UPDATE = "ModuleUpdate"
    COURSE_CREATED = "CourseCreated"
    TAKEDOWN_REQUESTED = "TakedownRequested"

class EnrollmentStatus(str, enum.Enum):
    ACTIVE = "Active"

class CourseVisibility(str, enum.Enum):
    PUBLIC = "Public"
    PRIVATE = "Private"

# Stored as VARCHAR columns; values are compared against the enum members'
# string values, so rows written by other tools with the same strings match.
