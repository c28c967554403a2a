from sqlalchemy.orm import Session
import logging
from typing import List, Optional

from mini_lms.models.user_model import User
from mini_lms.models.enums import UserRole
from mini_lms.schemas.user_schema import UserCreateInternal

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User | None:
    """Fetches a user by their email address."""
    logger.debug(f"Fetching user by email: {email}")
    return db.query(User).filter(User.email == email).first()

def get_user_by_firebase_uid(db: Session, firebase_uid: str) -> User | None:
    """Fetches a user by their Firebase UID."""
    logger.debug(f"Fetching user by Firebase UID: {firebase_uid}")
    return db.query(User).filter(User.firebase_uid == firebase_uid).first()

def get_active_learners(db: Session) -> List[User]:
    """All active users with the Learner role, e.g. for new-course announcements."""
    return db.query(User).filter(
        User.role == UserRole.LEARNER.value,
        User.is_active.is_(True)
    ).order_by(User.id).all()

def create_user(db: Session, user_data: UserCreateInternal) -> Optional[User]:
    """
    Creates a new user in the database.
    Returns None if the Firebase UID or email is already taken.
    """
    logger.info(f"Attempting to create user for email: {user_data.email}, role: {user_data.role.value}")

    if user_data.firebase_uid and get_user_by_firebase_uid(db, user_data.firebase_uid):
        logger.warning(f"User creation failed: Firebase UID {user_data.firebase_uid} already exists.")
        return None
    if get_user_by_email(db, user_data.email):
        logger.warning(f"User creation failed: Email {user_data.email} already exists.")
        return None

    db_user = User(
        firebase_uid=user_data.firebase_uid,
        username=user_data.username,
        email=user_data.email,
        role=user_data.role.value,
        is_active=True,
    )
    db.add(db_user)
    try:
        db.commit()
        db.refresh(db_user)
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating user {user_data.email}: {e}", exc_info=True)
        raise
    logger.info(f"User {db_user.email} created with ID {db_user.id}.")
    return db_user
