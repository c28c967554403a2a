from fastapi import APIRouter, Depends, HTTPException, status, Body
from sqlalchemy.orm import Session
import logging

from mini_lms.core.database import get_db
from mini_lms.core.dependencies import get_current_user
from mini_lms.core.exceptions import Forbidden, NotFound
from mini_lms.core.security import verify_firebase_id_token
from mini_lms.crud.user_crud import create_user, get_user_by_email, get_user_by_firebase_uid
from mini_lms.models.enums import UserRole
from mini_lms.models.user_model import User
from mini_lms.schemas.user_schema import (
    UserRegisterRequest,
    UserLoginRequest,
    UserDisplay,
    AuthResponse,
    UserCreateInternal,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_user_after_firebase(
    payload: UserRegisterRequest = Body(...),
    db: Session = Depends(get_db)
):
    """
    Create the local profile for a user who has just signed up with Firebase
    on the client. The Firebase ID token is sent in the request body.
    """
    token_data = verify_firebase_id_token(payload.firebase_id_token)
    firebase_uid, email = token_data.firebase_uid, token_data.email
    logger.info(f"Registration attempt for UID: {firebase_uid}, Email: {email}, role: {payload.role.value}")

    if payload.role == UserRole.ADMIN:
        raise Forbidden("Admin accounts cannot be self-registered.")

    if get_user_by_firebase_uid(db, firebase_uid=firebase_uid):
        logger.warning(f"Registration failed: User with Firebase UID {firebase_uid} already exists.")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User with this Firebase UID already exists.")
    if get_user_by_email(db, email=email):
        logger.warning(f"Registration failed: User with email {email} already exists.")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User with this email already exists.")

    db_user = create_user(db, user_data=UserCreateInternal(
        firebase_uid=firebase_uid,
        email=email,
        username=payload.username,
        role=payload.role,
    ))
    if not db_user:
        # Lost a race with a concurrent registration for the same account
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists.")

    return AuthResponse(message="User registered successfully.", user=UserDisplay.model_validate(db_user))


@router.post("/login", response_model=AuthResponse)
async def login_user_with_firebase(
    payload: UserLoginRequest = Body(...),
    db: Session = Depends(get_db)
):
    """Confirms that a Firebase-authenticated user has a local profile."""
    token_data = verify_firebase_id_token(payload.firebase_id_token)

    user = get_user_by_firebase_uid(db, firebase_uid=token_data.firebase_uid)
    if not user:
        logger.warning(f"Login failed: User with Firebase UID {token_data.firebase_uid} not found in local database.")
        raise NotFound("User not registered in our system. Please complete registration.")
    if not user.is_active:
        raise Forbidden("User account is inactive.")

    logger.info(f"User {user.email} logged in successfully.")
    return AuthResponse(message="Login successful.", user=UserDisplay.model_validate(user))


@router.get("/users/me", response_model=UserDisplay)
async def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user
