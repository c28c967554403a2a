from fastapi import Depends, Request
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session
import logging

from mini_lms.core.database import get_db
from mini_lms.core.exceptions import Forbidden, Unauthenticated
from mini_lms.core.security import verify_firebase_id_token
from mini_lms.crud.user_crud import get_user_by_firebase_uid
from mini_lms.models.enums import UserRole
from mini_lms.models.user_model import User
from mini_lms.schemas.user_schema import Caller, TokenData

logger = logging.getLogger(__name__)

async def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Verifies the Firebase ID token from the Authorization header, then
    fetches the matching user from the database.
    """
    authorization = request.headers.get("Authorization")
    scheme, param = get_authorization_scheme_param(authorization)

    if not authorization or scheme.lower() != "bearer" or not param:
        logger.warning("Missing or invalid Bearer token in Authorization header.")
        raise Unauthenticated("Not authenticated. Bearer token required.")

    token_data: TokenData = verify_firebase_id_token(param)

    user = get_user_by_firebase_uid(db, firebase_uid=token_data.firebase_uid)
    if user is None:
        # Authenticated with Firebase but never completed /auth/register
        logger.warning(f"User not found in DB for Firebase UID: {token_data.firebase_uid} from token.")
        raise Forbidden("User account not found or not fully registered in the system.")
    if not user.is_active:
        logger.warning(f"Inactive user {user.email} attempted access.")
        raise Forbidden("User account is inactive.")

    logger.debug(f"Authenticated user retrieved: {user.email} (ID: {user.id})")
    return user


async def get_caller(current_user: User = Depends(get_current_user)) -> Caller:
    return Caller(user_id=current_user.id, role=UserRole(current_user.role), email=current_user.email)


def require_roles(*roles: UserRole):
    """Dependency factory: resolves the caller and rejects any role not listed."""
    async def _checker(caller: Caller = Depends(get_caller)) -> Caller:
        if caller.role not in roles:
            allowed = ", ".join(r.value for r in roles)
            logger.warning(f"Access denied for {caller.email} (Role: {caller.role.value}); requires {allowed}.")
            raise Forbidden(f"Operation not permitted: requires role {allowed}.")
        return caller
    return _checker


get_admin_caller = require_roles(UserRole.ADMIN)
get_learner_caller = require_roles(UserRole.LEARNER)
