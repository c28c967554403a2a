import logging
from firebase_admin import auth
from firebase_admin.auth import InvalidIdTokenError, ExpiredIdTokenError, RevokedIdTokenError

from mini_lms.core.exceptions import DependencyFailure, Unauthenticated
from mini_lms.core.firebase_config import get_firebase_app
from mini_lms.schemas.user_schema import TokenData

logger = logging.getLogger(__name__)

def verify_firebase_id_token(id_token: str) -> TokenData:
    """
    Verifies a Firebase ID token and extracts the uid and email claims.

    Raises:
        Unauthenticated: the token is invalid, expired, revoked, or lacks
            the uid/email claims.
        DependencyFailure: the Firebase Admin SDK could not be reached or
            is not configured.
    """
    try:
        get_firebase_app()
        decoded_token = auth.verify_id_token(id_token)
    except ExpiredIdTokenError as e:
        logger.warning(f"Firebase ID token expired: {e}")
        raise Unauthenticated("Authentication token has expired. Please log in again.")
    except RevokedIdTokenError as e:
        logger.warning(f"Firebase ID token revoked: {e}")
        raise Unauthenticated("Authentication token has been revoked. Please log in again.")
    except InvalidIdTokenError as e:
        logger.warning(f"Firebase ID token verification failed: {e}")
        raise Unauthenticated("Invalid or expired authentication token.")
    except Exception as e:
        logger.error(f"An unexpected error occurred during Firebase ID token verification: {e}", exc_info=True)
        raise DependencyFailure("Could not verify authentication token due to a server error.") from e

    firebase_uid = decoded_token.get("uid")
    email = decoded_token.get("email")
    if not firebase_uid or not email:
        logger.warning("Firebase ID token is missing 'uid' or 'email' claims.")
        raise Unauthenticated("Invalid authentication credentials: Missing essential token claims.")

    logger.info(f"Firebase ID token verified for UID: {firebase_uid}, Email: {email}")
    return TokenData(firebase_uid=firebase_uid, email=email)
