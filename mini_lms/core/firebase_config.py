"""
Firebase Admin SDK bootstrap. The SDK is only used to verify ID tokens
(see core/security.py); users themselves live in our database.
"""
import logging
import os
from typing import Optional

import firebase_admin
from firebase_admin import credentials

from mini_lms.core.config import settings

logger = logging.getLogger(__name__)

_firebase_app: Optional[firebase_admin.App] = None


def initialize_firebase_app() -> firebase_admin.App:
    """Loads the service account from GOOGLE_APPLICATION_CREDENTIALS and initializes the SDK once."""
    global _firebase_app
    if _firebase_app is not None:
        return _firebase_app

    cred_path = settings.GOOGLE_APPLICATION_CREDENTIALS
    if not cred_path:
        raise ValueError("GOOGLE_APPLICATION_CREDENTIALS is not set.")
    if not os.path.exists(cred_path):
        raise FileNotFoundError(f"Firebase service account key file not found at path: {cred_path}")

    _firebase_app = firebase_admin.initialize_app(credentials.Certificate(cred_path))
    logger.info(f"Firebase Admin SDK initialized for project '{_firebase_app.project_id}'.")
    return _firebase_app


def get_firebase_app() -> firebase_admin.App:
    return _firebase_app or initialize_firebase_app()
