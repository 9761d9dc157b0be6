"""Firebase Admin app lifecycle.

The app is initialized once per process and handed to the adapters that
need it; ``close_firebase_app`` tears it down on shutdown.
"""

import logging
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore_async
from google.cloud.firestore import AsyncClient

from core.config import settings

logger = logging.getLogger(__name__)

_app: Optional[firebase_admin.App] = None


def get_firebase_app() -> firebase_admin.App:
    """Get or initialize the Firebase Admin app."""
    global _app
    if _app is None:
        if settings.firebase_credentials_path:
            cred: credentials.Base = credentials.Certificate(settings.firebase_credentials_path)
        else:
            cred = credentials.ApplicationDefault()

        options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
        _app = firebase_admin.initialize_app(cred, options)
        logger.info("Initialized Firebase app for project %s", _app.project_id)
    return _app


def get_firestore_client() -> AsyncClient:
    """Get the async Firestore client bound to the Firebase app."""
    return firestore_async.client(get_firebase_app())


def close_firebase_app() -> None:
    """Delete the Firebase app if it was initialized."""
    global _app
    if _app is not None:
        firebase_admin.delete_app(_app)
        _app = None
