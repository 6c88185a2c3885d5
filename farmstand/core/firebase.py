# file: farmstand/core/firebase.py

import os
import json
import logging
from typing import Any, Dict, List, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as gcp_exceptions

from farmstand.core import config
from farmstand.core.exceptions import StoreUnavailable

logger = logging.getLogger("core.firebase")

_db = None


def init_firebase():
    """
    Initialise the default Firebase app once per process.
    GOOGLE_APPLICATION_CREDENTIALS may be a file path or a raw JSON string;
    when unset, application default credentials are used.
    """
    if firebase_admin._apps:
        return firebase_admin.get_app()

    source = config.CREDENTIAL_SOURCE
    if not source:
        logger.info("GOOGLE_APPLICATION_CREDENTIALS not set, using application default credentials")
        cred = credentials.ApplicationDefault()
    elif os.path.exists(source):
        # Case 1: it's a file path
        logger.info("Loading Firebase credentials from file: %s", source)
        cred = credentials.Certificate(source)
    else:
        # Case 2: it's a raw JSON string
        logger.info("Loading Firebase credentials from raw JSON string")
        cred = credentials.Certificate(json.loads(source))

    app = firebase_admin.initialize_app(cred, {
        "projectId": config.FIREBASE_PROJECT_ID,
    })
    logger.info("Firebase initialized with project: %s", app.project_id)
    return app


def get_db():
    """Lazy-load the shared Firestore client."""
    global _db
    if _db is None:
        try:
            init_firebase()
            _db = firestore.client()
        except Exception as e:
            logger.exception("Failed to initialize Firebase Firestore: %s", e)
            raise StoreUnavailable("The vendor database is not reachable right now.") from e
        logger.info("Firestore client project: %s", _db.project)
    return _db


class FirestoreDocumentStore:
    """
    get / merge_patch / list_all over Firestore.
    Every Google API failure surfaces as StoreUnavailable; nothing is retried here.
    """

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = get_db()
        return self._client

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        try:
            snap = self.client.collection(collection).document(doc_id).get()
        except gcp_exceptions.GoogleAPIError as e:
            logger.exception("Firestore get %s/%s failed", collection, doc_id)
            raise StoreUnavailable("Could not load the vendor record. Please try again.") from e
        if not snap.exists:
            return None
        return snap.to_dict() or {}

    def merge_patch(self, collection: str, doc_id: str, partial: Dict[str, Any]) -> None:
        """
        Write only the top-level keys of `partial`.
        Passing the keys as merge field paths replaces each listed value
        wholesale and leaves every other field of the document untouched.
        """
        try:
            self.client.collection(collection).document(doc_id).set(partial, merge=list(partial.keys()))
        except gcp_exceptions.GoogleAPIError as e:
            logger.exception("Firestore merge_patch %s/%s (%s) failed", collection, doc_id, ", ".join(partial))
            raise StoreUnavailable("Could not save your changes. Please try again.") from e
        logger.debug("merge_patch %s/%s fields=%s", collection, doc_id, list(partial))

    def list_all(self, collection: str) -> List[Dict[str, Any]]:
        try:
            docs = list(self.client.collection(collection).stream())
        except gcp_exceptions.GoogleAPIError as e:
            logger.exception("Firestore list %s failed", collection)
            raise StoreUnavailable("Could not load vendors. Please try again.") from e
        return [{"id": doc.id, **(doc.to_dict() or {})} for doc in docs]


_store = None


def get_store() -> FirestoreDocumentStore:
    """FastAPI dependency returning the process-wide document store."""
    global _store
    if _store is None:
        _store = FirestoreDocumentStore()
    return _store


# ------------------------------
# Exports
# ------------------------------
__all__ = ["get_db", "get_store", "FirestoreDocumentStore"]
