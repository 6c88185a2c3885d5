# farmstand/core/logger.py
import logging

from farmstand.core import config

_cloud_client = None


def setup_cloud_logging() -> bool:
    """
    Route stdlib logging to Google Cloud Logging when USE_CLOUD_LOGGING is on.
    Safe to call more than once.
    """
    global _cloud_client
    if not config.USE_CLOUD_LOGGING:
        return False
    if _cloud_client is None:
        import google.cloud.logging

        _cloud_client = google.cloud.logging.Client(project=config.FIREBASE_PROJECT_ID)
        _cloud_client.setup_logging(log_level=getattr(logging, config.LOG_LEVEL, logging.INFO))
    return True


def log_to_cloud(category: str, severity: str, message: str, metadata: dict = None):
    logging.log(
        getattr(logging, severity.upper(), logging.INFO),
        f"[{category}] {message}",
        extra={"metadata": metadata or {}}
    )
