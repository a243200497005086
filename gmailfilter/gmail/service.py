"""Gmail service factory and error classification."""

import logging
from typing import Any

from googleapiclient.discovery import build
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)

# Failures raised by a Gmail API call: HTTP errors and credential refresh errors
REMOTE_ERRORS = (HttpError, GoogleAuthError)


def get_gmail_service(credentials: Any) -> Any:
    """
    Build an authenticated Gmail API service object.

    Args:
        credentials: google-auth credentials

    Returns:
        Gmail API service object
    """
    logger.debug("Building Gmail v1 service")
    return build("gmail", "v1", credentials=credentials, cache_discovery=False)


def is_not_found_error(err: BaseException) -> bool:
    """Return True if err is a Gmail API 404 response."""
    return isinstance(err, HttpError) and getattr(err.resp, "status", None) == 404
