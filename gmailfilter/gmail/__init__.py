"""Gmail filter and label operations.

Every function takes an already-built Gmail service so a single handle can
be shared across callers.

Example usage:
    from gmailfilter.auth import get_credentials
    from gmailfilter import gmail

    creds, _ = get_credentials(["settings", "labels"])
    service = gmail.get_gmail_service(creds)
    label = gmail.create_label(service, {"name": "Receipts"})
    gmail.create_filter(service, {
        "criteria": {"from": "shop@example.com"},
        "action": {"addLabelIds": [label["id"]], "removeLabelIds": []},
    })
"""

from .service import REMOTE_ERRORS, get_gmail_service, is_not_found_error
from .filters import create_filter, get_filter, delete_filter
from .labels import (
    create_label, get_label, update_label, delete_label, list_labels, find_label_by_name,
)

__all__ = [
    "REMOTE_ERRORS",
    "get_gmail_service",
    "is_not_found_error",
    "create_filter",
    "get_filter",
    "delete_filter",
    "create_label",
    "get_label",
    "update_label",
    "delete_label",
    "list_labels",
    "find_label_by_name",
]
