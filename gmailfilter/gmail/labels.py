"""Gmail label operations (users.labels)."""

import logging
from typing import Dict, Any, List, Optional

from ..timing import time_api_call

logger = logging.getLogger(__name__)


@time_api_call
def list_labels(service: Any, user_id: str = 'me') -> List[Dict[str, Any]]:
    """
    List all Gmail labels.

    The labels.list endpoint has no paging; one response holds every label
    in the mailbox.

    Args:
        service: Gmail API service object
        user_id: Mailbox to act on

    Returns:
        List of label dicts with 'id', 'name', 'type' fields
    """
    results = service.users().labels().list(userId=user_id).execute()
    return results.get('labels', [])


def find_label_by_name(service: Any, label_name: str, user_id: str = 'me') -> Optional[Dict[str, Any]]:
    """Return the label whose name matches exactly, or None."""
    for label in list_labels(service, user_id=user_id):
        if label.get('name') == label_name:
            logger.debug(f"Label '{label_name}' exists with ID: {label['id']}")
            return label
    return None


@time_api_call
def create_label(service: Any, body: Dict[str, Any], user_id: str = 'me') -> Dict[str, Any]:
    """Create a label and return the created resource."""
    created = service.users().labels().create(userId=user_id, body=body).execute()
    logger.debug(f"Created label '{body.get('name')}' with ID: {created.get('id')}")
    return created


@time_api_call
def get_label(service: Any, label_id: str, user_id: str = 'me') -> Dict[str, Any]:
    """Fetch a label by ID."""
    return service.users().labels().get(userId=user_id, id=label_id).execute()


@time_api_call
def update_label(service: Any, label_id: str, body: Dict[str, Any], user_id: str = 'me') -> Dict[str, Any]:
    """Replace the mutable fields of a label and return the updated resource."""
    updated = service.users().labels().update(userId=user_id, id=label_id, body=body).execute()
    logger.debug(f"Updated label {label_id}")
    return updated


@time_api_call
def delete_label(service: Any, label_id: str, user_id: str = 'me') -> None:
    """Delete a label by ID."""
    service.users().labels().delete(userId=user_id, id=label_id).execute()
    logger.debug(f"Deleted label {label_id}")
