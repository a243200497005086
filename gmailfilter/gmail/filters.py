"""Gmail filter operations (users.settings.filters)."""

import logging
from typing import Dict, Any

from ..timing import time_api_call

logger = logging.getLogger(__name__)


@time_api_call
def create_filter(service: Any, body: Dict[str, Any], user_id: str = 'me') -> Dict[str, Any]:
    """
    Create a Gmail filter.

    Args:
        service: Gmail API service object
        body: Filter resource with 'action' and 'criteria'
        user_id: Mailbox to act on

    Returns:
        Created filter resource dict, including its server-assigned 'id'
    """
    created = service.users().settings().filters().create(userId=user_id, body=body).execute()
    logger.debug(f"Created filter with ID: {created.get('id')}")
    return created


@time_api_call
def get_filter(service: Any, filter_id: str, user_id: str = 'me') -> Dict[str, Any]:
    """Fetch a Gmail filter by ID."""
    return service.users().settings().filters().get(userId=user_id, id=filter_id).execute()


@time_api_call
def delete_filter(service: Any, filter_id: str, user_id: str = 'me') -> None:
    """Delete a Gmail filter by ID."""
    service.users().settings().filters().delete(userId=user_id, id=filter_id).execute()
    logger.debug(f"Deleted filter {filter_id}")
