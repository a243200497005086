"""Shared Gmail service handle injected into every resource and data source."""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from ..auth import get_credentials
from ..config import DEFAULT_CONFIG, get_config_value
from ..exceptions import ConfigurationError
from ..gmail import get_gmail_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderConfig:
    """Read-only after construction; safe to share across concurrent operations."""
    gmail_service: Any
    user_id: str = "me"
    source: str = ""

    @classmethod
    def load_and_validate(cls, user_id: Optional[str] = None, scopes: Optional[List[str]] = None) -> "ProviderConfig":
        """
        Build the handle from Application Default Credentials.

        Args:
            user_id: Mailbox to manage (defaults to gmail.user_id from config)
            scopes: OAuth scopes (defaults to gmail.scopes from config)

        Raises:
            ConfigurationError: If credentials or the service cannot be obtained
        """
        user_id = user_id or get_config_value("gmail.user_id", DEFAULT_CONFIG["gmail"]["user_id"])
        scopes = scopes or get_config_value("gmail.scopes", DEFAULT_CONFIG["gmail"]["scopes"])

        creds, source = get_credentials(scopes)
        try:
            service = get_gmail_service(creds)
        except Exception as e:
            raise ConfigurationError(f"Failed to build Gmail service: {e}") from e

        logger.debug(f"Gmail service ready for user '{user_id}' using {source}")
        return cls(gmail_service=service, user_id=user_id, source=source)
