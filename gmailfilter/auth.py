"""Credential loading for gmailfilter.

Credentials always come from the ambient environment through Google's
Application Default Credentials chain. Nothing secret is read from the
gmailfilter configuration file.
"""

import logging
from typing import Tuple, Any, List

import google.auth
from google.auth.exceptions import DefaultCredentialsError

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Scope aliases for convenience in the config file
SCOPE_ALIASES = {
    "settings": "https://www.googleapis.com/auth/gmail.settings.basic",
    "labels": "https://www.googleapis.com/auth/gmail.labels",
    "modify": "https://www.googleapis.com/auth/gmail.modify",
}


def resolve_scope_alias(alias: str) -> str:
    """Resolve a scope alias to its full URL, or return the input if not an alias."""
    return SCOPE_ALIASES.get(alias, alias)


def get_credentials(scopes: List[str]) -> Tuple[Any, str]:
    """
    Load Application Default Credentials for the given scopes.

    Args:
        scopes: Scope URLs or aliases to request

    Returns:
        Tuple of (credentials object, source description)

    Raises:
        ConfigurationError: If no default credentials can be found
    """
    resolved = [resolve_scope_alias(s) for s in scopes]
    logger.info("Authenticating using Application Default Credentials (ADC)...")
    logger.info(f"  -- Scopes: {resolved}")
    try:
        creds, project = google.auth.default(scopes=resolved)
    except DefaultCredentialsError as e:
        raise ConfigurationError(f"Application Default Credentials not available: {e}") from e

    source = "Application Default Credentials"
    if project:
        source += f" (project: {project})"
    return creds, source
