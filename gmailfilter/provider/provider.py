"""The gmailfilter provider."""

import logging
from typing import Callable, Optional

from ..exceptions import ConfigurationError
from ..framework import ConfigureResponse, Provider, Schema, State
from .client import ProviderConfig
from .filter_data_source import FilterDataSource
from .filter_resource import FilterResource
from .label_data_source import LabelDataSource
from .label_resource import LabelResource

logger = logging.getLogger(__name__)

TYPE_NAME = "gmailfilter"


class GmailFilterProvider(Provider):
    """
    Manage Gmail filters and labels using Application Default Credentials.

    Args:
        version: Provider version reported to the host
        config_loader: Builds the shared ProviderConfig; defaults to
            ProviderConfig.load_and_validate
    """

    def __init__(self, version: str, config_loader: Optional[Callable[[], ProviderConfig]] = None):
        self.version = version
        self.config_loader = config_loader or ProviderConfig.load_and_validate

    def metadata(self):
        return TYPE_NAME, self.version

    def schema(self) -> Schema:
        return Schema(description="Manage Gmail filters and labels using Application Default Credentials.")

    def configure(self, config: State, resp: ConfigureResponse):
        try:
            provider_config = self.config_loader()
        except ConfigurationError as e:
            resp.diagnostics.add_error("Failed to configure provider", str(e))
            return
        logger.debug(f"Provider configured with {provider_config.source or 'injected service'}")
        resp.resource_data = provider_config
        resp.data_source_data = provider_config

    def resources(self):
        return [FilterResource, LabelResource]

    def data_sources(self):
        return [FilterDataSource, LabelDataSource]


def new(version: str, config_loader: Optional[Callable[[], ProviderConfig]] = None) -> Callable[[], GmailFilterProvider]:
    """Return a provider factory for ProviderServer."""
    def factory():
        return GmailFilterProvider(version, config_loader=config_loader)
    return factory
