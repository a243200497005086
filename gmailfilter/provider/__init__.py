"""Gmail filter provider: resources and data sources for filters and labels.

Example usage:
    from gmailfilter import __version__
    from gmailfilter.framework import ProviderServer
    from gmailfilter.provider import new

    server = ProviderServer(new(__version__))
    server.configure_provider()
    plan = server.plan_resource_change("gmailfilter_label", None, {"name": "Receipts"})
    result = server.apply_resource_change("gmailfilter_label", plan)
"""

from .client import ProviderConfig
from .provider import GmailFilterProvider, TYPE_NAME, new
from .filter_resource import FilterResource
from .label_resource import LabelResource
from .filter_data_source import FilterDataSource
from .label_data_source import LabelDataSource

__all__ = [
    "ProviderConfig",
    "GmailFilterProvider",
    "TYPE_NAME",
    "new",
    "FilterResource",
    "LabelResource",
    "FilterDataSource",
    "LabelDataSource",
]
