"""gmailfilter_filter data source: look up a filter by ID."""

from typing import Optional

from .. import gmail
from ..framework import (
    DataSource, DataSourceReadRequest, Response, Schema, SingleNestedAttribute, StringAttribute,
)
from ..gmail import REMOTE_ERRORS
from .client import ProviderConfig
from .filter_resource import action_attributes, criteria_attributes
from .models import FilterModel, action_from_api, criteria_from_api


class FilterDataSource(DataSource):

    def __init__(self):
        self.config: Optional[ProviderConfig] = None

    def metadata(self, provider_type_name: str) -> str:
        return provider_type_name + "_filter"

    def schema(self) -> Schema:
        return Schema(
            description="Reads a Gmail filter",
            attributes={
                "id": StringAttribute(required=True, description="The ID of the filter"),
                "action": SingleNestedAttribute(
                    computed=True,
                    description="Action that the filter performs",
                    attributes=action_attributes(computed=True),
                ),
                "criteria": SingleNestedAttribute(
                    computed=True,
                    description="The criteria that a message should match to apply the filter",
                    attributes=criteria_attributes(computed=True),
                ),
            },
        )

    def provider_data_type(self):
        return ProviderConfig

    def set_provider_data(self, provider_data: ProviderConfig):
        self.config = provider_data

    def read(self, req: DataSourceReadRequest, resp: Response):
        data, diags = req.config.get(FilterModel)
        resp.diagnostics.extend(diags)
        if resp.diagnostics.has_error():
            return

        try:
            result = gmail.get_filter(self.config.gmail_service, data.id, user_id=self.config.user_id)
        except REMOTE_ERRORS as e:
            resp.diagnostics.add_error("Failed to read filter", str(e))
            return

        data.action = action_from_api(result.get("action", {}))
        data.criteria = criteria_from_api(result.get("criteria", {}))
        resp.diagnostics.extend(resp.state.set(data))
