"""gmailfilter_label data source: look up a label by its display name."""

from typing import Optional

from .. import gmail
from ..framework import (
    DataSource, DataSourceReadRequest, Int64Attribute, Response, Schema, StringAttribute,
)
from ..gmail import REMOTE_ERRORS
from .client import ProviderConfig
from .models import LabelModel, update_label_model


class LabelDataSource(DataSource):

    def __init__(self):
        self.config: Optional[ProviderConfig] = None

    def metadata(self, provider_type_name: str) -> str:
        return provider_type_name + "_label"

    def schema(self) -> Schema:
        return Schema(
            description="Reads a Gmail label by name",
            attributes={
                "id": StringAttribute(computed=True, description="The immutable ID of the label"),
                "name": StringAttribute(required=True, description="The display name of the label"),
                "background_color": StringAttribute(computed=True, description="The background color represented as hex string #RRGGBB"),
                "text_color": StringAttribute(computed=True, description="The text color of the label, represented as hex string"),
                "label_list_visibility": StringAttribute(computed=True, description="The visibility of the label in the label list in the Gmail web interface"),
                "message_list_visibility": StringAttribute(computed=True, description="The visibility of messages with this label in the message list"),
                "messages_total": Int64Attribute(computed=True, description="The total number of messages with the label"),
                "messages_unread": Int64Attribute(computed=True, description="The number of unread messages with the label"),
                "threads_total": Int64Attribute(computed=True, description="The total number of threads with the label"),
                "threads_unread": Int64Attribute(computed=True, description="The number of unread threads with the label"),
                "type": StringAttribute(computed=True, description="The owner type for the label (user or system)"),
            },
        )

    def provider_data_type(self):
        return ProviderConfig

    def set_provider_data(self, provider_data: ProviderConfig):
        self.config = provider_data

    def read(self, req: DataSourceReadRequest, resp: Response):
        data, diags = req.config.get(LabelModel)
        resp.diagnostics.extend(diags)
        if resp.diagnostics.has_error():
            return

        try:
            label = gmail.find_label_by_name(self.config.gmail_service, data.name, user_id=self.config.user_id)
        except REMOTE_ERRORS as e:
            resp.diagnostics.add_error("Failed to list labels", str(e))
            return

        if label is None:
            resp.diagnostics.add_error("Label not found", f"No label with name {data.name!r} found")
            return

        update_label_model(data, label)
        resp.diagnostics.extend(resp.state.set(data))
