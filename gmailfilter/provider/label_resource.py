"""gmailfilter_label resource."""

import logging
from typing import Optional

from .. import gmail
from ..framework import (
    CreateRequest, DeleteRequest, ImportStateRequest, Int64Attribute, ReadRequest,
    Resource, Response, Schema, StringAttribute, UpdateRequest, UseStateForUnknown,
    import_state_passthrough_id, is_known,
)
from ..gmail import REMOTE_ERRORS
from .client import ProviderConfig
from .models import LabelModel, keep_partial_colour, label_to_api, update_label_model

logger = logging.getLogger(__name__)


class LabelResource(Resource):

    def __init__(self):
        self.config: Optional[ProviderConfig] = None

    def metadata(self, provider_type_name: str) -> str:
        return provider_type_name + "_label"

    def schema(self) -> Schema:
        return Schema(
            description="Manages a Gmail label",
            attributes={
                "id": StringAttribute(
                    computed=True,
                    description="The immutable ID of the label",
                    plan_modifiers=[UseStateForUnknown()],
                ),
                "name": StringAttribute(required=True, description="The display name of the label"),
                "background_color": StringAttribute(
                    optional=True,
                    description="The background color represented as hex string #RRGGBB",
                ),
                "text_color": StringAttribute(
                    optional=True,
                    description="The text color of the label, represented as hex string",
                ),
                "label_list_visibility": StringAttribute(
                    optional=True,
                    computed=True,
                    description="The visibility of the label in the label list in the Gmail web interface",
                ),
                "message_list_visibility": StringAttribute(
                    optional=True,
                    computed=True,
                    description="The visibility of messages with this label in the message list",
                ),
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

    def create(self, req: CreateRequest, resp: Response):
        data, diags = req.plan.get(LabelModel)
        resp.diagnostics.extend(diags)
        if resp.diagnostics.has_error():
            return

        try:
            result = gmail.create_label(self.config.gmail_service, label_to_api(data), user_id=self.config.user_id)
        except REMOTE_ERRORS as e:
            resp.diagnostics.add_error("Failed to create label", str(e))
            return

        background_color, text_color = data.background_color, data.text_color
        data.id = result["id"]
        update_label_model(data, result)
        keep_partial_colour(data, background_color, text_color, result)
        resp.diagnostics.extend(resp.state.set(data))

    def read(self, req: ReadRequest, resp: Response):
        data, diags = req.state.get(LabelModel)
        resp.diagnostics.extend(diags)
        if resp.diagnostics.has_error():
            return

        try:
            label = gmail.get_label(self.config.gmail_service, data.id, user_id=self.config.user_id)
        except REMOTE_ERRORS as e:
            if gmail.is_not_found_error(e):
                resp.state.remove_resource()
                return
            resp.diagnostics.add_error("Failed to read label", str(e))
            return

        background_color, text_color = data.background_color, data.text_color
        update_label_model(data, label)
        keep_partial_colour(data, background_color, text_color, label)
        resp.diagnostics.extend(resp.state.set(data))

    def update(self, req: UpdateRequest, resp: Response):
        data, diags = req.plan.get(LabelModel)
        resp.diagnostics.extend(diags)
        prior, diags = req.state.get(LabelModel)
        resp.diagnostics.extend(diags)
        if resp.diagnostics.has_error():
            return

        # labels.update replaces the label, so unconfigured visibilities keep their current values
        if not is_known(data.label_list_visibility):
            data.label_list_visibility = prior.label_list_visibility
        if not is_known(data.message_list_visibility):
            data.message_list_visibility = prior.message_list_visibility

        background_color, text_color = data.background_color, data.text_color
        try:
            result = gmail.update_label(
                self.config.gmail_service, data.id, label_to_api(data), user_id=self.config.user_id
            )
        except REMOTE_ERRORS as e:
            resp.diagnostics.add_error("Failed to update label", str(e))
            return

        update_label_model(data, result)
        keep_partial_colour(data, background_color, text_color, result)
        resp.diagnostics.extend(resp.state.set(data))

    def delete(self, req: DeleteRequest, resp: Response):
        data, diags = req.state.get(LabelModel)
        resp.diagnostics.extend(diags)
        if resp.diagnostics.has_error():
            return

        try:
            gmail.delete_label(self.config.gmail_service, data.id, user_id=self.config.user_id)
        except REMOTE_ERRORS as e:
            if gmail.is_not_found_error(e):
                logger.debug(f"Label {data.id} already deleted")
                return
            resp.diagnostics.add_error("Failed to delete label", str(e))

    def import_state(self, req: ImportStateRequest, resp: Response):
        import_state_passthrough_id("id", req, resp)
