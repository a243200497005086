"""gmailfilter_filter resource."""

import logging
from typing import Dict, List, Optional

from .. import gmail
from ..framework import (
    BoolAttribute, CreateRequest, DeleteRequest, Diagnostics, ImportStateRequest,
    Int64Attribute, ListAttribute, ListNestedAttribute, ReadRequest, RequiresReplace,
    Resource, Response, Schema, SingleNestedBlock, StateUpgrader, StringAttribute,
    UpdateRequest, UpgradeStateRequest, UseStateForUnknown, import_state_passthrough_id,
)
from ..gmail import REMOTE_ERRORS
from .client import ProviderConfig
from .models import (
    FilterModel, LegacyFilterModel, action_state_from_api, action_to_api,
    criteria_state_from_api, criteria_to_api,
)

logger = logging.getLogger(__name__)


def action_attributes(**flags) -> Dict[str, object]:
    return {
        "add_label_ids": ListAttribute(element_type=str, description="List of labels to add to the message", **flags),
        "forward": StringAttribute(description="Email address that the message should be forwarded to", **flags),
        "remove_label_ids": ListAttribute(element_type=str, description="List of labels to remove from the message", **flags),
    }


def criteria_attributes(**flags) -> Dict[str, object]:
    return {
        "exclude_chats": BoolAttribute(description="Whether the response should exclude chats", **flags),
        "from": StringAttribute(description="The sender's display name or email address", **flags),
        "has_attachment": BoolAttribute(description="Whether the message has any attachment", **flags),
        "negated_query": StringAttribute(description="Only return messages not matching the specified query", **flags),
        "query": StringAttribute(description="Only return messages matching the specified query", **flags),
        "size": Int64Attribute(description="The size of the entire RFC822 message in bytes", **flags),
        "size_comparison": StringAttribute(description="How the message size should be compared (larger/smaller/unspecified)", **flags),
        "subject": StringAttribute(description="Case-insensitive phrase found in the message's subject", **flags),
        "to": StringAttribute(description="The recipient's display name or email address", **flags),
    }


# Version 0 stored action and criteria as lists holding a single object.
LEGACY_FILTER_SCHEMA = Schema(
    version=0,
    attributes={
        "id": StringAttribute(computed=True),
        "action": ListNestedAttribute(required=True, attributes=action_attributes(optional=True)),
        "criteria": ListNestedAttribute(required=True, attributes=criteria_attributes(optional=True)),
    },
)


def _first_element(items: Optional[List], name: str, diags: Diagnostics):
    if not items:
        diags.add_error(
            "Invalid legacy filter state",
            f"Expected exactly one {name} element in version 0 state, found none",
            name,
        )
        return None
    if len(items) > 1:
        diags.add_warning(
            "Extra legacy filter elements dropped",
            f"Version 0 state held {len(items)} {name} elements; only the first was kept",
            name,
        )
    return items[0]


class FilterResource(Resource):
    """Gmail filters cannot be edited in place; action or criteria changes replace the filter."""

    def __init__(self):
        self.config: Optional[ProviderConfig] = None

    def metadata(self, provider_type_name: str) -> str:
        return provider_type_name + "_filter"

    def schema(self) -> Schema:
        return Schema(
            version=1,
            description="Manages a Gmail filter",
            attributes={
                "id": StringAttribute(
                    computed=True,
                    description="The server assigned ID of the filter",
                    plan_modifiers=[UseStateForUnknown()],
                ),
            },
            blocks={
                "action": SingleNestedBlock(
                    description="Action that the filter performs. Changes to this block will require the filter to be recreated.",
                    plan_modifiers=[RequiresReplace()],
                    attributes=action_attributes(optional=True),
                ),
                "criteria": SingleNestedBlock(
                    description="The criteria that a message should match to apply the filter. Changes to this block will require the filter to be recreated.",
                    plan_modifiers=[RequiresReplace()],
                    attributes=criteria_attributes(optional=True),
                ),
            },
        )

    def provider_data_type(self):
        return ProviderConfig

    def set_provider_data(self, provider_data: ProviderConfig):
        self.config = provider_data

    def create(self, req: CreateRequest, resp: Response):
        data, diags = req.plan.get(FilterModel)
        resp.diagnostics.extend(diags)
        if resp.diagnostics.has_error():
            return

        for name in ("action", "criteria"):
            if getattr(data, name) is None:
                resp.diagnostics.add_error("Missing required block", f"A {name} block is required to create a filter", name)
        if resp.diagnostics.has_error():
            return

        body = {
            "action": action_to_api(data.action),
            "criteria": criteria_to_api(data.criteria),
        }
        try:
            result = gmail.create_filter(self.config.gmail_service, body, user_id=self.config.user_id)
        except REMOTE_ERRORS as e:
            resp.diagnostics.add_error("Failed to create filter", str(e))
            return

        data.id = result["id"]
        resp.diagnostics.extend(resp.state.set(data))

    def read(self, req: ReadRequest, resp: Response):
        data, diags = req.state.get(FilterModel)
        resp.diagnostics.extend(diags)
        if resp.diagnostics.has_error():
            return

        try:
            result = gmail.get_filter(self.config.gmail_service, data.id, user_id=self.config.user_id)
        except REMOTE_ERRORS as e:
            if gmail.is_not_found_error(e):
                resp.state.remove_resource()
                return
            resp.diagnostics.add_error("Failed to read filter", str(e))
            return

        # Blocks already in state are kept as-is; a block missing from state
        # (after import) is filled from the remote filter.
        if data.action is None:
            data.action = action_state_from_api(result.get("action", {}))
        if data.criteria is None:
            data.criteria = criteria_state_from_api(result.get("criteria", {}))
        resp.diagnostics.extend(resp.state.set(data))

    def update(self, req: UpdateRequest, resp: Response):
        # action and criteria both require replacement, so an update only
        # ever carries the plan through unchanged.
        plan, diags = req.plan.get(FilterModel)
        resp.diagnostics.extend(diags)
        if resp.diagnostics.has_error():
            return
        resp.diagnostics.extend(resp.state.set(plan))

    def delete(self, req: DeleteRequest, resp: Response):
        data, diags = req.state.get(FilterModel)
        resp.diagnostics.extend(diags)
        if resp.diagnostics.has_error():
            return

        try:
            gmail.delete_filter(self.config.gmail_service, data.id, user_id=self.config.user_id)
        except REMOTE_ERRORS as e:
            if gmail.is_not_found_error(e):
                logger.debug(f"Filter {data.id} already deleted")
                return
            resp.diagnostics.add_error("Failed to delete filter", str(e))

    def import_state(self, req: ImportStateRequest, resp: Response):
        import_state_passthrough_id("id", req, resp)

    def upgrade_state(self) -> Dict[int, StateUpgrader]:
        return {0: StateUpgrader(prior_schema=LEGACY_FILTER_SCHEMA, state_upgrader=self._upgrade_from_v0)}

    def _upgrade_from_v0(self, req: UpgradeStateRequest, resp: Response):
        old, diags = req.state.get(LegacyFilterModel)
        resp.diagnostics.extend(diags)
        if resp.diagnostics.has_error():
            return

        action = _first_element(old.action, "action", resp.diagnostics)
        criteria = _first_element(old.criteria, "criteria", resp.diagnostics)
        if resp.diagnostics.has_error():
            return

        resp.diagnostics.extend(resp.state.set(FilterModel(id=old.id, action=action, criteria=criteria)))
