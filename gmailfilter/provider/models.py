"""Typed models for filter and label state, and their Gmail API shapes."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..framework import is_known, tfsdk


@dataclass
class FilterActionModel:
    add_label_ids: Optional[List[str]] = None
    forward: Optional[str] = None
    remove_label_ids: Optional[List[str]] = None


@dataclass
class FilterCriteriaModel:
    exclude_chats: Optional[bool] = None
    from_: Optional[str] = tfsdk("from")
    has_attachment: Optional[bool] = None
    negated_query: Optional[str] = None
    query: Optional[str] = None
    size: Optional[int] = None
    size_comparison: Optional[str] = None
    subject: Optional[str] = None
    to: Optional[str] = None


@dataclass
class FilterModel:
    id: Optional[str] = None
    action: Optional[FilterActionModel] = None
    criteria: Optional[FilterCriteriaModel] = None


@dataclass
class LegacyFilterModel:
    """Filter state as stored by schema version 0."""
    id: Optional[str] = None
    action: Optional[List[FilterActionModel]] = None
    criteria: Optional[List[FilterCriteriaModel]] = None


@dataclass
class LabelModel:
    id: Optional[str] = None
    name: Optional[str] = None
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    label_list_visibility: Optional[str] = None
    message_list_visibility: Optional[str] = None
    messages_total: Optional[int] = None
    messages_unread: Optional[int] = None
    threads_total: Optional[int] = None
    threads_unread: Optional[int] = None
    type: Optional[str] = None


# API field name for each criteria model field
_CRITERIA_API_FIELDS = {
    "exclude_chats": "excludeChats",
    "from_": "from",
    "has_attachment": "hasAttachment",
    "negated_query": "negatedQuery",
    "query": "query",
    "size": "size",
    "size_comparison": "sizeComparison",
    "subject": "subject",
    "to": "to",
}

_CRITERIA_ZERO_VALUES = {
    "exclude_chats": False,
    "has_attachment": False,
    "size": 0,
}


def action_to_api(action: FilterActionModel) -> Dict[str, Any]:
    """Label lists are always sent, empty when unset; a null or empty forward is omitted."""
    body = {
        "addLabelIds": list(action.add_label_ids or []),
        "removeLabelIds": list(action.remove_label_ids or []),
    }
    if is_known(action.forward) and action.forward:
        body["forward"] = action.forward
    return body


def criteria_to_api(criteria: FilterCriteriaModel) -> Dict[str, Any]:
    """Only non-zero criteria are sent; false, 0 and "" are omitted like null."""
    body = {}
    for field_name, api_name in _CRITERIA_API_FIELDS.items():
        value = getattr(criteria, field_name)
        if is_known(value) and value:
            body[api_name] = value
    return body


def action_from_api(action: Dict[str, Any]) -> FilterActionModel:
    """Absent label lists stay null; an absent forward reads as ''."""
    add = action.get("addLabelIds")
    remove = action.get("removeLabelIds")
    return FilterActionModel(
        add_label_ids=list(add) if add is not None else None,
        forward=action.get("forward", ""),
        remove_label_ids=list(remove) if remove is not None else None,
    )


def criteria_from_api(criteria: Dict[str, Any]) -> FilterCriteriaModel:
    values = {}
    for field_name, api_name in _CRITERIA_API_FIELDS.items():
        value = criteria.get(api_name, _CRITERIA_ZERO_VALUES.get(field_name, ""))
        values[field_name] = value
    return FilterCriteriaModel(**values)


def action_state_from_api(action: Dict[str, Any]) -> FilterActionModel:
    """Resource view of an API action: absent fields and empty lists read as null."""
    return FilterActionModel(
        add_label_ids=list(action["addLabelIds"]) if action.get("addLabelIds") else None,
        forward=action.get("forward") or None,
        remove_label_ids=list(action["removeLabelIds"]) if action.get("removeLabelIds") else None,
    )


def criteria_state_from_api(criteria: Dict[str, Any]) -> FilterCriteriaModel:
    """Resource view of API criteria: absent and zero values read as null."""
    return FilterCriteriaModel(**{
        field_name: criteria.get(api_name) or None
        for field_name, api_name in _CRITERIA_API_FIELDS.items()
    })


def label_to_api(data: LabelModel) -> Dict[str, Any]:
    """Build a label request body.

    Colour is attached only when both colours are set; a lone background or
    text colour is dropped.
    """
    label = {"name": data.name}
    if is_known(data.label_list_visibility):
        label["labelListVisibility"] = data.label_list_visibility
    if is_known(data.message_list_visibility):
        label["messageListVisibility"] = data.message_list_visibility
    if is_known(data.background_color) and is_known(data.text_color):
        label["color"] = {
            "backgroundColor": data.background_color,
            "textColor": data.text_color,
        }
    return label


def update_label_model(data: LabelModel, label: Dict[str, Any]):
    """Overwrite every remote-owned field of data from an API label."""
    data.id = label.get("id", data.id)
    data.name = label.get("name")
    data.label_list_visibility = label.get("labelListVisibility")
    data.message_list_visibility = label.get("messageListVisibility")
    data.messages_total = label.get("messagesTotal", 0)
    data.messages_unread = label.get("messagesUnread", 0)
    data.threads_total = label.get("threadsTotal", 0)
    data.threads_unread = label.get("threadsUnread", 0)
    data.type = label.get("type")

    color = label.get("color")
    if color:
        data.background_color = color.get("backgroundColor")
        data.text_color = color.get("textColor")
    else:
        data.background_color = None
        data.text_color = None


def keep_partial_colour(data: LabelModel, background_color: Optional[str], text_color: Optional[str],
                        label: Dict[str, Any]):
    """Keep a lone colour as configured when the remote label has no colour.

    A single colour is never sent, so the remote stays colourless; keeping
    the configured value lets the next plan match state.
    """
    if label.get("color"):
        return
    if is_known(background_color) != is_known(text_color):
        data.background_color = background_color
        data.text_color = text_color
