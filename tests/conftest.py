"""
Test configuration and fixtures for gmailfilter tests.

This module provides:
- FakeGmailService: an in-memory stand-in for the Gmail API discovery client
- http_error(): builds real googleapiclient HttpError instances
- A configured ProviderServer wired to the fake service
"""

import copy
import json
from typing import Any, Dict, List, Optional, Tuple

import httplib2
import pytest
from googleapiclient.errors import HttpError

from gmailfilter.framework import ProviderServer
from gmailfilter.provider import ProviderConfig, new


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: tests that call the live Gmail API")


def http_error(status: int, message: str) -> HttpError:
    """Build an HttpError shaped like a real Gmail API error response."""
    resp = httplib2.Response({"status": status})
    content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(resp, content)


class FakeRequest:
    """Deferred API call, executed like googleapiclient's HttpRequest."""

    def __init__(self, service: "FakeGmailService", name: str, kwargs: dict, fn):
        self._service = service
        self._name = name
        self._kwargs = kwargs
        self._fn = fn

    def execute(self):
        self._service.calls.append((self._name, copy.deepcopy(self._kwargs)))
        if self._service.errors:
            raise self._service.errors.pop(0)
        return self._fn()


class _Filters:
    def __init__(self, service):
        self._s = service

    def create(self, userId, body):
        def run():
            filter_id = self._s.next_id("filter")
            self._s.filters[filter_id] = dict(copy.deepcopy(body), id=filter_id)
            return copy.deepcopy(self._s.filters[filter_id])
        return FakeRequest(self._s, "filters.create", {"userId": userId, "body": body}, run)

    def get(self, userId, id):
        return FakeRequest(self._s, "filters.get", {"userId": userId, "id": id},
                           lambda: copy.deepcopy(self._s.lookup(self._s.filters, id)))

    def delete(self, userId, id):
        def run():
            self._s.lookup(self._s.filters, id)
            del self._s.filters[id]
            return ""
        return FakeRequest(self._s, "filters.delete", {"userId": userId, "id": id}, run)


class _Settings:
    def __init__(self, service):
        self._s = service

    def filters(self):
        return _Filters(self._s)


class _Labels:
    def __init__(self, service):
        self._s = service

    def _apply_body(self, label: dict, body: dict):
        label["name"] = body["name"]
        label["labelListVisibility"] = body.get("labelListVisibility", label.get("labelListVisibility", "labelShow"))
        label["messageListVisibility"] = body.get("messageListVisibility", label.get("messageListVisibility", "show"))
        if "color" in body:
            label["color"] = copy.deepcopy(body["color"])
        else:
            label.pop("color", None)

    def create(self, userId, body):
        def run():
            label_id = self._s.next_id("Label")
            label = {
                "id": label_id,
                "type": "user",
                "messagesTotal": 0,
                "messagesUnread": 0,
                "threadsTotal": 0,
                "threadsUnread": 0,
            }
            self._apply_body(label, body)
            self._s.labels[label_id] = label
            return copy.deepcopy(label)
        return FakeRequest(self._s, "labels.create", {"userId": userId, "body": body}, run)

    def get(self, userId, id):
        return FakeRequest(self._s, "labels.get", {"userId": userId, "id": id},
                           lambda: copy.deepcopy(self._s.lookup(self._s.labels, id)))

    def update(self, userId, id, body):
        def run():
            label = self._s.lookup(self._s.labels, id)
            self._apply_body(label, body)
            return copy.deepcopy(label)
        return FakeRequest(self._s, "labels.update", {"userId": userId, "id": id, "body": body}, run)

    def delete(self, userId, id):
        def run():
            self._s.lookup(self._s.labels, id)
            del self._s.labels[id]
            return ""
        return FakeRequest(self._s, "labels.delete", {"userId": userId, "id": id}, run)

    def list(self, userId):
        def run():
            # labels.list omits message and thread counts
            counters = ("messagesTotal", "messagesUnread", "threadsTotal", "threadsUnread")
            return {"labels": [
                {k: v for k, v in copy.deepcopy(label).items() if k not in counters}
                for label in self._s.labels.values()
            ]}
        return FakeRequest(self._s, "labels.list", {"userId": userId}, run)


class _Users:
    def __init__(self, service):
        self._s = service

    def settings(self):
        return _Settings(self._s)

    def labels(self):
        return _Labels(self._s)


class FakeGmailService:
    """In-memory Gmail mailbox supporting the filter and label endpoints.

    Every executed call is recorded in `calls` as (name, kwargs). Errors
    queued with fail_next() are raised by the next executed calls in order.
    """

    def __init__(self):
        self.filters: Dict[str, dict] = {}
        self.labels: Dict[str, dict] = {}
        self.calls: List[Tuple[str, dict]] = []
        self.errors: List[Exception] = []
        self._counter = 0

    def next_id(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}_{self._counter}"

    def lookup(self, table: Dict[str, dict], item_id: str) -> dict:
        if item_id not in table:
            raise http_error(404, "Not Found")
        return table[item_id]

    def fail_next(self, error: Exception):
        self.errors.append(error)

    def last_call(self, name: str) -> Optional[dict]:
        for call_name, kwargs in reversed(self.calls):
            if call_name == name:
                return kwargs
        return None

    def users(self):
        return _Users(self)


@pytest.fixture
def fake_gmail() -> FakeGmailService:
    return FakeGmailService()


@pytest.fixture
def server(fake_gmail) -> ProviderServer:
    """A ProviderServer configured against the fake Gmail service."""
    srv = ProviderServer(new("test", config_loader=lambda: ProviderConfig(gmail_service=fake_gmail)))
    diags = srv.configure_provider()
    assert not diags.has_error(), diags
    return srv
