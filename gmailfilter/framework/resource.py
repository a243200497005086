"""Resource and data source contracts.

Every resource kind implements the same fixed capability set: metadata,
schema, configure, create, read, update, delete and import_state, with
upgrade_state for resources whose schema version has moved on. Data sources
implement metadata, schema, configure and read.

CRUD callbacks receive a request and a response object. They read typed
models from the request, call the remote service, and write the outcome to
``resp.state`` and ``resp.diagnostics``; they do not raise for remote
errors.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .diagnostics import Diagnostics
from .schema import Schema
from .state import State


@dataclass
class CreateRequest:
    plan: State
    config: Optional[State] = None


@dataclass
class ReadRequest:
    state: State


@dataclass
class UpdateRequest:
    plan: State
    state: State
    config: Optional[State] = None


@dataclass
class DeleteRequest:
    state: State


@dataclass
class ImportStateRequest:
    id: str


@dataclass
class UpgradeStateRequest:
    state: State


@dataclass
class DataSourceReadRequest:
    config: State


@dataclass
class Response:
    """Response to a lifecycle callback. Delete leaves state untouched."""
    state: Optional[State] = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)


@dataclass
class StateUpgrader:
    """Moves state stored under prior_schema directly to the current schema."""
    prior_schema: Schema
    state_upgrader: Callable[[UpgradeStateRequest, Response], None]


class Configurable(ABC):
    """Shared plumbing for resources and data sources."""

    kind = "Resource"

    def configure(self, provider_data: Any) -> Diagnostics:
        """Receive the provider's shared data. None means the provider is not configured yet."""
        diags = Diagnostics()
        if provider_data is None:
            return diags
        expected = self.provider_data_type()
        if expected is not None and not isinstance(provider_data, expected):
            diags.add_error(
                f"Unexpected {self.kind} Configure Type",
                f"Expected {expected.__name__}, got {type(provider_data).__name__}",
            )
            return diags
        self.set_provider_data(provider_data)
        return diags

    def provider_data_type(self) -> Optional[type]:
        return None

    def set_provider_data(self, provider_data: Any):
        pass

    @abstractmethod
    def metadata(self, provider_type_name: str) -> str:
        """Return the full type name, e.g. provider_type_name + '_label'."""

    @abstractmethod
    def schema(self) -> Schema:
        ...


class Resource(Configurable):

    @abstractmethod
    def create(self, req: CreateRequest, resp: Response):
        ...

    @abstractmethod
    def read(self, req: ReadRequest, resp: Response):
        ...

    @abstractmethod
    def update(self, req: UpdateRequest, resp: Response):
        ...

    @abstractmethod
    def delete(self, req: DeleteRequest, resp: Response):
        ...

    def import_state(self, req: ImportStateRequest, resp: Response):
        resp.diagnostics.add_error(
            "Resource Import Not Implemented",
            "This resource does not support import.",
        )

    def upgrade_state(self) -> Dict[int, StateUpgrader]:
        return {}


class DataSource(Configurable):

    kind = "Data Source"

    @abstractmethod
    def read(self, req: DataSourceReadRequest, resp: Response):
        ...


def import_state_passthrough_id(attribute: str, req: ImportStateRequest, resp: Response):
    """Store the import identifier verbatim; a following read fills in the rest."""
    resp.diagnostics.extend(resp.state.set_attribute(attribute, req.id))
