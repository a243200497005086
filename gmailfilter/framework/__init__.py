"""Provider lifecycle framework.

Declares schemas, converts plan/state values to typed models, defines the
resource, data source and provider contracts, and hosts a provider through
ProviderServer.
"""

from .diagnostics import Diagnostic, Diagnostics
from .schema import (
    UNKNOWN, is_known, Schema, Attribute, StringAttribute, BoolAttribute,
    Int64Attribute, ListAttribute, SingleNestedAttribute, ListNestedAttribute,
    SingleNestedBlock, PlanModifier, UseStateForUnknown, RequiresReplace,
)
from .state import State, Plan, Config, tfsdk
from .resource import (
    Resource, DataSource, Response, CreateRequest, ReadRequest, UpdateRequest,
    DeleteRequest, ImportStateRequest, UpgradeStateRequest, DataSourceReadRequest,
    StateUpgrader, import_state_passthrough_id,
)
from .provider import Provider, ConfigureResponse
from .server import ProviderServer, PlanResult, StateResult

__all__ = [
    "Diagnostic", "Diagnostics",
    "UNKNOWN", "is_known", "Schema", "Attribute", "StringAttribute", "BoolAttribute",
    "Int64Attribute", "ListAttribute", "SingleNestedAttribute", "ListNestedAttribute",
    "SingleNestedBlock", "PlanModifier", "UseStateForUnknown", "RequiresReplace",
    "State", "Plan", "Config", "tfsdk",
    "Resource", "DataSource", "Response", "CreateRequest", "ReadRequest", "UpdateRequest",
    "DeleteRequest", "ImportStateRequest", "UpgradeStateRequest", "DataSourceReadRequest",
    "StateUpgrader", "import_state_passthrough_id",
    "Provider", "ConfigureResponse",
    "ProviderServer", "PlanResult", "StateResult",
]
