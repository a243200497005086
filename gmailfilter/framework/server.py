"""In-process host that drives a Provider through its lifecycle.

ProviderServer plays the part of the orchestrating host: it keeps a lookup
table of resource and data source kinds keyed by type name, configures the
provider once, and turns plan/apply/read/import/upgrade requests into calls
on fresh resource instances. All values are raw dicts so callers can load
and store them as JSON.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..exceptions import ProviderNotConfiguredError, UnknownTypeError
from .diagnostics import Diagnostics
from .provider import ConfigureResponse, Provider
from .resource import (
    CreateRequest, DataSource, DataSourceReadRequest, DeleteRequest,
    ImportStateRequest, ReadRequest, Resource, Response, UpdateRequest,
    UpgradeStateRequest,
)
from .schema import UNKNOWN, Schema, nested_fields
from .state import State, validate_raw

logger = logging.getLogger(__name__)

CREATE = "create"
UPDATE = "update"
REPLACE = "replace"
DELETE = "delete"
NOOP = "no-op"


@dataclass
class PlanResult:
    action: str
    prior_state: Optional[dict] = None
    planned_state: Optional[dict] = None
    requires_replace: List[str] = field(default_factory=list)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)


@dataclass
class StateResult:
    state: Optional[dict] = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    schema_version: int = 0


def _contains_unknown(value: Any) -> bool:
    if value is UNKNOWN:
        return True
    if isinstance(value, dict):
        return any(_contains_unknown(v) for v in value.values())
    if isinstance(value, list):
        return any(_contains_unknown(v) for v in value)
    return False


def _check_config(fields, raw: dict, path: str, diags: Diagnostics):
    """Required attributes must be set; computed-only attributes must not be."""
    for name, attr in fields.items():
        p = f"{path}.{name}" if path else name
        value = raw.get(name)
        if attr.required and value is None:
            diags.add_error("Missing required argument", f"The argument {name!r} is required, but no definition was found.", p)
        if attr.computed and not attr.optional and not attr.required and value is not None:
            diags.add_error("Invalid configuration", f"{name!r} is computed and cannot be set in configuration.", p)
        children = nested_fields(attr)
        if children is not None and isinstance(value, dict):
            _check_config(children, value, p, diags)
        elif children is not None and isinstance(value, list):
            for i, item in enumerate(value):
                if isinstance(item, dict):
                    _check_config(children, item, f"{p}[{i}]", diags)


class ProviderServer:

    def __init__(self, provider_factory: Callable[[], Provider]):
        self.provider = provider_factory()
        self.type_name, self.version = self.provider.metadata()
        self._resources: Dict[str, Callable[[], Resource]] = {}
        self._data_sources: Dict[str, Callable[[], DataSource]] = {}
        for factory in self.provider.resources():
            self._resources[factory().metadata(self.type_name)] = factory
        for factory in self.provider.data_sources():
            self._data_sources[factory().metadata(self.type_name)] = factory
        self._configure_response: Optional[ConfigureResponse] = None

    # -------------------------------------------------------------------------
    # Schema and configuration
    # -------------------------------------------------------------------------

    @property
    def resource_types(self) -> List[str]:
        return sorted(self._resources)

    @property
    def data_source_types(self) -> List[str]:
        return sorted(self._data_sources)

    def get_provider_schema(self) -> Dict[str, Any]:
        return {
            "provider": self.provider.schema().to_dict(),
            "resource_schemas": {n: f().schema().to_dict() for n, f in sorted(self._resources.items())},
            "data_source_schemas": {n: f().schema().to_dict() for n, f in sorted(self._data_sources.items())},
        }

    def resource_schema(self, type_name: str) -> Schema:
        return self._resource_factory(type_name)().schema()

    def data_source_schema(self, type_name: str) -> Schema:
        return self._data_source_factory(type_name)().schema()

    def configure_provider(self, config: Optional[dict] = None) -> Diagnostics:
        schema = self.provider.schema()
        config_state = State(schema, config if config is not None else schema.null_value())
        resp = ConfigureResponse()
        validate_raw(schema.fields, config_state.raw, "", resp.diagnostics)
        if not resp.diagnostics.has_error():
            self.provider.configure(config_state, resp)
        if resp.diagnostics.has_error():
            logger.error(f"Provider {self.type_name} failed to configure")
            self._configure_response = None
        else:
            self._configure_response = resp
        return resp.diagnostics

    @property
    def configured(self) -> bool:
        return self._configure_response is not None

    # -------------------------------------------------------------------------
    # Instance lookup
    # -------------------------------------------------------------------------

    def _resource_factory(self, type_name: str) -> Callable[[], Resource]:
        if type_name not in self._resources:
            raise UnknownTypeError(f"Unknown resource type: {type_name}")
        return self._resources[type_name]

    def _data_source_factory(self, type_name: str) -> Callable[[], DataSource]:
        if type_name not in self._data_sources:
            raise UnknownTypeError(f"Unknown data source type: {type_name}")
        return self._data_sources[type_name]

    def _require_configured(self) -> ConfigureResponse:
        if self._configure_response is None:
            raise ProviderNotConfiguredError(
                f"Provider {self.type_name} is not configured; call configure_provider first"
            )
        return self._configure_response

    def _new_resource(self, type_name: str, diags: Diagnostics) -> Resource:
        resource = self._resource_factory(type_name)()
        diags.extend(resource.configure(self._require_configured().resource_data))
        return resource

    def _new_data_source(self, type_name: str, diags: Diagnostics) -> DataSource:
        data_source = self._data_source_factory(type_name)()
        diags.extend(data_source.configure(self._require_configured().data_source_data))
        return data_source

    # -------------------------------------------------------------------------
    # Resource lifecycle
    # -------------------------------------------------------------------------

    def plan_resource_change(self, type_name: str, prior_state: Optional[dict], config: Optional[dict]) -> PlanResult:
        """Work out the planned state and whether it is a create, update, replace or delete."""
        schema = self.resource_schema(type_name)
        prior = State(schema, prior_state).raw
        if config is None:
            return PlanResult(DELETE if prior is not None else NOOP, prior, None)

        result = PlanResult(CREATE, prior)
        planned = State(schema, config).raw
        validate_raw(schema.fields, planned, "", result.diagnostics)
        _check_config(schema.fields, planned, "", result.diagnostics)
        if result.diagnostics.has_error():
            return result

        computed_unset = [n for n, a in schema.fields.items() if a.computed and config.get(n) is None]
        for name in computed_unset:
            planned[name] = prior[name] if prior is not None else UNKNOWN

        if prior is not None:
            if planned != prior:
                for name in computed_unset:
                    planned[name] = UNKNOWN
            for name, attr in schema.fields.items():
                for modifier in attr.plan_modifiers:
                    planned[name], replace = modifier.modify(prior[name], planned[name], config.get(name))
                    if replace and name not in result.requires_replace:
                        result.requires_replace.append(name)
            if result.requires_replace:
                result.action = REPLACE
            elif planned == prior:
                result.action = NOOP
            else:
                result.action = UPDATE

        result.planned_state = planned
        return result

    def apply_resource_change(self, type_name: str, plan: PlanResult, config: Optional[dict] = None) -> StateResult:
        """Carry out a PlanResult and return the new state."""
        schema = self.resource_schema(type_name)
        result = StateResult(schema_version=schema.version)
        result.diagnostics.extend(plan.diagnostics)
        if plan.diagnostics.has_error():
            result.state = plan.prior_state
            return result

        if plan.action == NOOP:
            result.state = plan.prior_state
            return result

        resource = self._new_resource(type_name, result.diagnostics)
        if result.diagnostics.has_error():
            result.state = plan.prior_state
            return result
        config_state = State(schema, config) if config is not None else None

        if plan.action in (DELETE, REPLACE):
            logger.info(f"Destroying {type_name} {plan.prior_state.get('id')}")
            resp = Response()
            resource.delete(DeleteRequest(State(schema, plan.prior_state)), resp)
            result.diagnostics.extend(resp.diagnostics)
            if resp.diagnostics.has_error():
                result.state = plan.prior_state
                return result
            if plan.action == DELETE:
                return result

        if plan.action == UPDATE:
            logger.info(f"Updating {type_name} {plan.prior_state.get('id')}")
            resp = Response(state=State(schema, plan.planned_state))
            resource.update(UpdateRequest(State(schema, plan.planned_state), State(schema, plan.prior_state), config_state), resp)
            failed_state = plan.prior_state
        else:
            logger.info(f"Creating {type_name}")
            planned = copy.deepcopy(plan.planned_state)
            if plan.action == REPLACE:
                # The old object is gone, so nothing can be carried over from it.
                for name, attr in schema.fields.items():
                    if attr.computed and (config is None or config.get(name) is None):
                        planned[name] = UNKNOWN
            resp = Response(state=State(schema, planned))
            resource.create(CreateRequest(State(schema, planned), config_state), resp)
            failed_state = None

        result.diagnostics.extend(resp.diagnostics)
        if resp.diagnostics.has_error():
            result.state = failed_state
            return result
        if _contains_unknown(resp.state.raw):
            result.diagnostics.add_error(
                "Provider returned invalid result object after apply",
                f"{type_name} left unknown values in its new state",
            )
            result.state = failed_state
            return result
        result.state = resp.state.raw
        return result

    def read_resource(self, type_name: str, state: dict) -> StateResult:
        """Refresh state from the remote object. A None state means it is gone."""
        schema = self.resource_schema(type_name)
        result = StateResult(schema_version=schema.version)
        resource = self._new_resource(type_name, result.diagnostics)
        if result.diagnostics.has_error():
            result.state = state
            return result
        resp = Response(state=State(schema, state))
        resource.read(ReadRequest(State(schema, state)), resp)
        result.diagnostics.extend(resp.diagnostics)
        if resp.diagnostics.has_error():
            result.state = state
            return result
        if resp.state.is_null:
            logger.info(f"{type_name} {state.get('id')} no longer exists; removing from state")
        result.state = resp.state.raw
        return result

    def import_resource_state(self, type_name: str, import_id: str) -> StateResult:
        """Import an existing remote object by id, then read it."""
        schema = self.resource_schema(type_name)
        result = StateResult(schema_version=schema.version)
        resource = self._new_resource(type_name, result.diagnostics)
        if result.diagnostics.has_error():
            return result
        resp = Response(state=State(schema, schema.null_value()))
        resource.import_state(ImportStateRequest(import_id), resp)
        result.diagnostics.extend(resp.diagnostics)
        if resp.diagnostics.has_error():
            return result

        read = self.read_resource(type_name, resp.state.raw)
        result.diagnostics.extend(read.diagnostics)
        if not read.diagnostics.has_error() and read.state is None:
            result.diagnostics.add_error(
                "Cannot import non-existent remote object",
                f"While attempting to import an existing object to {type_name}, "
                f"the provider detected that no object exists with the given id {import_id!r}.",
            )
            return result
        result.state = read.state
        return result

    def upgrade_resource_state(self, type_name: str, raw_state: dict, version: int) -> StateResult:
        """Move stored state from `version` to the current schema version."""
        resource = self._resource_factory(type_name)()
        schema = resource.schema()
        result = StateResult(schema_version=schema.version)

        if version == schema.version:
            state = State(schema, raw_state)
            if not state.is_null:
                validate_raw(schema.fields, state.raw, "", result.diagnostics)
            result.state = state.raw
            return result
        if version > schema.version:
            result.diagnostics.add_error(
                "Unable to Upgrade Resource State",
                f"State version {version} is newer than the {type_name} schema version {schema.version}.",
            )
            return result

        upgrader = resource.upgrade_state().get(version)
        if upgrader is None:
            result.diagnostics.add_error(
                "Unable to Upgrade Resource State",
                f"{type_name} has no state upgrader for version {version}.",
            )
            return result

        logger.info(f"Upgrading {type_name} state from version {version} to {schema.version}")
        resp = Response(state=State(schema, schema.null_value()))
        upgrader.state_upgrader(UpgradeStateRequest(State(upgrader.prior_schema, raw_state)), resp)
        result.diagnostics.extend(resp.diagnostics)
        if not resp.diagnostics.has_error():
            result.state = resp.state.raw
        return result

    # -------------------------------------------------------------------------
    # Data sources
    # -------------------------------------------------------------------------

    def read_data_source(self, type_name: str, config: dict) -> StateResult:
        schema = self.data_source_schema(type_name)
        result = StateResult(schema_version=schema.version)
        config_state = State(schema, config)
        validate_raw(schema.fields, config_state.raw, "", result.diagnostics)
        _check_config(schema.fields, config_state.raw, "", result.diagnostics)
        if result.diagnostics.has_error():
            return result
        data_source = self._new_data_source(type_name, result.diagnostics)
        if result.diagnostics.has_error():
            return result
        resp = Response(state=State(schema, config))
        data_source.read(DataSourceReadRequest(config_state), resp)
        result.diagnostics.extend(resp.diagnostics)
        if not resp.diagnostics.has_error():
            result.state = resp.state.raw
        return result
