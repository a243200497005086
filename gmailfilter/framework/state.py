"""Plan, state and config values, and their conversion to typed models.

Models are dataclasses whose fields line up with schema attribute names.
A field whose attribute name is not a valid Python identifier declares it
with ``tfsdk("name")``:

    @dataclass
    class CriteriaModel:
        from_: Optional[str] = tfsdk("from")
"""

import copy
import dataclasses
import typing
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

from .diagnostics import Diagnostics
from .schema import (
    UNKNOWN, Attribute, ListNestedAttribute, Schema, nested_fields,
)

T = TypeVar("T")


def tfsdk(name: str, default: Any = None):
    """Declare a model field bound to the schema attribute `name`."""
    return dataclasses.field(default=default, metadata={"tfsdk": name})


def _attribute_name(f: dataclasses.Field) -> str:
    return f.metadata.get("tfsdk", f.name)


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _nested_model(tp: Any) -> Optional[type]:
    """Find the dataclass inside a field annotation such as Optional[List[X]]."""
    if dataclasses.is_dataclass(tp):
        return tp
    for arg in typing.get_args(tp):
        found = _nested_model(arg)
        if found is not None:
            return found
    return None


def normalize(fields: Dict[str, Attribute], raw: Optional[dict]) -> Optional[dict]:
    """Return a copy of raw with every schema key present (null when missing)."""
    if raw is None:
        return None
    out = {}
    for name, attr in fields.items():
        value = raw.get(name)
        children = nested_fields(attr)
        if children is not None and isinstance(value, dict):
            value = normalize(children, value)
        elif children is not None and isinstance(value, list):
            value = [normalize(children, v) if isinstance(v, dict) else v for v in value]
        else:
            value = copy.deepcopy(value)
        out[name] = value
    for name, value in raw.items():
        if name not in fields:
            out[name] = value
    return out


def validate_raw(fields: Dict[str, Attribute], raw: dict, path: str, diags: Diagnostics):
    """Recursively type-check a raw object against schema fields."""
    for name in raw:
        if name not in fields:
            diags.add_error("Unsupported attribute", f"An attribute named {name!r} is not expected here", _join(path, name))
    for name, attr in fields.items():
        value = raw.get(name)
        p = _join(path, name)
        if not attr.check(value, p, diags):
            continue
        children = nested_fields(attr)
        if children is None:
            continue
        if isinstance(value, dict):
            validate_raw(children, value, p, diags)
        elif isinstance(value, list):
            for i, item in enumerate(value):
                validate_raw(children, item, f"{p}[{i}]", diags)


def decode(fields: Dict[str, Attribute], raw: dict, model_cls: Type[T], path: str, diags: Diagnostics) -> T:
    """Build model_cls from raw, recording every conversion problem in diags."""
    hints = typing.get_type_hints(model_cls)
    model_fields = {_attribute_name(f): f for f in dataclasses.fields(model_cls)}
    kwargs = {}
    for name in raw:
        if name not in fields:
            diags.add_error("Unsupported attribute", f"An attribute named {name!r} is not expected here", _join(path, name))
    for name, attr in fields.items():
        p = _join(path, name)
        f = model_fields.get(name)
        if f is None:
            diags.add_error(
                "Value Conversion Error",
                f"{model_cls.__name__} has no field for attribute {name!r}",
                p,
            )
            continue
        value = raw.get(name)
        if not attr.check(value, p, diags):
            continue
        children = nested_fields(attr)
        nested_cls = _nested_model(hints[f.name]) if children is not None else None
        if nested_cls is not None and value is not None and value is not UNKNOWN:
            if isinstance(attr, ListNestedAttribute):
                value = [decode(children, item, nested_cls, f"{p}[{i}]", diags) for i, item in enumerate(value)]
            else:
                value = decode(children, value, nested_cls, p, diags)
        else:
            value = copy.deepcopy(value)
        kwargs[f.name] = value
    return model_cls(**kwargs)


def encode(value: Any) -> Any:
    """Convert a model (or nested models, lists, dicts) to raw values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {_attribute_name(f): encode(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, list):
        return [encode(v) for v in value]
    if isinstance(value, dict):
        return {k: encode(v) for k, v in value.items()}
    return value


class State:
    """A raw object value bound to a schema.

    Used for prior state, planned state, and configuration alike. A value of
    None means the object is absent (for state, the resource is gone).
    """

    def __init__(self, schema: Schema, raw: Optional[dict] = None):
        self.schema = schema
        self.raw = normalize(schema.fields, raw)

    @property
    def is_null(self) -> bool:
        return self.raw is None

    def get(self, model_cls: Type[T]) -> Tuple[Optional[T], Diagnostics]:
        """Decode into model_cls. Returns (model or None, diagnostics)."""
        diags = Diagnostics()
        if self.raw is None:
            diags.add_error("Value Conversion Error", "Received a null object where a value was expected")
            return None, diags
        model = decode(self.schema.fields, self.raw, model_cls, "", diags)
        if diags.has_error():
            return None, diags
        return model, diags

    def set(self, model: Any) -> Diagnostics:
        """Encode a model (or raw dict) into this state, validating it."""
        diags = Diagnostics()
        raw = normalize(self.schema.fields, encode(model))
        validate_raw(self.schema.fields, raw, "", diags)
        if not diags.has_error():
            self.raw = raw
        return diags

    def get_attribute(self, name: str) -> Any:
        return None if self.raw is None else self.raw.get(name)

    def set_attribute(self, name: str, value: Any) -> Diagnostics:
        diags = Diagnostics()
        if name not in self.schema.fields:
            diags.add_error("Invalid attribute path", f"No attribute named {name!r} in schema", name)
            return diags
        if self.raw is None:
            self.raw = self.schema.null_value()
        if self.schema.fields[name].check(value, name, diags):
            self.raw[name] = value
        return diags

    def remove_resource(self):
        """Mark the resource as no longer existing remotely."""
        self.raw = None


# Plan and Config share State's behaviour; separate names keep call sites readable.
Plan = State
Config = State
