"""Schema declarations: attributes, nested blocks, and plan modifiers.

A Schema describes the shape of a resource, data source, or provider. Raw
values are plain Python: None for null, str/bool/int for primitives, lists
and dicts for collections and nested objects, and the UNKNOWN sentinel for
values that are not known until apply.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .diagnostics import Diagnostics

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class _Unknown:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNKNOWN"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


UNKNOWN = _Unknown()


def is_known(value: Any) -> bool:
    """True when value is neither null nor unknown."""
    return value is not None and value is not UNKNOWN


# =============================================================================
# Plan modifiers
# =============================================================================

class PlanModifier:
    """Adjusts a planned value when the resource already exists in state."""

    description = ""

    def modify(self, prior_value: Any, planned_value: Any, config_value: Any) -> Tuple[Any, bool]:
        """Return (planned value, requires_replace)."""
        raise NotImplementedError


class UseStateForUnknown(PlanModifier):
    description = "Once set, the value of this attribute in state will not change."

    def modify(self, prior_value, planned_value, config_value):
        if planned_value is UNKNOWN and prior_value is not None:
            return prior_value, False
        return planned_value, False


class RequiresReplace(PlanModifier):
    description = "If the value of this attribute changes, the resource will be replaced."

    def modify(self, prior_value, planned_value, config_value):
        return planned_value, planned_value != prior_value


# =============================================================================
# Attributes
# =============================================================================

@dataclass
class Attribute:
    description: str = ""
    required: bool = False
    optional: bool = False
    computed: bool = False
    plan_modifiers: List[PlanModifier] = field(default_factory=list)

    type_name = "dynamic"

    def accepts(self, value: Any) -> bool:
        return True

    def check(self, value: Any, path: str, diags: Diagnostics) -> bool:
        """Shallow type check; nested contents are checked by the caller."""
        if value is None or value is UNKNOWN or self.accepts(value):
            return True
        diags.add_error(
            "Incorrect attribute value type",
            f"Expected {self.type_name}, got {type(value).__name__}: {value!r}",
            path,
        )
        return False

    def to_dict(self) -> Dict[str, Any]:
        out = {"type": self.type_name}
        for flag in ("required", "optional", "computed"):
            if getattr(self, flag):
                out[flag] = True
        if self.description:
            out["description"] = self.description
        if self.plan_modifiers:
            out["plan_modifiers"] = [type(m).__name__ for m in self.plan_modifiers]
        return out


@dataclass
class StringAttribute(Attribute):
    type_name = "string"

    def accepts(self, value):
        return isinstance(value, str)


@dataclass
class BoolAttribute(Attribute):
    type_name = "bool"

    def accepts(self, value):
        return isinstance(value, bool)


@dataclass
class Int64Attribute(Attribute):
    type_name = "int64"

    def accepts(self, value):
        return isinstance(value, int) and not isinstance(value, bool) and INT64_MIN <= value <= INT64_MAX


@dataclass
class ListAttribute(Attribute):
    element_type: type = str

    @property
    def type_name(self):
        return f"list({self.element_type.__name__})"

    def accepts(self, value):
        return isinstance(value, list) and all(isinstance(v, self.element_type) for v in value)


@dataclass
class SingleNestedAttribute(Attribute):
    attributes: Dict[str, Attribute] = field(default_factory=dict)

    type_name = "object"

    def accepts(self, value):
        return isinstance(value, dict)

    def to_dict(self):
        out = super().to_dict()
        out["attributes"] = {k: v.to_dict() for k, v in self.attributes.items()}
        return out


@dataclass
class ListNestedAttribute(Attribute):
    attributes: Dict[str, Attribute] = field(default_factory=dict)

    type_name = "list(object)"

    def accepts(self, value):
        return isinstance(value, list) and all(isinstance(v, dict) for v in value)

    def to_dict(self):
        out = super().to_dict()
        out["attributes"] = {k: v.to_dict() for k, v in self.attributes.items()}
        return out


@dataclass
class SingleNestedBlock(SingleNestedAttribute):
    """A nested configuration block. Blocks are always optional in config."""

    type_name = "block"


# =============================================================================
# Schema
# =============================================================================

@dataclass
class Schema:
    attributes: Dict[str, Attribute] = field(default_factory=dict)
    blocks: Dict[str, Attribute] = field(default_factory=dict)
    description: str = ""
    version: int = 0

    @property
    def fields(self) -> Dict[str, Attribute]:
        """Attributes and blocks together, keyed by name."""
        merged = dict(self.attributes)
        merged.update(self.blocks)
        return merged

    def null_value(self) -> Dict[str, Any]:
        return {name: None for name in self.fields}

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "version": self.version,
            "attributes": {k: v.to_dict() for k, v in self.attributes.items()},
        }
        if self.blocks:
            out["blocks"] = {k: v.to_dict() for k, v in self.blocks.items()}
        if self.description:
            out["description"] = self.description
        return out


def nested_fields(attr: Attribute) -> Optional[Dict[str, Attribute]]:
    """Return the child attributes of a nested attribute or block, else None."""
    if isinstance(attr, (SingleNestedAttribute, ListNestedAttribute)):
        return attr.attributes
    return None
