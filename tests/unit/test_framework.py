"""
Unit tests for the provider framework: schemas, typed state conversion,
plan modifiers and diagnostics.
"""

import copy
from dataclasses import dataclass
from typing import List, Optional

from gmailfilter.framework import (
    UNKNOWN, BoolAttribute, Diagnostics, Int64Attribute, ListAttribute,
    RequiresReplace, Schema, SingleNestedAttribute, State, StringAttribute,
    UseStateForUnknown, is_known, tfsdk,
)
from gmailfilter.provider.filter_resource import criteria_attributes
from gmailfilter.provider.models import FilterCriteriaModel


@dataclass
class InnerModel:
    enabled: Optional[bool] = None


@dataclass
class SampleModel:
    name: Optional[str] = None
    count: Optional[int] = None
    tags: Optional[List[str]] = None
    inner: Optional[InnerModel] = None


SAMPLE_SCHEMA = Schema(attributes={
    "name": StringAttribute(required=True),
    "count": Int64Attribute(optional=True),
    "tags": ListAttribute(element_type=str, optional=True),
    "inner": SingleNestedAttribute(optional=True, attributes={"enabled": BoolAttribute(optional=True)}),
})


class TestStateGet:

    def test_decodes_nested_model(self):
        state = State(SAMPLE_SCHEMA, {"name": "x", "count": 3, "tags": ["a"], "inner": {"enabled": True}})

        model, diags = state.get(SampleModel)

        assert not diags
        assert model == SampleModel(name="x", count=3, tags=["a"], inner=InnerModel(enabled=True))

    def test_missing_keys_decode_as_null(self):
        model, diags = State(SAMPLE_SCHEMA, {"name": "x"}).get(SampleModel)

        assert not diags
        assert model.count is None
        assert model.inner is None

    def test_every_conversion_error_is_reported(self):
        state = State(SAMPLE_SCHEMA, {"name": 5, "count": "three", "inner": {"enabled": "yes"}})

        model, diags = state.get(SampleModel)

        assert model is None
        assert [d.attribute for d in diags.errors()] == ["name", "count", "inner.enabled"]

    def test_attribute_name_mapped_with_tfsdk(self):
        schema = Schema(attributes=criteria_attributes(optional=True))

        model, diags = State(schema, {"from": "a@example.com", "size": 10}).get(FilterCriteriaModel)

        assert not diags
        assert model.from_ == "a@example.com"
        assert model.size == 10

    def test_model_without_matching_field(self):
        @dataclass
        class Partial:
            name: Optional[str] = None

        model, diags = State(SAMPLE_SCHEMA, {"name": "x"}).get(Partial)

        assert model is None
        assert {d.summary for d in diags} == {"Value Conversion Error"}
        assert sorted(d.attribute for d in diags) == ["count", "inner", "tags"]

    def test_null_state_cannot_be_decoded(self):
        model, diags = State(SAMPLE_SCHEMA, None).get(SampleModel)

        assert model is None
        assert diags.errors()[0].summary == "Value Conversion Error"

    def test_unknown_values_pass_through(self):
        model, diags = State(SAMPLE_SCHEMA, {"name": "x", "count": UNKNOWN}).get(SampleModel)

        assert not diags
        assert model.count is UNKNOWN


class TestInt64:

    def test_range_is_enforced(self):
        attr = Int64Attribute()

        assert attr.accepts(2 ** 63 - 1)
        assert attr.accepts(-(2 ** 63))
        assert not attr.accepts(2 ** 63)
        assert not attr.accepts(-(2 ** 63) - 1)

    def test_bool_is_not_an_integer(self):
        diags = Diagnostics()

        assert not Int64Attribute().check(True, "size", diags)
        assert diags.errors()[0].attribute == "size"


class TestStateSet:

    def test_set_encodes_model_with_mapped_names(self):
        schema = Schema(attributes=criteria_attributes(optional=True))
        state = State(schema)

        diags = state.set(FilterCriteriaModel(from_="a@example.com"))

        assert not diags
        assert state.raw["from"] == "a@example.com"
        assert state.raw["query"] is None
        assert "from_" not in state.raw

    def test_invalid_model_leaves_state_untouched(self):
        state = State(SAMPLE_SCHEMA, {"name": "x"})

        diags = state.set(SampleModel(name=5))

        assert diags.has_error()
        assert state.raw["name"] == "x"

    def test_set_attribute_unknown_name(self):
        state = State(SAMPLE_SCHEMA, {"name": "x"})

        diags = state.set_attribute("nope", "y")

        assert diags.errors()[0].summary == "Invalid attribute path"
        assert "nope" not in state.raw

    def test_set_attribute_on_null_state(self):
        state = State(SAMPLE_SCHEMA, None)

        diags = state.set_attribute("name", "imported")

        assert not diags
        assert state.raw == {"name": "imported", "count": None, "tags": None, "inner": None}

    def test_remove_resource(self):
        state = State(SAMPLE_SCHEMA, {"name": "x"})

        state.remove_resource()

        assert state.is_null
        assert state.get_attribute("name") is None


class TestPlanModifiers:

    def test_use_state_for_unknown_keeps_prior(self):
        assert UseStateForUnknown().modify("abc", UNKNOWN, None) == ("abc", False)

    def test_use_state_for_unknown_without_prior(self):
        assert UseStateForUnknown().modify(None, UNKNOWN, None) == (UNKNOWN, False)

    def test_requires_replace_on_change(self):
        assert RequiresReplace().modify({"a": 1}, {"a": 2}, {"a": 2}) == ({"a": 2}, True)
        assert RequiresReplace().modify({"a": 1}, {"a": 1}, {"a": 1}) == ({"a": 1}, False)


class TestUnknown:

    def test_unknown_survives_copies(self):
        assert copy.deepcopy({"id": UNKNOWN})["id"] is UNKNOWN
        assert copy.copy(UNKNOWN) is UNKNOWN

    def test_is_known(self):
        assert is_known("")
        assert is_known(False)
        assert not is_known(None)
        assert not is_known(UNKNOWN)


class TestDiagnostics:

    def test_errors_and_warnings_are_separated(self):
        diags = Diagnostics()
        diags.add_warning("Heads up")
        assert not diags.has_error()

        diags.add_error("Broken", "detail", "name")

        assert diags.has_error()
        assert [d.summary for d in diags.warnings()] == ["Heads up"]
        assert [d.summary for d in diags.errors()] == ["Broken"]

    def test_str_includes_attribute_and_detail(self):
        diags = Diagnostics()
        diags.add_error("Broken", "it fell over", "criteria.size")

        assert str(diags[0]) == "Error: Broken [criteria.size]\n  it fell over"
