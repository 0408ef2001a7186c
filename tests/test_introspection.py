"""
Tests for field introspection and value rendering.
"""
from collections import namedtuple
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import NamedTuple

import pytest
from purify.introspection import (
    FieldDescriptor,
    FieldIntrospector,
    FieldSpec,
    NotARecordError,
    RecordSchema,
    render_value,
)


@dataclass
class Signup:
    username: str = field(default="", metadata={"purify": "required|min(3)", "json": "user"})
    email: str = field(default="", metadata={"purify": "required|email"})
    age: int = field(default=0, metadata={"json": "age"})
    secret: str = field(default="", metadata={"purify": "max(8)", "json": "-"})


class Coordinate(NamedTuple):
    lat: float
    lon: float


class Color(Enum):
    RED = "red"
    ONE = 1


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y


@pytest.fixture
def introspector():
    return FieldIntrospector()


class TestRenderValue:
    """Test the single value rendering used for every validator."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("text", "text"),
            ("", ""),
            (None, ""),
            (True, "true"),
            (False, "false"),
            (42, "42"),
            (-7, "-7"),
            (3.0, "3"),
            (0.1, "0.1"),
            (2.5, "2.5"),
            (1e21, "1e+21"),
            (float("nan"), "NaN"),
            (float("inf"), "+Inf"),
            (float("-inf"), "-Inf"),
            (-0.0, "-0"),
            (0.0, "0"),
            (Decimal("1.50"), "1.50"),
            (Color.RED, "red"),
            (Color.ONE, "1"),
            (b"bytes", "bytes"),
            ([1, 2], "[1, 2]"),
        ],
    )
    def test_render(self, value, expected):
        assert render_value(value) == expected

    def test_int_beyond_str_digit_limit(self):
        """Very long ints render in full instead of raising."""
        assert render_value(10 ** 5000) == "1" + "0" * 5000
        assert render_value(-(10 ** 5000) - 7) == "-1" + "0" * 4999 + "7"

    def test_int_chunk_boundaries_keep_zeros(self):
        value = 10 ** 4500 + 1
        rendered = render_value(value)
        assert len(rendered) == 4501
        assert rendered.startswith("1000")
        assert rendered.endswith("0001")


class TestDataclassRecords:
    """Test introspection of dataclass instances via field metadata."""

    def test_fields_in_declaration_order(self, introspector):
        fields = introspector.describe(Signup(username="ada", email="a@b.io"))
        assert [f.name for f in fields] == ["username", "email", "age", "secret"]

    def test_descriptor_contents(self, introspector):
        fields = introspector.describe(Signup(username="ada", email="a@b.io"))
        assert fields[0] == FieldDescriptor("username", "user", "required|min(3)", "ada")
        assert fields[1] == FieldDescriptor("email", "email", "required|email", "a@b.io")

    def test_missing_name_tag_falls_back_to_field_name(self, introspector):
        fields = introspector.describe(Signup())
        assert fields[1].display_name == "email"

    def test_omit_placeholder_falls_back_to_field_name(self, introspector):
        fields = introspector.describe(Signup())
        assert fields[3].display_name == "secret"

    def test_field_without_rules_has_empty_spec(self, introspector):
        fields = introspector.describe(Signup(age=30))
        assert fields[2].rules == ""
        assert fields[2].display_name == "age"

    def test_custom_tags(self):
        @dataclass
        class Legacy:
            name: str = field(default="", metadata={"gform": "required", "api": "full_name"})

        introspector = FieldIntrospector(rule_tag="gform", name_tag="api")
        (descriptor,) = introspector.describe(Legacy())
        assert descriptor.display_name == "full_name"
        assert descriptor.rules == "required"

    def test_dataclass_class_is_not_a_record(self, introspector):
        with pytest.raises(NotARecordError):
            introspector.describe(Signup)


class TestSchemaRecords:
    """Test introspection of mappings and objects via an explicit schema."""

    def test_mapping_values_read_by_key(self, introspector):
        schema = RecordSchema([FieldSpec("name", "required"), FieldSpec("age", "min(1)")])
        fields = introspector.describe({"name": "Ada", "age": 36}, schema)
        assert [(f.display_name, f.value) for f in fields] == [("name", "Ada"), ("age", "36")]

    def test_object_values_read_by_attribute(self, introspector):
        fields = introspector.describe(Point(1, 2.5), [FieldSpec("x", "required"), FieldSpec("y", "required")])
        assert [f.value for f in fields] == ["1", "2.5"]

    def test_missing_values_render_empty(self, introspector):
        fields = introspector.describe({}, [FieldSpec("name", "required")])
        assert fields[0].value == ""

    def test_alias_used_as_display_name(self, introspector):
        fields = introspector.describe({"user_name": "x"}, [FieldSpec("user_name", "required", alias="user")])
        assert fields[0].display_name == "user"

    def test_tuples_accepted_as_specs(self, introspector):
        schema = RecordSchema([("name", "required")])
        assert schema.fields == [FieldSpec("name", "required", None)]

    def test_schema_from_config(self):
        schema = RecordSchema.from_config(
            "signup", [{"name": "email", "rules": "email"}, {"name": "user", "alias": "u"}]
        )
        assert schema.name == "signup"
        assert list(schema) == [FieldSpec("email", "email", None), FieldSpec("user", "", "u")]
        assert len(schema) == 2

    def test_namedtuple_values_read_by_attribute(self, introspector):
        User = namedtuple("User", "name age")
        fields = introspector.describe(User("Ada", 36), [FieldSpec("name", "required"), FieldSpec("age", "max(2)")])
        assert [(f.display_name, f.value) for f in fields] == [("name", "Ada"), ("age", "36")]

    def test_typing_namedtuple_is_a_record(self, introspector):
        (descriptor,) = introspector.describe(Coordinate(1.5, 2.0), [FieldSpec("lat", "required")])
        assert descriptor.value == "1.5"

    def test_schema_overrides_dataclass_metadata(self, introspector):
        fields = introspector.describe(Signup(username="x"), [FieldSpec("username", "max(1)")])
        assert fields == [FieldDescriptor("username", "username", "max(1)", "x")]


class TestNotARecord:
    """Test values that are not record-shaped."""

    @pytest.mark.parametrize("value", [42, "text", None, 3.5, True, [1, 2], (1,), {1, 2}, b"x"])
    def test_primitives_and_sequences(self, introspector, value):
        with pytest.raises(NotARecordError):
            introspector.describe(value, [FieldSpec("x", "required")])

    def test_mapping_without_schema(self, introspector):
        with pytest.raises(NotARecordError):
            introspector.describe({"name": ""})

    def test_plain_object_without_schema(self, introspector):
        with pytest.raises(NotARecordError):
            introspector.describe(Point(1, 2))

    def test_not_a_record_is_a_type_error(self):
        assert issubclass(NotARecordError, TypeError)
