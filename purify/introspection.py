"""
Field Introspection - Records to Field Descriptors

The engine never inspects records directly. It asks a FieldIntrospector for an
ordered list of FieldDescriptor(name, display_name, rules, value) and works
from that alone.

## Supported Record Shapes

1. **Dataclass instances** carry their rules in field metadata:

   ```python
   @dataclass
   class Signup:
       username: str = field(default="", metadata={"purify": "required|min(3)", "json": "user"})
       email: str = field(default="", metadata={"purify": "required|email"})
   ```

2. **Any mapping or object** paired with an explicit RecordSchema:

   ```python
   schema = RecordSchema([FieldSpec("email", "required|email")])
   introspector.describe({"email": "a@b.io"}, schema)
   ```

   Mapping values are read by key, other objects (namedtuples included) by
   attribute. Missing values
   render as "".

Anything else (primitives, sequences, classes, schema-less plain objects)
raises NotARecordError.

## Display Names

The serialization name (metadata name tag, or FieldSpec.alias) is used when it
is present, non-empty and not the omit placeholder ("-"); otherwise the declared
field name. These names become the keys of the validation report.
"""

import dataclasses
import math
from collections.abc import Mapping, Set
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, List, NamedTuple, Optional, Union

DEFAULT_RULE_TAG = "purify"
DEFAULT_NAME_TAG = "json"
DEFAULT_OMIT_PLACEHOLDER = "-"

_SCALAR_TYPES = (str, bytes, bytearray, int, float, complex, bool, Decimal, type(None))


class NotARecordError(TypeError):
    """Raised when a value cannot be treated as a record."""


class FieldDescriptor(NamedTuple):
    """One field as seen by the engine."""

    name: str
    display_name: str
    rules: str
    value: str


class FieldSpec(NamedTuple):
    """Explicit description of one field for schema-driven records."""

    name: str
    rules: str = ""
    alias: Optional[str] = None


class RecordSchema:
    """Ordered collection of FieldSpec entries describing a record."""

    def __init__(self, fields: Iterable[FieldSpec], name: Optional[str] = None):
        self.name = name
        self.fields: List[FieldSpec] = [
            f if isinstance(f, FieldSpec) else FieldSpec(*f) for f in fields
        ]

    @classmethod
    def from_config(cls, name: str, entries: List[dict]) -> "RecordSchema":
        """
        Build a schema from configuration entries.

        Args:
            name: Schema name
            entries: List of dicts with "name", optional "rules" and "alias"
        """
        return cls(
            [FieldSpec(e["name"], e.get("rules", ""), e.get("alias")) for e in entries],
            name=name,
        )

    def __iter__(self):
        return iter(self.fields)

    def __len__(self):
        return len(self.fields)

    def __repr__(self):
        return f"RecordSchema(name={self.name!r}, fields={self.fields!r})"


SchemaLike = Union[RecordSchema, Iterable[FieldSpec]]


def render_value(value: Any) -> str:
    """
    Render a field value as the string every validator receives.

    Rendering is the same for all validators:
    str as-is, None -> "", bool -> "true"/"false", int -> decimal,
    float -> shortest form without a trailing ".0", Enum -> its value,
    bytes -> UTF-8 text, anything else -> str().
    """
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return render_value(value.value)
    if isinstance(value, int):
        return _render_int(int(value))
    if isinstance(value, float):
        return _render_float(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


# Digits per chunk when an int is too long for a single str() call.
_INT_CHUNK_DIGITS = 1000
_INT_CHUNK = 10 ** _INT_CHUNK_DIGITS


def _render_int(value: int) -> str:
    try:
        return str(value)
    except ValueError:
        # over sys.get_int_max_str_digits()
        pass
    sign = "-" if value < 0 else ""
    value = abs(value)
    chunks = []
    while value >= _INT_CHUNK:
        value, low = divmod(value, _INT_CHUNK)
        chunks.append(str(low).zfill(_INT_CHUNK_DIGITS))
    return sign + str(value) + "".join(reversed(chunks))


def _render_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0 and math.copysign(1.0, value) < 0:
        return "-0"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def _is_record_shaped(value: Any) -> bool:
    if isinstance(value, Mapping):
        return True
    if isinstance(value, type) or isinstance(value, _SCALAR_TYPES):
        return False
    if isinstance(value, tuple) and hasattr(type(value), "_fields"):
        return True
    if isinstance(value, (list, tuple, Set, range)):
        return False
    return hasattr(value, "__dict__") or hasattr(type(value), "__slots__")


class FieldIntrospector:
    """
    Produces field descriptors for records.

    Args:
        rule_tag: Dataclass metadata key holding the rule specification
        name_tag: Dataclass metadata key holding the display name
        omit_placeholder: Name-tag value that means "use the field name"
    """

    def __init__(
        self,
        rule_tag: str = DEFAULT_RULE_TAG,
        name_tag: str = DEFAULT_NAME_TAG,
        omit_placeholder: str = DEFAULT_OMIT_PLACEHOLDER,
    ):
        self.rule_tag = rule_tag
        self.name_tag = name_tag
        self.omit_placeholder = omit_placeholder

    def describe(self, record: Any, schema: Optional[SchemaLike] = None) -> List[FieldDescriptor]:
        """
        List a record's fields in declaration order.

        Args:
            record: Dataclass instance, or mapping/object when schema is given
            schema: Explicit field schema; takes precedence over dataclass metadata

        Returns:
            List of FieldDescriptor

        Raises:
            NotARecordError: If record is not record-shaped
        """
        if schema is not None:
            if not _is_record_shaped(record):
                raise NotARecordError(f"expected a record, got {type(record).__name__}")
            return self._describe_with_schema(record, schema)

        if dataclasses.is_dataclass(record) and not isinstance(record, type):
            return self._describe_dataclass(record)

        raise NotARecordError(
            f"expected a dataclass instance or a schema, got {type(record).__name__}"
        )

    def display_name(self, field_name: str, serialized_name: Optional[str]) -> str:
        """Pick the report key for a field."""
        if serialized_name and serialized_name != self.omit_placeholder:
            return serialized_name
        return field_name

    def _describe_dataclass(self, record: Any) -> List[FieldDescriptor]:
        descriptors = []
        for f in dataclasses.fields(record):
            rules = f.metadata.get(self.rule_tag, "") or ""
            descriptors.append(
                FieldDescriptor(
                    name=f.name,
                    display_name=self.display_name(f.name, f.metadata.get(self.name_tag)),
                    rules=rules,
                    value=render_value(getattr(record, f.name)),
                )
            )
        return descriptors

    def _describe_with_schema(self, record: Any, schema: SchemaLike) -> List[FieldDescriptor]:
        if isinstance(record, Mapping):
            read = record.get
        else:
            def read(name):
                return getattr(record, name, None)

        descriptors = []
        for spec in schema:
            descriptors.append(
                FieldDescriptor(
                    name=spec.name,
                    display_name=self.display_name(spec.name, spec.alias),
                    rules=spec.rules or "",
                    value=render_value(read(spec.name)),
                )
            )
        return descriptors
