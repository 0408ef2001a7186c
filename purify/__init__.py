"""
purify: declarative per-field validation with pluggable rule validators

Fields carry short rule specifications such as "required|min(3)|max(20)".
The engine parses them, dispatches each rule to a registered validator and
returns a report of every failure, or None when the record is valid.

This library provides:
- A tolerant pipe-delimited rule grammar
- An extensible, thread-safe validator registry
- Built-in required/min/max/email validators
- Dataclass metadata and explicit schema introspection
- YAML configuration (bundled, local or remote)

Example:
    from dataclasses import dataclass, field
    from purify import ValidationService

    @dataclass
    class Signup:
        email: str = field(default="", metadata={"purify": "required|email"})

    service = ValidationService()
    report = service.validate(Signup(email="not-an-email"))
    # report.errors == {"email": ("invalid email",)}
"""

from .api import ValidationService, validate
from .introspection import (
    FieldDescriptor,
    FieldIntrospector,
    FieldSpec,
    NotARecordError,
    RecordSchema,
    render_value,
)
from .registry import (
    ValidatorRegistry,
    bootstrap,
    default_registry,
    register_validator,
)
from .report import ValidationFailed, ValidationReport
from .rule_parser import ParsedRule, parse_rule, parse_rules
from .validation_engine import ValidationEngine

__version__ = "0.1.0"
__all__ = [
    "ValidationService",
    "validate",
    "ValidationEngine",
    "ValidationReport",
    "ValidationFailed",
    "ValidatorRegistry",
    "default_registry",
    "register_validator",
    "bootstrap",
    "FieldIntrospector",
    "FieldDescriptor",
    "FieldSpec",
    "RecordSchema",
    "NotARecordError",
    "render_value",
    "ParsedRule",
    "parse_rule",
    "parse_rules",
]
