"""
Built-in validators.

Each factory returns a function following the validator contract:
(value, param) -> message, with "" meaning valid. Values arrive already
rendered to strings; numeric parameters are parsed here.

Quirk: a parameter that is not a plain integer (e.g. "abc", "3.5", "") is
read as 0, so "min(abc)" never fails and "max(abc)" fails on any non-empty
value. Existing rule specs depend on this, so it is kept.
"""

import re

# Basic RFC 5322-ish address: local@domain.tld
EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_int_param(param: str) -> int:
    """Parse a base-10 integer parameter; anything else counts as 0."""
    if _INT_PATTERN.fullmatch(param):
        return int(param)
    return 0


def required():
    def validate(value: str, param: str) -> str:
        if value == "":
            return "required"
        return ""

    return validate


def min_length():
    def validate(value: str, param: str) -> str:
        if len(value) < parse_int_param(param):
            return f"min length is {param}"
        return ""

    return validate


def max_length():
    def validate(value: str, param: str) -> str:
        if len(value) > parse_int_param(param):
            return f"max length is {param}"
        return ""

    return validate


def email():
    def validate(value: str, param: str) -> str:
        if not EMAIL_PATTERN.fullmatch(value):
            return "invalid email"
        return ""

    return validate


BUILTIN_VALIDATORS = {
    "required": required,
    "min": min_length,
    "max": max_length,
    "email": email,
}


def register_builtin_validators(registry) -> None:
    """Register every built-in validator on the given registry."""
    for name, factory in BUILTIN_VALIDATORS.items():
        registry.register(name, factory())
