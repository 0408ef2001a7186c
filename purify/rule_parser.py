"""
Rule Parser - Pipe-Delimited Rule Grammar

Turns a field's rule specification into an ordered list of (name, param) pairs.

## Grammar

    spec    := rule ( "|" rule )*
    rule    := name | name "(" param ")"

Examples:
- `"email"` -> `[("email", "")]`
- `"required|min(3)|max(20)"` -> `[("required", ""), ("min", "3"), ("max", "20")]`

## Tolerance

Parsing never fails. A missing closing parenthesis still yields the parameter
(`"min(3"` -> `("min", "3")`) and any run of trailing `)` is stripped. Rule names
are not checked here; names with no registered validator are ignored by the
engine so that older deployments keep accepting specs written for newer ones.
"""

from typing import List, NamedTuple


RULE_SEPARATOR = "|"


class ParsedRule(NamedTuple):
    """A single rule taken from a rule specification."""

    name: str
    param: str = ""


def parse_rule(segment: str) -> ParsedRule:
    """
    Parse one rule segment.

    Args:
        segment: A single rule, e.g. "min(3)" or "email"

    Returns:
        ParsedRule with the text before the first "(" as name and the rest,
        right-stripped of ")", as param
    """
    name, paren, rest = segment.partition("(")
    if not paren:
        return ParsedRule(segment, "")
    return ParsedRule(name, rest.rstrip(")"))


def parse_rules(rule_spec: str) -> List[ParsedRule]:
    """
    Parse a full rule specification.

    Args:
        rule_spec: Pipe-delimited rules (e.g. "required|min(3)")

    Returns:
        Rules in the order written. An empty spec yields an empty list.
    """
    if not rule_spec:
        return []
    return [parse_rule(segment) for segment in rule_spec.split(RULE_SEPARATOR)]
