import logging
from typing import Any, Dict, List, Optional

from .introspection import FieldIntrospector, NotARecordError, SchemaLike
from .registry import ValidatorRegistry, default_registry
from .report import ValidationReport
from .rule_parser import parse_rules

logger = logging.getLogger(__name__)


class ValidationEngine:
    """Core rule dispatch, independent of configuration and transport"""

    def __init__(
        self,
        registry: Optional[ValidatorRegistry] = None,
        introspector: Optional[FieldIntrospector] = None,
    ):
        """
        Initialize validation engine.

        Args:
            registry: Validators to dispatch to (defaults to the process-wide registry)
            introspector: Field introspector (defaults to purify/json metadata tags)
        """
        self.registry = registry if registry is not None else default_registry
        self.introspector = introspector or FieldIntrospector()

    def validate(
        self, record: Any, schema: Optional[SchemaLike] = None
    ) -> Optional[ValidationReport]:
        """
        Run every field's rules and collect the failures.

        Fields with an empty rule specification are skipped. Rules run in the
        order written; rule names with no registered validator are ignored.
        Exceptions raised by a validator propagate unchanged.

        Args:
            record: Dataclass instance, or mapping/object described by schema
            schema: Optional explicit field schema

        Returns:
            None if every rule passed, otherwise a ValidationReport. A value that
            is not record-shaped yields the "expected a struct" report under the
            "" key rather than an exception.
        """
        try:
            fields = self.introspector.describe(record, schema)
        except NotARecordError as e:
            logger.debug("Input is not a record", extra={"reason": str(e)})
            return ValidationReport.struct_expected()

        validators = self.registry.snapshot()
        errors: Dict[str, List[str]] = {}
        first_message = ""

        for field in fields:
            if not field.rules:
                continue

            for rule in parse_rules(field.rules):
                validator = validators.get(rule.name)
                if validator is None:
                    logger.debug(
                        "Skipping unknown rule",
                        extra={"rule_name": rule.name, "field": field.display_name},
                    )
                    continue

                message = validator(field.value, rule.param)
                if message:
                    errors.setdefault(field.display_name, []).append(message)
                    if not first_message:
                        first_message = message

        if not errors:
            return None

        logger.debug(
            "Validation failed",
            extra={"fields": list(errors), "first_message": first_message},
        )
        return ValidationReport(errors, first_message)

    def discover_rules(
        self, record: Any, schema: Optional[SchemaLike] = None
    ) -> Dict[str, List[Dict[str, Any]]]:
        """
        Describe the rules that would run for a record, without running them.

        Args:
            record: Dataclass instance, or mapping/object described by schema
            schema: Optional explicit field schema

        Returns:
            Dict mapping display name to a list of
            {"rule": str, "param": str, "registered": bool}, for fields that
            carry rules

        Raises:
            NotARecordError: If record is not record-shaped
        """
        validators = self.registry.snapshot()
        result = {}
        for field in self.introspector.describe(record, schema):
            if not field.rules:
                continue
            result.setdefault(field.display_name, []).extend(
                {
                    "rule": rule.name,
                    "param": rule.param,
                    "registered": rule.name in validators,
                }
                for rule in parse_rules(field.rules)
            )
        return result
