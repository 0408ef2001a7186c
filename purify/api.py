"""
Public API for purify

This is the "front door" - the main entry point for validation.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from .config_loader import ConfigLoader
from .introspection import FieldIntrospector, RecordSchema, SchemaLike
from .registry import ValidatorFunc, ValidatorRegistry, bootstrap, default_registry
from .report import ValidationReport
from .validation_engine import ValidationEngine

logger = logging.getLogger(__name__)


class ValidationService:
    """
    Main validation service class.

    Wires configuration, the validator registry and the engine together.

    Example:
        from purify import ValidationService

        service = ValidationService()
        report = service.validate(signup)
        if report:
            print(report.message)          # first failure
            print(report.to_dict())        # {"errors": {...}, "message": "..."}

        # Dicts and plain objects are validated against a schema,
        # either passed in or named in the configuration
        report = service.validate({"email": "x"}, schema="signup")
    """

    def __init__(
        self,
        config_uri: Optional[str] = None,
        registry: Optional[ValidatorRegistry] = None,
    ):
        """
        Initialize validation service.

        Args:
            config_uri: Configuration path or URI (None uses the bundled config)
            registry: Validator registry (defaults to the process-wide registry)

        Raises:
            ValueError: If the configuration is invalid
            RuntimeError: If a remote configuration cannot be fetched
        """
        self.registry = registry if registry is not None else default_registry
        self._config_uri = config_uri
        self._builtins_registered = False
        self._initialize()

    def _initialize(self):
        """Internal initialization logic (used by __init__ and reload_config)."""
        self.config_loader = ConfigLoader(self._config_uri)

        if self.config_loader.get_register_builtins() and not self._builtins_registered:
            bootstrap(self.registry)
            self._builtins_registered = True

        self.introspector = FieldIntrospector(
            rule_tag=self.config_loader.get_rule_tag(),
            name_tag=self.config_loader.get_name_tag(),
            omit_placeholder=self.config_loader.get_omit_placeholder(),
        )
        self.schemas = self.config_loader.get_schemas()
        self.engine = ValidationEngine(registry=self.registry, introspector=self.introspector)

        logger.info(
            "Validation service initialized",
            extra={
                "validators": len(self.registry),
                "schemas": list(self.schemas),
            },
        )

    def validate(
        self, record: Any, schema: Union[str, SchemaLike, None] = None
    ) -> Optional[ValidationReport]:
        """
        Validate a single record.

        Args:
            record: Dataclass instance with rule metadata, or a mapping/object
                described by schema
            schema: RecordSchema, list of FieldSpec, or the name of a
                configured schema

        Returns:
            None if the record is valid, otherwise a ValidationReport with
            per-field messages and the first message

        Raises:
            ValueError: If schema names an unknown configured schema

        Example:
            report = service.validate({"name": ""}, [FieldSpec("name", "required")])
            report.to_dict()  # {"errors": {"name": ["required"]}, "message": "required"}
        """
        return self.engine.validate(record, self._resolve_schema(schema))

    def batch_validate(
        self,
        records: List[Any],
        id_fields: List[str],
        schema: Union[str, SchemaLike, None] = None,
    ) -> List[Dict[str, Any]]:
        """
        Validate multiple records in a single operation.

        Args:
            records: Records to validate (all against the same schema, if any)
            id_fields: Field names used to build each record's identifier
            schema: As for validate()

        Returns:
            List, in input order, of:
                - record_id: id_fields values joined by "-" ("unknown" if none found)
                - report: ValidationReport.to_dict() or None if valid

        Example:
            results = service.batch_validate(users, ["id"], "signup")
            failed = [r["record_id"] for r in results if r["report"]]
        """
        resolved = self._resolve_schema(schema)
        results = []
        for record in records:
            report = self.engine.validate(record, resolved)
            results.append(
                {
                    "record_id": self._extract_id(record, id_fields),
                    "report": report.to_dict() if report else None,
                }
            )
        return results

    def discover_rules(
        self, record: Any, schema: Union[str, SchemaLike, None] = None
    ) -> Dict[str, List[Dict[str, Any]]]:
        """
        Discover the rules that apply to a record without running them.

        Returns:
            Dict mapping display name to a list of
            {"rule": str, "param": str, "registered": bool}

        Raises:
            NotARecordError: If record is not record-shaped
        """
        return self.engine.discover_rules(record, self._resolve_schema(schema))

    def register_validator(self, name: str, fn: ValidatorFunc) -> None:
        """Register (or replace) a validator on this service's registry."""
        self.registry.register(name, fn)

    def list_validators(self) -> List[str]:
        return self.registry.names()

    def list_schemas(self) -> List[str]:
        return list(self.schemas)

    def reload_config(self):
        """
        Re-read configuration and rebuild the introspector and engine.

        Registered validators are kept.
        """
        self._initialize()

    def get_config_age(self) -> Optional[float]:
        return self.config_loader.get_config_age()

    def _resolve_schema(self, schema: Union[str, SchemaLike, None]) -> Optional[SchemaLike]:
        if schema is None or isinstance(schema, RecordSchema):
            return schema
        if isinstance(schema, str):
            if schema not in self.schemas:
                available = ", ".join(sorted(self.schemas)) or "none"
                raise ValueError(f"Unknown schema '{schema}'. Available schemas: {available}")
            return self.schemas[schema]
        return RecordSchema(schema)

    def _extract_id(self, record: Any, id_fields: List[str]) -> str:
        """
        Extract record identifier from record data.

        Args:
            record: Mapping or object
            id_fields: List of field names to try

        Returns:
            String identifier (concatenated if multiple fields)
        """
        id_parts = []
        for field in id_fields:
            if isinstance(record, dict):
                if field in record:
                    id_parts.append(str(record[field]))
            elif hasattr(record, field):
                id_parts.append(str(getattr(record, field)))

        if not id_parts:
            return "unknown"

        return "-".join(id_parts)


def validate(record: Any, schema: Optional[SchemaLike] = None) -> Optional[ValidationReport]:
    """
    Validate with the process-wide registry and default metadata tags.

    Built-in validators are registered on first use.

    Example:
        from purify import validate, FieldSpec

        validate({"name": "Al"}, [FieldSpec("name", "min(3)")])
        # -> ValidationReport(errors={"name": ("min length is 3",)}, message="min length is 3")
    """
    bootstrap()
    if schema is not None and not isinstance(schema, RecordSchema):
        schema = RecordSchema(schema)
    return ValidationEngine(default_registry).validate(record, schema)

