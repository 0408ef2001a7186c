"""Validation report returned by the engine."""

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Sequence, Tuple

STRUCT_EXPECTED_MESSAGE = "expected a struct"


class ValidationReport:
    """
    Outcome of one failed validation.

    Attributes:
        errors: Read-only mapping of display name -> messages, fields in record
            order and messages in rule order
        message: First message encountered (field order, then rule order)

    A report is only created when at least one rule failed; a valid record
    yields None instead of an empty report. Reports are immutable.
    """

    __slots__ = ("_errors", "_message")

    def __init__(self, errors: Mapping[str, Sequence[str]], message: str = ""):
        frozen = {name: tuple(messages) for name, messages in errors.items()}
        if not any(frozen.values()):
            raise ValueError("ValidationReport requires at least one field error")
        if not message:
            message = next(messages[0] for messages in frozen.values() if messages)
        self._errors = frozen
        self._message = message

    @classmethod
    def struct_expected(cls) -> "ValidationReport":
        """Report returned when the input is not record-shaped."""
        return cls({"": [STRUCT_EXPECTED_MESSAGE]}, STRUCT_EXPECTED_MESSAGE)

    @property
    def errors(self) -> Mapping[str, Tuple[str, ...]]:
        return MappingProxyType(self._errors)

    @property
    def message(self) -> str:
        return self._message

    def field_errors(self, name: str) -> List[str]:
        """Messages for one display name (empty list if the field passed)."""
        return list(self._errors.get(name, ()))

    def to_dict(self) -> Dict[str, Any]:
        """
        Plain-data form, ready for json.dumps().

        Returns:
            {"errors": {display_name: [message, ...]}, "message": str}
        """
        return {
            "errors": {name: list(messages) for name, messages in self._errors.items()},
            "message": self._message,
        }

    def raise_for_errors(self) -> None:
        """Raise ValidationFailed carrying this report."""
        raise ValidationFailed(self)

    def __eq__(self, other):
        if not isinstance(other, ValidationReport):
            return NotImplemented
        return (
            list(self._errors.items()) == list(other._errors.items())
            and self._message == other._message
        )

    def __hash__(self):
        return hash((tuple(self._errors.items()), self._message))

    def __repr__(self):
        return f"ValidationReport(errors={self._errors!r}, message={self._message!r})"


class ValidationFailed(ValueError):
    """Raised by ValidationReport.raise_for_errors()."""

    def __init__(self, report: ValidationReport):
        super().__init__(report.message)
        self.report = report
