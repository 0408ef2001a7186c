"""Validator registry: rule name -> validator function."""

import logging
import threading
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

# (value, param) -> message; an empty message means the value is valid.
ValidatorFunc = Callable[[str, str], str]


class ValidatorRegistry:
    """
    Thread-safe store of validators keyed by rule name.

    Registering a name that already exists replaces the previous validator
    (last write wins). Registration and lookup share one lock, so validators
    may be registered while validations are running; each validation works
    from its own snapshot() and never sees a half-applied update.

    Example:
        registry = ValidatorRegistry()
        registry.register("even", lambda value, param: "" if len(value) % 2 == 0 else "odd length")
        registry.lookup("even")("ab", "")  # -> ""
    """

    def __init__(self):
        self._validators: Dict[str, ValidatorFunc] = {}
        self._lock = threading.RLock()

    def register(self, name: str, fn: ValidatorFunc) -> None:
        """
        Register a validator under a rule name.

        Args:
            name: Rule name as written in rule specifications (e.g. "min")
            fn: Callable taking (value, param) and returning an error message
                or "" when the value is valid
        """
        if not callable(fn):
            raise TypeError(f"Validator for '{name}' must be callable, got {type(fn).__name__}")
        with self._lock:
            if name in self._validators:
                logger.debug("Replacing validator", extra={"rule_name": name})
            self._validators[name] = fn

    def lookup(self, name: str) -> Optional[ValidatorFunc]:
        """Return the validator registered under name, or None."""
        with self._lock:
            return self._validators.get(name)

    def snapshot(self) -> Dict[str, ValidatorFunc]:
        """Return a point-in-time copy of the name -> validator mapping."""
        with self._lock:
            return dict(self._validators)

    def names(self) -> List[str]:
        """List registered rule names, sorted."""
        with self._lock:
            return sorted(self._validators)

    def clear(self) -> None:
        """Remove all validators. Primarily for testing."""
        with self._lock:
            self._validators.clear()

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._validators

    def __len__(self) -> int:
        with self._lock:
            return len(self._validators)


# Process-wide registry. Empty until bootstrap() or register_validator() is called.
default_registry = ValidatorRegistry()

_bootstrap_lock = threading.Lock()
_bootstrapped = False


def register_validator(name: str, fn: ValidatorFunc) -> None:
    """Register a validator on the process-wide registry."""
    default_registry.register(name, fn)


def bootstrap(registry: Optional[ValidatorRegistry] = None) -> ValidatorRegistry:
    """
    Register the built-in validators.

    Must run before the first validation that relies on built-ins. For the
    process-wide registry this happens once; later calls are no-ops, so user
    validators registered afterwards under a built-in name are not overwritten.
    A registry passed explicitly is always (re)populated.

    Args:
        registry: Registry to populate (defaults to the process-wide registry)

    Returns:
        The populated registry
    """
    global _bootstrapped
    from .validators import register_builtin_validators

    if registry is not None and registry is not default_registry:
        register_builtin_validators(registry)
        return registry

    with _bootstrap_lock:
        if not _bootstrapped:
            register_builtin_validators(default_registry)
            _bootstrapped = True
            logger.debug(
                "Built-in validators registered",
                extra={"validators": default_registry.names()},
            )
    return default_registry
