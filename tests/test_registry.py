"""
Tests for the validator registry and bootstrap.
"""
import threading

import pytest
from purify.registry import (
    ValidatorRegistry,
    bootstrap,
    default_registry,
    register_validator,
)


@pytest.fixture
def registry():
    """Create an isolated, empty registry."""
    return ValidatorRegistry()


def always_fail(value, param):
    return "always fails"


class TestRegister:
    """Test register() and lookup()."""

    def test_lookup_missing_returns_none(self, registry):
        assert registry.lookup("nope") is None

    def test_register_then_lookup(self, registry):
        registry.register("fail", always_fail)
        assert registry.lookup("fail") is always_fail
        assert "fail" in registry
        assert len(registry) == 1

    def test_reregister_replaces(self, registry):
        """Last registration under a name wins, without error."""
        registry.register("rule", always_fail)
        registry.register("rule", lambda value, param: "")
        assert registry.lookup("rule")("x", "") == ""
        assert len(registry) == 1

    def test_non_callable_rejected(self, registry):
        with pytest.raises(TypeError):
            registry.register("bad", "not a function")

    def test_names_sorted(self, registry):
        registry.register("zeta", always_fail)
        registry.register("alpha", always_fail)
        assert registry.names() == ["alpha", "zeta"]

    def test_clear(self, registry):
        registry.register("fail", always_fail)
        registry.clear()
        assert len(registry) == 0


class TestSnapshot:
    """Test snapshot() isolation."""

    def test_snapshot_is_a_copy(self, registry):
        registry.register("fail", always_fail)
        snap = registry.snapshot()
        registry.register("later", always_fail)
        assert "later" not in snap
        assert snap == {"fail": always_fail}

    def test_concurrent_registration(self, registry):
        """Registering from several threads loses no entries."""

        def worker(offset):
            for i in range(200):
                registry.register(f"rule_{offset}_{i}", always_fail)
                registry.snapshot()

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(registry) == 800


class TestBootstrap:
    """Test bootstrap() and the process-wide registry."""

    def test_bootstrap_isolated_registry(self, registry):
        result = bootstrap(registry)
        assert result is registry
        assert registry.names() == ["email", "max", "min", "required"]

    def test_bootstrap_default_registry_is_idempotent(self):
        first = bootstrap()
        second = bootstrap()
        assert first is default_registry
        assert second is default_registry
        assert "required" in default_registry

    def test_bootstrap_does_not_touch_default_when_given_registry(self, registry):
        before = default_registry.snapshot()
        bootstrap(registry)
        assert default_registry.snapshot() == before

    def test_register_validator_uses_default_registry(self):
        register_validator("test_registry_probe", always_fail)
        assert default_registry.lookup("test_registry_probe") is always_fail
