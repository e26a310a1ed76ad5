"""Tests for MappingAliasResolver."""

import pytest

from cmdblocker.core.aliases import AliasResolver, MappingAliasResolver
from cmdblocker.core.policy import PolicyEngine


class TestMappingAliasResolver:
    """Test suite for MappingAliasResolver."""

    def test_resolve_before_refresh_is_empty(self):
        """Nothing is known until the first refresh."""
        resolver = MappingAliasResolver(lambda: {"help": ["?"]})
        assert resolver.resolve("help") == set()

    def test_refresh_and_resolve(self):
        """Aliases are reported after a refresh."""
        resolver = MappingAliasResolver(lambda: {"help": ["?", "h"]})
        resolver.refresh_map()
        assert resolver.resolve("help") == {"?", "h"}
        assert resolver.resolve("unknown") == set()

    def test_self_alias_excluded(self):
        """A command is not reported as its own alias."""
        resolver = MappingAliasResolver(lambda: {"help": ["help", "?"]})
        resolver.refresh_map()
        assert resolver.resolve("help") == {"?"}

    def test_snapshot_isolated_from_registry(self):
        """Registry changes are invisible until the next refresh."""
        registry = {"help": ["?"]}
        resolver = MappingAliasResolver(lambda: registry)
        resolver.refresh_map()
        registry["help"].append("h")
        registry["tell"] = ["msg"]
        assert resolver.resolve("help") == {"?"}
        assert resolver.known_commands() == {"help"}

        resolver.refresh_map()
        assert resolver.resolve("help") == {"?", "h"}
        assert resolver.known_commands() == {"help", "tell"}

    def test_resolve_returns_copy(self):
        """Callers cannot mutate the internal map."""
        resolver = MappingAliasResolver(lambda: {"help": ["?"]})
        resolver.refresh_map()
        resolver.resolve("help").add("x")
        assert resolver.resolve("help") == {"?"}

    def test_unavailable_registry_keeps_previous_map(self, caplog):
        """A failing registry degrades to the last known aliases."""
        state = {"fail": False}

        def registry():
            if state["fail"]:
                raise RuntimeError("not loaded")
            return {"help": ["?"]}

        resolver = MappingAliasResolver(registry)
        resolver.refresh_map()
        state["fail"] = True
        resolver.refresh_map()

        assert resolver.resolve("help") == {"?"}
        assert "registry unavailable" in caplog.text

    def test_none_registry_treated_as_empty(self):
        """A registry that has not loaded yet may return None."""
        resolver = MappingAliasResolver(lambda: None)
        resolver.refresh_map()
        assert resolver.resolve("help") == set()

    def test_with_policy_engine(self):
        """Registry-backed resolution feeds the engine."""
        registry = {"tell": ["msg", "w"], "help": ["?"]}
        engine = PolicyEngine(["tell"])
        engine.resolve_aliases(MappingAliasResolver(lambda: registry))
        assert engine.is_blocked("msg")
        assert engine.is_blocked("minecraft:w")
        assert not engine.is_blocked("?")

        del registry["tell"]
        engine.resolve_aliases(MappingAliasResolver(lambda: registry))
        assert not engine.is_blocked("msg")
        assert engine.is_blocked("tell")


def test_alias_resolver_is_abstract():
    """The capability cannot be instantiated directly."""
    with pytest.raises(TypeError):
        AliasResolver()
