"""Pytest configuration and shared fixtures."""

import pytest

from cmdblocker.core.aliases import AliasResolver
from cmdblocker.core.policy import PolicyEngine


class RecordingResolver(AliasResolver):
    """Alias resolver over a fixed map that records every call."""

    def __init__(self, alias_map=None, fail_on=None):
        self.alias_map = alias_map or {}
        self.fail_on = fail_on
        self.refresh_calls = 0
        self.resolved = []

    def refresh_map(self):
        self.refresh_calls += 1

    def resolve(self, command_name):
        self.resolved.append(command_name)
        if command_name == self.fail_on:
            raise RuntimeError(f"registry exploded on {command_name}")
        return set(self.alias_map.get(command_name, ()))


@pytest.fixture
def make_resolver():
    """Factory fixture for RecordingResolver instances."""

    def _create(alias_map=None, fail_on=None):
        return RecordingResolver(alias_map, fail_on)

    return _create


@pytest.fixture
def help_resolver(make_resolver):
    """Resolver knowing the aliases of help and tell."""
    return make_resolver({"help": {"?", "h"}, "tell": {"msg", "w"}})


@pytest.fixture
def engine():
    """PolicyEngine blocking help only, alias resolution enabled."""
    return PolicyEngine(["help"])


@pytest.fixture
def config_file(tmp_path):
    """Factory fixture writing YAML text to a config file."""

    def _create(text, name="config.yml"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _create
