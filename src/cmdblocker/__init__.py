"""
cmdblocker - command-blocking policy engine for game-server plugins.

Package structure:
- cmdblocker.core: Policy engine (command helper, aliases, block set, config, policy)
- cmdblocker.integrations: Optional features (audit)
- cmdblocker.setup: Configuration persistence

Public API:
- PolicyEngine: Block/bypass decisions and alias resolution
- AliasResolver: Capability the host implements to report command aliases
- BlockerConfig / load_config: Configuration model and YAML loader
"""

from cmdblocker.core.aliases import AliasResolver, MappingAliasResolver
from cmdblocker.core.command_helper import remove_mod_prefix
from cmdblocker.core.config import BlockerConfig, load_config, try_initialize
from cmdblocker.core.policy import BlockDecision, PolicyEngine
from cmdblocker.exceptions import ConfigurationError

__version__ = "0.1.0"

__all__ = [
    "PolicyEngine",
    "BlockDecision",
    "AliasResolver",
    "MappingAliasResolver",
    "BlockerConfig",
    "load_config",
    "try_initialize",
    "remove_mod_prefix",
    "ConfigurationError",
]
