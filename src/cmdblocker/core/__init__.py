"""Core policy engine.

This module contains the essential components for command blocking:
- command_helper: Mod prefix handling
- aliases: Alias resolver capability
- block_set: Thread-safe raw target / blocked set holder
- config: YAML configuration model
- policy: Block and bypass decisions
"""

from cmdblocker.core.aliases import AliasResolver, MappingAliasResolver
from cmdblocker.core.block_set import BlockSet
from cmdblocker.core.command_helper import remove_mod_prefix
from cmdblocker.core.config import BlockerConfig, load_config, try_initialize
from cmdblocker.core.policy import BlockDecision, PolicyEngine

__all__ = [
    # Aliases
    "AliasResolver",
    "MappingAliasResolver",
    # Block set
    "BlockSet",
    # Command helper
    "remove_mod_prefix",
    # Config
    "BlockerConfig",
    "load_config",
    "try_initialize",
    # Policy
    "BlockDecision",
    "PolicyEngine",
]
