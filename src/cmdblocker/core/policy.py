"""Command-blocking policy engine.

PolicyEngine answers "is this command blocked?" and keeps the blocked set in
sync with the host's alias registry. Resolution is decoupled from queries:
is_blocked() only ever reads the current snapshot, and aliases are picked up
when resolve_aliases() is called explicitly (periodic refresh, command
register/unregister events, config reload).
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable, Optional

from .aliases import AliasResolver
from .block_set import BlockSet
from .command_helper import remove_mod_prefix
from .config import BlockerConfig

if TYPE_CHECKING:
    from cmdblocker.integrations.audit import AuditContext, AuditLogger

logger = logging.getLogger(__name__)

COMMAND_PLACEHOLDER = "<command>"


@dataclass(frozen=True)
class BlockDecision:
    """Outcome of checking a command for a specific user.

    Attributes:
        command: Command token as checked
        blocked: Whether execution must be prevented
        bypassed: Whether the command is blocked but the user holds the bypass permission
        message: Message to show the user (None if nothing should be shown)

    Example:
        >>> decision = engine.check_command("plugins", has_permission=lambda perm: False)
        >>> decision.blocked
        True
    """

    command: str
    blocked: bool
    bypassed: bool = False
    message: Optional[str] = None

    @property
    def notify(self) -> bool:
        """Whether a message should be sent to the user."""
        return self.message is not None


def format_message(template: str, command: str) -> str:
    """Substitute the command name into a configured message."""
    return template.replace(COMMAND_PLACEHOLDER, command)


class PolicyEngine:
    """Decide whether commands are blocked.

    Example:
        >>> engine = PolicyEngine(["help"])
        >>> engine.is_blocked("help")
        True
        >>> engine.is_blocked("minecraft:help")
        True
        >>> engine.resolve_aliases(resolver)  # also blocks "?" if the registry knows it
    """

    def __init__(
        self,
        target_commands: Optional[Iterable[str]] = None,
        resolve_aliases: bool = True,
        config: Optional[BlockerConfig] = None,
    ):
        """Initialize engine with raw targets only (no aliases yet).

        Args:
            target_commands: Raw target commands (defaults to config.target_commands)
            resolve_aliases: Whether resolve_aliases() expands aliases; ignored when config is given
            config: Full configuration; supplies messages and bypass permission
        """
        if config is None:
            config = BlockerConfig(resolve_aliases=resolve_aliases)
        if target_commands is not None:
            config = replace(config, target_commands=list(target_commands))

        self.config = config
        self._block_set = BlockSet(config.target_commands)

    @classmethod
    def from_config(cls, config: BlockerConfig) -> "PolicyEngine":
        """Create engine from a loaded configuration."""
        return cls(config=config)

    @property
    def resolve_aliases_enabled(self) -> bool:
        return self.config.resolve_aliases

    @property
    def raw_targets(self) -> list[str]:
        """Copy of the configured target commands."""
        return self._block_set.raw_targets

    @property
    def blocked_commands(self) -> frozenset[str]:
        """Snapshot of every blocked token, aliases included."""
        return self._block_set.blocked

    def is_blocked(self, command_name: str) -> bool:
        """Check whether a command token is blocked.

        Matches the token itself or the token with its mod prefix removed
        (e.g. "minecraft:me" matches a blocked "me"). No case folding and no
        alias lookup happen here.

        Args:
            command_name: Command token as dispatched by the host

        Returns:
            True if blocked
        """
        blocked = self._block_set.blocked
        return command_name in blocked or remove_mod_prefix(command_name) in blocked

    def resolve_aliases(self, resolver: AliasResolver) -> None:
        """Rebuild the blocked set from raw targets and their current aliases.

        With alias resolution disabled the blocked set is reset to exactly the
        raw targets and the resolver is not consulted. Otherwise the resolver
        is refreshed and every raw target is expanded. The new set is built
        off to the side; if the resolver raises, the previous set stays live.

        Args:
            resolver: Alias lookup for the host platform
        """
        if not self.config.resolve_aliases:
            self._block_set.reset()
            logger.debug("Alias resolution disabled, blocking raw targets only")
            return

        resolver.refresh_map()

        aliases = {}
        for command in self._block_set.raw_targets:
            aliases[command] = resolver.resolve(command)

        self._block_set.rebuild(aliases)
        logger.info(f"Resolved aliases: {len(aliases)} target commands, {len(self._block_set)} blocked tokens")

    def add_blocked_command(self, command: str) -> None:
        """Block a command by its literal name.

        Idempotent. Does not consult the alias registry; aliases of the new
        command are blocked after the next resolve_aliases() call.
        """
        if self._block_set.add(command):
            logger.debug(f"Added blocked command: {command!r}")

    def remove_blocked_command(self, command: str) -> bool:
        """Unblock a command by its literal name.

        Aliases are garbage-collected only on full resolution, not on
        individual removal: aliases resolved for this command stay blocked
        until the next resolve_aliases() call.

        Returns:
            Whether the command was in the blocked set
        """
        removed = self._block_set.remove(command)
        if removed:
            logger.debug(f"Removed blocked command: {command!r}")
        return removed

    def current_config(self) -> BlockerConfig:
        """Return the configuration with the current raw targets, ready to persist."""
        return replace(self.config, target_commands=self._block_set.raw_targets)

    def reload(self, config: BlockerConfig) -> None:
        """Adopt a freshly loaded configuration.

        The blocked set becomes exactly the new raw targets until the next
        resolve_aliases() call.
        """
        self.config = config
        self._block_set.replace(config.target_commands)
        logger.info(f"Configuration reloaded: {len(config.target_commands)} target commands")

    def check_command(
        self,
        command_name: str,
        has_permission: Callable[[str], bool],
        audit_logger: Optional["AuditLogger"] = None,
        audit_context: Optional["AuditContext"] = None,
    ) -> BlockDecision:
        """Decide whether a user may run a command.

        Blocked commands are allowed for users holding the bypass permission.
        Messages follow show-error-message and notify-bypass.

        Args:
            command_name: Command token as dispatched by the host
            has_permission: Permission check for the invoking user
            audit_logger: Optional audit trail for block and bypass events
            audit_context: Sender/server metadata recorded with audit events

        Returns:
            BlockDecision for this invocation
        """
        if not self.is_blocked(command_name):
            return BlockDecision(command=command_name, blocked=False)

        permission = self.config.bypass_permission
        if has_permission(permission):
            message = None
            if self.config.notify_bypass:
                message = format_message(self.config.bypass_message, command_name)
            if audit_logger is not None:
                audit_logger.log_decision(command_name, "bypass", permission, audit_context)
            logger.debug(f"Bypassed block of {command_name!r} via {permission}")
            return BlockDecision(command=command_name, blocked=False, bypassed=True, message=message)

        message = None
        if self.config.show_error_message:
            message = format_message(self.config.error_message, command_name)
        if audit_logger is not None:
            audit_logger.log_decision(command_name, "block", permission, audit_context)
        logger.debug(f"Blocked command {command_name!r}")
        return BlockDecision(command=command_name, blocked=True, message=message)
