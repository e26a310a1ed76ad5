"""Alias resolution against the host's command registry.

The policy engine never talks to the host directly. It consumes an
AliasResolver, which keeps its own snapshot of "command -> aliases" and
resynchronizes it on demand. Each host platform supplies its own resolver;
MappingAliasResolver covers the common case where the registry can be read
as a mapping.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Callable

logger = logging.getLogger(__name__)

AliasRegistry = Callable[[], Mapping[str, Iterable[str]]]


class AliasResolver(ABC):
    """Capability for looking up the known aliases of a command.

    Implementations must tolerate repeated refreshes and must never fail a
    lookup: an unavailable or partially loaded registry yields fewer aliases,
    not an exception.
    """

    @abstractmethod
    def refresh_map(self) -> None:
        """Resynchronize alias knowledge with the live command registry.

        May be slow (walks the host registry). Never call on the query path.
        """

    @abstractmethod
    def resolve(self, command_name: str) -> set[str]:
        """Return known aliases of command_name as of the last refresh_map().

        Args:
            command_name: Canonical command name as configured

        Returns:
            Zero or more alias strings
        """


class MappingAliasResolver(AliasResolver):
    """Resolver backed by a callable that returns the live registry mapping.

    The registry callable is invoked only from refresh_map(). Its result is
    copied into an immutable snapshot, so later mutation of the host registry
    is not visible until the next refresh.

    Example:
        >>> registry = {"help": ["?", "h"], "tell": ["msg", "w"]}
        >>> resolver = MappingAliasResolver(lambda: registry)
        >>> resolver.refresh_map()
        >>> sorted(resolver.resolve("help"))
        ['?', 'h']
    """

    def __init__(self, registry: AliasRegistry):
        """Initialize resolver with an empty alias map.

        Args:
            registry: Zero-argument callable returning {command: aliases}
        """
        self._registry = registry
        self._alias_map: dict[str, frozenset[str]] = {}
        self._lock = threading.Lock()

    def refresh_map(self) -> None:
        """Snapshot the registry.

        If the registry cannot be read, the previous snapshot is kept and the
        failure is logged. Resolution then proceeds with stale knowledge.
        """
        try:
            live = self._registry()
        except Exception as e:
            logger.warning(f"Command registry unavailable, keeping previous alias map: {e}")
            return

        snapshot = {}
        for command, aliases in (live or {}).items():
            snapshot[command] = frozenset(alias for alias in aliases if alias != command)

        with self._lock:
            self._alias_map = snapshot

        logger.debug(f"Alias map refreshed: {len(snapshot)} commands known")

    def resolve(self, command_name: str) -> set[str]:
        with self._lock:
            return set(self._alias_map.get(command_name, ()))

    def known_commands(self) -> set[str]:
        """Return the command names present in the current snapshot."""
        with self._lock:
            return set(self._alias_map)
