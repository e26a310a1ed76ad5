"""Raw target list and derived blocked-command set.

This module owns the two pieces of state the policy engine works with:
the administrator's raw target commands (ordered, source of truth) and the
blocked set derived from them by alias expansion.
"""

import threading
from collections.abc import Iterable


class BlockSet:
    """Thread-safe holder for raw targets and the derived blocked set.

    The blocked set is an immutable frozenset that writers replace wholesale.
    Readers grab the current reference without locking, so a query never
    observes a half-built set. Writers serialize on a single lock.

    Invariant: every raw target is a member of the blocked set.

    Example:
        >>> block_set = BlockSet(["help", "plugins"])
        >>> "help" in block_set
        True
        >>> block_set.rebuild({"help": {"?"}})
        >>> "?" in block_set
        True
    """

    def __init__(self, raw_targets: Iterable[str] = ()):
        """Initialize BlockSet with raw targets and no aliases.

        Args:
            raw_targets: Target command names in configured order
        """
        self._lock = threading.Lock()
        self._raw: list[str] = list(raw_targets)
        self._blocked: frozenset[str] = frozenset(self._raw)

    def __contains__(self, command: str) -> bool:
        return command in self._blocked

    def __len__(self) -> int:
        return len(self._blocked)

    @property
    def raw_targets(self) -> list[str]:
        """Copy of the raw target list, in configured order."""
        with self._lock:
            return list(self._raw)

    @property
    def blocked(self) -> frozenset[str]:
        """Current blocked set snapshot (raw targets plus resolved aliases)."""
        return self._blocked

    def add(self, command: str) -> bool:
        """Add a raw target and block its literal name.

        Args:
            command: Command name (exact, case-sensitive)

        Returns:
            True if added, False if already a raw target
        """
        with self._lock:
            if command in self._raw:
                return False
            self._raw.append(command)
            self._blocked = self._blocked | {command}
            return True

    def remove(self, command: str) -> bool:
        """Remove a raw target and its literal name from the blocked set.

        Aliases previously resolved for the command stay blocked until the
        next rebuild. Alias ownership is not tracked.

        Args:
            command: Command name (exact, case-sensitive)

        Returns:
            Whether the blocked set contained the command
        """
        with self._lock:
            if command in self._raw:
                self._raw.remove(command)
            if command not in self._blocked:
                return False
            self._blocked = self._blocked - {command}
            return True

    def replace(self, raw_targets: Iterable[str]) -> None:
        """Replace raw targets, resetting the blocked set to exactly them."""
        with self._lock:
            self._raw = list(raw_targets)
            self._blocked = frozenset(self._raw)

    def reset(self) -> None:
        """Discard resolved aliases. The blocked set becomes the raw targets."""
        with self._lock:
            self._blocked = frozenset(self._raw)

    def rebuild(self, aliases: dict[str, set[str]]) -> None:
        """Recompute the blocked set from raw targets and their aliases.

        Raw targets added after the alias lookup started have no entry in
        aliases and are blocked by their literal name only.

        Args:
            aliases: Alias set per raw target, as reported by the resolver
        """
        with self._lock:
            blocked = set(self._raw)
            for command in self._raw:
                blocked.update(aliases.get(command, ()))
            self._blocked = frozenset(blocked)
