"""Audit logging for block and bypass decisions.

This module provides a persistent audit trail of commands that were blocked
or executed via the bypass permission. Logs are written in JSONL (JSON Lines)
format for easy parsing and analysis.

Log Location:
    Default (daily timestamped files):
        Unix/Linux/macOS: ~/.local/share/cmdblocker/audit-YYYY-MM-DD.jsonl
        Windows: %LOCALAPPDATA%/cmdblocker/cmdblocker/audit-YYYY-MM-DD.jsonl
    Can be overridden via CMDBLOCKER_AUDIT_LOG environment variable (single file)

Log Format (JSONL):
    Each line is a JSON object with:
    - timestamp: ISO 8601 UTC timestamp
    - event_type: "block" | "bypass"
    - command: The command token that was checked
    - permission: The bypass permission that was consulted
    - context: Server/sender metadata

Thread Safety:
    File writes are append mode with a single write call.
"""

import json
import os
import sys
import threading
from contextlib import suppress
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from platformdirs import user_data_dir


def get_null_device() -> str:
    """Get platform-specific null device."""
    return "NUL" if sys.platform == "win32" else "/dev/null"


@dataclass
class AuditContext:
    """Context metadata for audit events."""

    sender: Optional[str] = None
    server: Optional[str] = None
    platform: Optional[str] = None


@dataclass
class AuditEvent:
    """Block/bypass audit event."""

    timestamp: str
    event_type: str  # "block", "bypass"
    command: str
    permission: str
    context: dict[str, Any]

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(asdict(self))


class AuditLogger:
    """Persistent audit logger for block decisions.

    Example:
        audit = AuditLogger()
        audit.log_decision("plugins", "block", "cmdblock.bypass")
    """

    def __init__(self, log_file: Optional[Path] = None):
        """Initialize audit logger.

        Args:
            log_file: Path to audit log file. If None, uses default location.
        """
        if log_file is None:
            log_file = self._get_default_log_path()

        self.log_file = log_file
        self._ensure_log_directory()

    def _get_default_log_path(self) -> Path:
        """Get default audit log path.

        Logic:
        - If CMDBLOCKER_AUDIT_LOG is set and ends in .jsonl: use as-is (single file)
        - If CMDBLOCKER_AUDIT_LOG is set but is a directory: append timestamped filename
        - Otherwise: Platform-specific data dir with timestamped filename
        """
        today = datetime.now().strftime("%Y-%m-%d")
        env_path = os.environ.get("CMDBLOCKER_AUDIT_LOG")
        if env_path:
            path = Path(env_path).expanduser()
            # Special case: null device is always a file (platform-specific)
            null_dev = get_null_device()
            if str(path) == null_dev or str(path).upper() == "NUL":
                return path
            # If it ends in .jsonl, treat as explicit file path
            if path.suffix == ".jsonl":
                return path
            # Otherwise treat as directory and append timestamped filename
            return path / f"audit-{today}.jsonl"

        # Default: Platform-specific data directory with timestamped filename
        # Unix: ~/.local/share/cmdblocker, Windows: %LOCALAPPDATA%\cmdblocker\cmdblocker
        data_dir = Path(user_data_dir("cmdblocker", "cmdblocker"))
        return data_dir / f"audit-{today}.jsonl"

    def _ensure_log_directory(self):
        """Create log directory if it doesn't exist."""
        # Fail silently - actual write will fail if path is truly invalid
        with suppress(FileExistsError, OSError):
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

    def log_event(self, event: AuditEvent):
        """Write audit event to log file (append mode, single write call)."""
        # Fail silently - audit logging must not break command dispatch
        with suppress(Exception), open(self.log_file, "a", encoding="utf-8") as f:
            f.write(event.to_json() + "\n")

    def log_decision(
        self,
        command: str,
        event_type: str,
        permission: str,
        context: Optional[AuditContext] = None,
    ):
        """Log a block or bypass decision.

        Args:
            command: Command token that was checked
            event_type: "block" or "bypass"
            permission: Bypass permission consulted for the decision
            context: Optional context metadata
        """
        if context is None:
            context = AuditContext()

        event = AuditEvent(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event_type=event_type,
            command=command,
            permission=permission,
            context=asdict(context),
        )

        self.log_event(event)


# Global audit logger singleton (lazy-loaded with thread-safe initialization)
_audit_logger: Optional[AuditLogger] = None
_audit_logger_lock = threading.Lock()


def get_audit_logger() -> AuditLogger:
    """Get or create global audit logger singleton.

    Thread-safe via double-check locking pattern.
    """
    global _audit_logger  # noqa: PLW0603 - Singleton pattern for audit logger

    # First check (fast path, no lock needed if already initialized)
    if _audit_logger is None:
        # Acquire lock for initialization
        with _audit_logger_lock:
            # Second check (another thread may have initialized while we waited)
            if _audit_logger is None:
                _audit_logger = AuditLogger()

    return _audit_logger
