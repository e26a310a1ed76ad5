"""Configuration file writer for cmdblocker.

Persists BlockerConfig back to YAML with atomic writes and optional
timestamped backups. The policy engine never writes files itself; callers
save PolicyEngine.current_config() after administrative changes.
"""

import logging
import sys
from contextlib import suppress
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import yaml

from cmdblocker.core.config import CONFIG_HEADER, BlockerConfig

logger = logging.getLogger(__name__)

# Default config path (relative to the plugin data folder)
DEFAULT_CONFIG_PATH = Path("config.yml")

# File permissions (Unix only - ignored on Windows)
CONFIG_DIR_PERMS = 0o755  # rwxr-xr-x
CONFIG_FILE_PERMS = 0o644  # rw-r--r--


def safe_mkdir(path: Path, mode: int = CONFIG_DIR_PERMS) -> None:
    """Create directory with platform-appropriate permissions.

    Args:
        path: Directory path to create
        mode: Unix permission bits (ignored on Windows)
    """
    path.mkdir(parents=True, exist_ok=True)
    if sys.platform != "win32":
        # Permission setting failed - not critical for config files
        with suppress(OSError, NotImplementedError):
            path.chmod(mode)


def safe_chmod(path: Path, mode: int) -> None:
    """Set file permissions (Unix only)."""
    # Windows: no-op (ACLs control permissions)
    if sys.platform != "win32":
        # Permission setting failed - not critical for config files
        with suppress(OSError, NotImplementedError):
            path.chmod(mode)


@dataclass(frozen=True)
class WriteResult:
    """Result of config file write operation.

    Attributes:
        success: Whether write completed successfully
        config_path: Path where config was written
        backup_path: Path to backup file (None if no backup created)
        error: Error message if write failed (None on success)
        validation_errors: List of validation errors (empty on success)
    """

    success: bool
    config_path: Path
    backup_path: Optional[Path]
    error: Optional[str]
    validation_errors: list[str] = field(default_factory=list)


def write_config(
    config: BlockerConfig,
    config_path: Optional[Path] = None,
    create_backup_flag: bool = True,
) -> WriteResult:
    """Write configuration to a YAML file.

    Args:
        config: Configuration to persist
        config_path: Path to write config (default: config.yml)
        create_backup_flag: Whether to backup existing config

    Returns:
        WriteResult with success status and paths

    Example:
        >>> result = write_config(engine.current_config(), Path("plugins/cmdblocker/config.yml"))
        >>> if result.success:
        ...     print(f"Config saved to {result.config_path}")
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    config_path = Path(config_path)

    backup_path: Optional[Path] = None

    try:
        config_dict = config.to_dict()

        # Phase 1: Validate config structure
        validation_errors = validate_config_dict(config_dict)
        if validation_errors:
            return WriteResult(
                success=False,
                config_path=config_path,
                backup_path=None,
                error="Config validation failed",
                validation_errors=validation_errors,
            )

        # Phase 2: Create backup if file exists
        if create_backup_flag and config_path.exists():
            backup_path = create_backup(config_path)
            if backup_path:
                logger.info(f"Created backup: {backup_path}")

        # Phase 3: Ensure parent directory exists
        safe_mkdir(config_path.parent, CONFIG_DIR_PERMS)

        # Phase 4: Write config file atomically
        write_yaml_atomic(config_path, config_dict)
        logger.info(f"Config written to {config_path}")

        return WriteResult(
            success=True,
            config_path=config_path,
            backup_path=backup_path,
            error=None,
            validation_errors=[],
        )

    except Exception as e:
        logger.error(f"Failed to write config: {e}")
        return WriteResult(
            success=False,
            config_path=config_path,
            backup_path=backup_path,
            error=str(e),
            validation_errors=[],
        )


def create_backup(config_path: Path) -> Optional[Path]:
    """Create timestamped backup of existing config file.

    Args:
        config_path: Path to config file to backup

    Returns:
        Path to backup file, or None if backup failed

    Example:
        >>> backup = create_backup(Path("config.yml"))
        >>> print(backup)  # config.yml.backup.20250107_120530
    """
    if not config_path.exists():
        return None

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = config_path.with_suffix(f"{config_path.suffix}.backup.{timestamp}")

    try:
        backup_path.write_text(config_path.read_text(encoding="utf-8"), encoding="utf-8")
        return backup_path
    except Exception as e:
        logger.warning(f"Failed to create backup: {e}")
        return None


def write_yaml_atomic(path: Path, data: dict[str, Any]) -> None:
    """Write YAML file atomically using temp file + rename.

    The header comment is written above the YAML body.

    Raises:
        OSError: If write or rename fails
        yaml.YAMLError: If serialization fails
    """
    temp_path = path.with_suffix(path.suffix + ".tmp")

    try:
        # Write to temp file first
        with temp_path.open("w", encoding="utf-8") as f:
            for line in CONFIG_HEADER.splitlines():
                f.write(f"# {line}\n")
            yaml.safe_dump(
                data,
                f,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )

        # Set permissions before rename
        safe_chmod(temp_path, CONFIG_FILE_PERMS)

        # Atomic rename
        temp_path.replace(path)
    except Exception:
        # Clean up temp file on failure
        if temp_path.exists():
            temp_path.unlink()
        raise


def validate_config_dict(config_dict: dict[str, Any]) -> list[str]:
    """Validate config structure before writing.

    Args:
        config_dict: Config dictionary with dashed keys

    Returns:
        List of validation errors (empty if valid)
    """
    errors: list[str] = []

    targets = config_dict.get("target-commands")
    if not isinstance(targets, list):
        errors.append("target-commands must be a list")
    else:
        for idx, command in enumerate(targets):
            # Empty and slashed names are valid targets
            if not isinstance(command, str):
                errors.append(f"target-commands[{idx}] must be a string")

    defaults = BlockerConfig().to_dict()
    for key, default in defaults.items():
        if key == "target-commands":
            continue
        if key not in config_dict:
            errors.append(f"{key} required")
        elif not isinstance(config_dict[key], type(default)):
            errors.append(f"{key} must be {type(default).__name__}")

    return errors
