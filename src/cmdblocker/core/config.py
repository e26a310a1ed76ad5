"""Configuration loading for cmdblocker.

The configuration is a flat YAML mapping with dashed keys:

    ```yaml
    target-commands:
      - help
      - plugins
      - version
    bypass-permission: cmdblock.bypass
    show-error-message: true
    error-message: '&cYou are not permitted to execute this command.'
    resolve-aliases: true
    ```

Only target-commands and resolve-aliases influence matching. The remaining
keys are carried for the message, bypass and tab-completion layers.
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from cmdblocker.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_HEADER = (
    "Configuration file for cmdblocker.\n"
    "Define what commands should be blocked under target-commands (without leading slash).\n"
    "Aliases of target commands are blocked too while resolve-aliases is true.\n"
    "<command> in messages is replaced with the blocked command's name."
)

DEFAULT_TARGET_COMMANDS = ["help", "plugins", "version"]


@dataclass
class BlockerConfig:
    """Settings of the command blocker.

    Attributes:
        target_commands: Command names to block, without leading slash
        bypass_permission: Permission that exempts a user from blocking
        show_error_message: Whether to tell users their command was blocked
        show_tab_error_message: Whether to tell users a tab-completion was blocked
        error_message: Message for blocked commands
        prevent_tab: Whether to prevent tab-completion of blocked commands
        tab_restrictive_mode: Block whole completion replies instead of filtering them
        notify_bypass: Whether to tell permitted users they bypassed a block
        bypass_message: Message for bypassed blocks
        tab_error_message: Message for blocked tab-completions
        resolve_aliases: Whether to block aliases of target commands
    """

    target_commands: list[str] = field(default_factory=lambda: list(DEFAULT_TARGET_COMMANDS))
    bypass_permission: str = "cmdblock.bypass"
    show_error_message: bool = True
    show_tab_error_message: bool = False
    error_message: str = "&cYou are not permitted to execute this command."
    prevent_tab: bool = True
    tab_restrictive_mode: bool = False
    notify_bypass: bool = False
    bypass_message: str = "&c[CBU] This command is blocked. Executing anyways since you have permission."
    tab_error_message: str = "&cI am sorry, but I cannot let you do this, Dave."
    resolve_aliases: bool = True

    @staticmethod
    def key_for(field_name: str) -> str:
        """Map a field name to its YAML key (target_commands -> target-commands)."""
        return field_name.replace("_", "-")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a YAML-ready mapping with dashed keys."""
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[self.key_for(f.name)] = list(value) if isinstance(value, list) else value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any], file_path: Optional[str] = None) -> "BlockerConfig":
        """Build a config from a parsed YAML mapping.

        Missing keys keep their defaults. Unknown keys are ignored with a warning.

        Args:
            data: Mapping with dashed keys
            file_path: Source file, for error context

        Returns:
            BlockerConfig instance

        Raises:
            ConfigurationError: If a value has the wrong type
        """
        defaults = cls()
        known = {cls.key_for(f.name): f.name for f in fields(cls)}
        values: dict[str, Any] = {}

        for key, value in data.items():
            name = known.get(key)
            if name is None:
                logger.warning(f"Ignoring unknown configuration key: {key!r}")
                continue
            values[name] = _check_value(key, value, getattr(defaults, name), file_path)

        return cls(**values)


def _check_value(key: str, value: Any, default: Any, file_path: Optional[str]) -> Any:
    """Validate a single value against the type of its default."""
    if isinstance(default, list):
        if value is None:
            return []
        if not isinstance(value, list):
            raise ConfigurationError(f"{key} must be a list of strings, got {type(value).__name__}", file_path=file_path)
        for idx, item in enumerate(value):
            if isinstance(item, (dict, list)):
                raise ConfigurationError(
                    f"{key}[{idx}] must be a string, got {type(item).__name__}",
                    file_path=file_path,
                )
        # YAML turns bare numbers into ints; command names are always strings
        return [str(item) for item in value if item is not None]

    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ConfigurationError(f"{key} must be true or false, got {value!r}", file_path=file_path)
        return value

    if value is None or isinstance(value, (bool, dict, list)):
        raise ConfigurationError(f"{key} must be a string, got {type(value).__name__}", file_path=file_path)
    return str(value)


def load_config(config_path: Union[str, Path]) -> BlockerConfig:
    """Load configuration from a YAML file.

    A missing or empty file yields the defaults.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        BlockerConfig with file values layered over defaults

    Raises:
        ConfigurationError: If YAML is invalid or values have the wrong type
    """
    path = Path(config_path)
    if not path.exists():
        logger.info(f"No configuration at {path}, using defaults")
        return BlockerConfig()

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        line_number = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            line_number = mark.line + 1
        raise ConfigurationError(
            f"Invalid YAML syntax: {e}",
            file_path=str(path),
            line_number=line_number,
        ) from e
    except Exception as e:
        # Unreadable file or undecodable bytes (UnicodeDecodeError)
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            file_path=str(path),
        ) from e

    if data is None:
        return BlockerConfig()

    if not isinstance(data, dict):
        raise ConfigurationError(
            "YAML root must be a dictionary",
            file_path=str(path),
        )

    config = BlockerConfig.from_dict(data, file_path=str(path))
    logger.info(f"Loaded {len(config.target_commands)} target commands from {path}")
    return config


def try_initialize(
    config_path: Union[str, Path],
    log: Optional[logging.Logger] = None,
    save: bool = True,
) -> tuple[BlockerConfig, bool]:
    """Load configuration, degrading to defaults if it is invalid.

    On success the file is written back (when save is True) so options added
    in newer versions show up in it. On failure the error is logged with
    remediation guidance and the defaults are returned.

    Args:
        config_path: Path to the YAML configuration file
        log: Logger to report to (defaults to this module's logger)
        save: Whether to write the loaded config back to disk

    Returns:
        Tuple of (config, whether the file was loaded successfully)
    """
    log = log or logger
    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        log.warning("Encountered exception!", exc_info=e)
        log.warning("Could not load configuration file. Please double-check your YAML syntax.")
        log.warning("The command blocker will not function the way you want it to, since it doesn't know what you want.")
        log.warning("Fix the file and reload the configuration to leave this degraded state.")
        return BlockerConfig(), False

    if save:
        # Local import: config_writer imports BlockerConfig from this module
        from cmdblocker.setup.config_writer import write_config  # noqa: PLC0415

        result = write_config(config, Path(config_path), create_backup_flag=False)
        if not result.success:
            log.warning(f"Could not save configuration back to {config_path}: {result.error}")

    return config, True
