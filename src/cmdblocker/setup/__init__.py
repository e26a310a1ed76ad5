"""Configuration persistence.

- config_writer: YAML config file writing with backups
"""

from cmdblocker.setup.config_writer import WriteResult, write_config

__all__ = [
    "WriteResult",
    "write_config",
]
