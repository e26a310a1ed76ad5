"""Custom exceptions for cmdblocker.

The policy core raises nothing of its own: unknown commands are simply not
blocked and missing aliases degrade to fewer blocked names. The only domain
error belongs to the configuration layer:
- ConfigurationError: Raised when the YAML configuration is unreadable or malformed
"""

from typing import Optional


class ConfigurationError(Exception):
    """Raised when configuration is invalid.

    Used for:
    - Invalid YAML syntax in the configuration file
    - YAML root that is not a mapping
    - Values of the wrong type (e.g. a string where a list is expected)

    Includes file path and line number context when available.

    Args:
        message: Error description
        file_path: Path to problematic config file (optional)
        line_number: Line number where error occurred (optional)

    Example:
        >>> raise ConfigurationError(
        ...     "target-commands must be a list of strings",
        ...     file_path="config.yml",
        ...     line_number=3
        ... )
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        line_number: Optional[int] = None,
    ):
        """Initialize ConfigurationError with context.

        Args:
            message: Human-readable error description
            file_path: Path to configuration file with error (if applicable)
            line_number: Line number in file where error occurred (if known)
        """
        self.message = message
        self.file_path = file_path
        self.line_number = line_number
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with file/line context if available."""
        parts = [self.message]
        if self.file_path:
            parts.append(f"in file: {self.file_path}")
        if self.line_number:
            parts.append(f"at line: {self.line_number}")
        return " ".join(parts)

    def __str__(self) -> str:
        """Return formatted error message."""
        return self._format_message()
