"""Helpers for command tokens as dispatched by the host."""

MOD_PREFIX_DELIMITER = ":"


def remove_mod_prefix(command: str) -> str:
    """Strip a mod prefix (namespace before the first colon) from a command token.

    Args:
        command: Command token, e.g. "minecraft:me" or "me"

    Returns:
        The part after the first delimiter, or the token unchanged if it has none.
        A trailing delimiter yields an empty string.

    Example:
        >>> remove_mod_prefix("minecraft:me")
        'me'
        >>> remove_mod_prefix("me")
        'me'
    """
    _, sep, rest = command.partition(MOD_PREFIX_DELIMITER)
    return rest if sep else command
