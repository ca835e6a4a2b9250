"""Identifier helpers."""

import re

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_]")


def sanitize_identifier(name: str) -> str:
    """
    Replace every character outside ``[A-Za-z0-9_]`` with an underscore.

    Used for both server names and tool/resource names, so that externally
    supplied names can be used as keys and generated identifiers.

    Args:
        name: Raw name as supplied by a config file or a remote server

    Returns:
        Sanitized name of the same length
    """
    return _UNSAFE_CHARS.sub("_", name)
