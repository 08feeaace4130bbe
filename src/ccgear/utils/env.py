# Environment variable helpers
import re
from collections.abc import Iterable

# ABOUTME: Pattern matches a portable environment variable name
ENV_NAME_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')

# ABOUTME: Variable names containing any of these are treated as secrets
SECRET_MARKERS = ("key", "token", "secret", "password")


def is_secret_name(name: str) -> bool:
    """Whether a variable name looks like it holds a credential.

    Examples:
        >>> is_secret_name("OPENAI_API_KEY")
        True
        >>> is_secret_name("HTTP_PROXY")
        False
    """
    lowered = name.lower()
    return any(marker in lowered for marker in SECRET_MARKERS)


def mask_value(value: str, visible: int = 4) -> str:
    """Hide all but the last few characters of a secret."""
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]


def parse_env_pairs(pairs: Iterable[str]) -> dict[str, str]:
    """Parse KEY=VALUE strings into a dict.

    ABOUTME: Splits on the first '=' only, strips surrounding whitespace

    Raises:
        ValueError: If an item has no '=' or an empty key
    """
    result: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Invalid format '{pair}'. Use KEY=VALUE.")
        key, value = pair.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError(f"Invalid format '{pair}'. Key is empty.")
        result[key] = value.strip()
    return result
