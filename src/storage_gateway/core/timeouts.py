"""Parsing of caller-supplied write timeouts."""

import re

from storage_gateway.exceptions import BadInputError

_TIMEOUT_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h)?\s*$", re.IGNORECASE)

_UNIT_SECONDS = {
    "ms": 0.001,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_timeout(raw: str | None) -> float | None:
    """Convert a timeout query value to seconds.

    Args:
        raw: Seconds ("30", "1.5") or a number with a unit ("500ms", "10m").
            None or blank means no timeout was given.

    Returns:
        Timeout in seconds, or None when not given.

    Raises:
        BadInputError: If the value is malformed or not positive.

    Examples:
        "30" -> 30.0
        "500ms" -> 0.5
        "2m" -> 120.0
        "" -> None
    """
    if raw is None or not raw.strip():
        return None

    match = _TIMEOUT_PATTERN.match(raw)
    if match is None:
        raise BadInputError(f"Invalid timeout '{raw}': expected seconds or <n>ms|s|m|h")

    seconds = float(match.group(1)) * _UNIT_SECONDS[(match.group(2) or "s").lower()]
    if seconds <= 0:
        raise BadInputError(f"Invalid timeout '{raw}': must be positive")
    return seconds
