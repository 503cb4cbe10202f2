import re
from datetime import timedelta

_SESSION_UNITS = {
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
    "m": timedelta(days=30),
    "y": timedelta(days=365),
}

_LIFETIME_UNITS = {
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
}

_SESSION_RE = re.compile(r"^(\d+)([dwmy]?)$")
_LIFETIME_RE = re.compile(r"^(\d+)([smhdw]?)$")


class ConfigError(ValueError):
    """Raised when a configuration value cannot be used."""


def parse_session_interval(expr: str) -> timedelta:
    """Parse a session lifetime such as ``1d``, ``2w``, ``3m`` or ``1y``.

    A bare number means days. Months count as 30 days and years as 365.
    """
    cleaned = expr.replace(" ", "").lower()
    match = _SESSION_RE.match(cleaned)
    if not match:
        raise ConfigError(f"Invalid session expiration time: {expr!r}")
    amount, unit = match.groups()
    return int(amount) * _SESSION_UNITS[unit or "d"]


def parse_lifetime(expr: str) -> timedelta:
    """Parse a bearer token lifetime such as ``15m`` or ``30d``.

    A bare number means seconds.
    """
    cleaned = expr.replace(" ", "").lower()
    match = _LIFETIME_RE.match(cleaned)
    if not match:
        raise ConfigError(f"Invalid token expiration: {expr!r}")
    amount, unit = match.groups()
    return int(amount) * _LIFETIME_UNITS[unit or "s"]
