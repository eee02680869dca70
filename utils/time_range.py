import re
from typing import Optional

_UNIT_ALIASES = {
    "s": "s", "sec": "s", "secs": "s", "second": "s", "seconds": "s",
    "m": "m", "min": "m", "mins": "m", "minute": "m", "minutes": "m",
    "h": "h", "hr": "h", "hrs": "h", "hour": "h", "hours": "h",
    "d": "d", "day": "d", "days": "d",
    "w": "w", "wk": "w", "week": "w", "weeks": "w",
    "mo": "M", "month": "M", "months": "M",
    "y": "y", "yr": "y", "year": "y", "years": "y",
}

_TIME_RANGE_RE = re.compile(r"^(?:last\s+|past\s+)?(\d+)\s*([a-z]+)$")


def normalize_time_range(value) -> Optional[str]:
    """
    Turn "1h", "24 hours", "last 7 days" into elasticsearch date math units
    ("1h", "24h", "7d"). Returns None for anything unrecognised.
    """
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    # "M" (month) is the only case-sensitive unit in date math
    if re.fullmatch(r"\d+M", text):
        return text
    match = _TIME_RANGE_RE.match(text.lower())
    if not match:
        return None
    amount, unit = match.groups()
    if int(amount) <= 0 or unit not in _UNIT_ALIASES:
        return None
    return f"{int(amount)}{_UNIT_ALIASES[unit]}"
