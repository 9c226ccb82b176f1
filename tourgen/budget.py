"""Stop budget for a requested tour length."""
from __future__ import annotations

import math
import re
from typing import Union

from . import config

_LABEL_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(minutes?|mins?|hours?|hrs?|h)?\s*$", re.IGNORECASE)


def stop_budget(duration_min: int) -> int:
    if duration_min < 0:
        raise ValueError(f"Tour duration must be non-negative: {duration_min}")
    viewing_min = duration_min * (1 - config.WALKING_TIME_SHARE)
    return int(math.floor(viewing_min / config.VIEWING_MINUTES_PER_STOP))


def parse_tour_length(label: Union[str, int]) -> int:
    """Minutes for a tour-length menu label like "1.5 hours" or "30 minutes"."""
    if isinstance(label, int):
        return label
    match = _LABEL_RE.match(label)
    if not match:
        raise ValueError(f"Unrecognized tour length: {label!r}")
    value = float(match.group(1))
    unit = (match.group(2) or "minutes").lower()
    if unit.startswith("h"):
        value *= 60
    return int(round(value))


def validate_tour_length(minutes: int) -> int:
    if minutes not in config.TOUR_LENGTH_CHOICES:
        choices = ", ".join(str(v) for v in config.TOUR_LENGTH_CHOICES)
        raise ValueError(f"Tour length must be one of: {choices}")
    return minutes
