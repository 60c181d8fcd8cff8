from __future__ import annotations

import math
from typing import Any

from app.constants import DEFAULT_PULSE_US, PULSE_MAX_US, PULSE_MIN_US


def clamp_pulse(value: Any) -> int:
    """Clamp to an integer pulse width in [300, 3000] us; non-numeric input gives 1500."""
    try:
        num = float(value)
    except (TypeError, ValueError):
        return DEFAULT_PULSE_US
    if math.isnan(num):
        return DEFAULT_PULSE_US
    if math.isinf(num):
        return PULSE_MAX_US if num > 0 else PULSE_MIN_US
    # round half up
    return max(PULSE_MIN_US, min(PULSE_MAX_US, math.floor(num + 0.5)))


def clamp_fill(cal: float | None) -> float:
    """Progress-fill width in percent, always within [0, 100]."""
    if cal is None or math.isnan(cal):
        return 0.0
    return max(0.0, min(100.0, float(cal)))


def show(value: Any) -> str:
    """Render a status field for display; absent fields render as '-'."""
    return "-" if value is None else str(value)
