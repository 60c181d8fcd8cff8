from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from nicegui import binding

from app.constants import DEFAULT_ANGLE_DEG, DEFAULT_PULSE_US


def _as_int(value: Any) -> int | None:
    """Integer fields accept ints and integral floats (45.0); 45.9 or 1e400 is malformed."""
    num = _as_float(value)
    if num is None:
        return None
    if not num.is_integer():
        raise ValueError(f"expected an integer, got {value!r}")
    return int(num)


def _as_float(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"expected a number, got {value!r}")
    num = float(value)
    if not math.isfinite(num):
        raise ValueError(f"expected a finite number, got {value!r}")
    return num


def _as_bool(value: Any) -> bool | None:
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ValueError(f"expected a boolean, got {value!r}")
    return value


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class DeviceStatus:
    """One /api/status snapshot. Absent fields stay None."""

    angle: int | None = None  # deg
    raw: int | None = None  # ADC counts
    cal: float | None = None  # percent 0-100
    min: int | None = None
    max: int | None = None
    pulse: int | None = None  # us
    servo_min_us: int | None = None
    servo_max_us: int | None = None
    servo_zero_us: int | None = None
    wifi: bool | None = None
    ip: str | None = None
    clients: int | None = None
    calibrating: bool | None = None

    @classmethod
    def from_payload(cls, data: Any) -> DeviceStatus:
        """Build a snapshot from decoded JSON.

        Raises ValueError (or TypeError) when the body is not an object or a
        present field cannot be coerced to its type.
        """
        if not isinstance(data, dict):
            raise ValueError(f"status payload must be an object, got {type(data).__name__}")
        return cls(
            angle=_as_int(data.get("angle")),
            raw=_as_int(data.get("raw")),
            cal=_as_float(data.get("cal")),
            min=_as_int(data.get("min")),
            max=_as_int(data.get("max")),
            pulse=_as_int(data.get("pulse")),
            servo_min_us=_as_int(data.get("servoMinUs")),
            servo_max_us=_as_int(data.get("servoMaxUs")),
            servo_zero_us=_as_int(data.get("servoZeroUs")),
            wifi=_as_bool(data.get("wifi")),
            ip=_as_str(data.get("ip")),
            clients=_as_int(data.get("clients")),
            calibrating=_as_bool(data.get("calibrating")),
        )


@binding.bindable_dataclass
class UiState:
    """Last known or intended control values for one page session."""

    angle: int = DEFAULT_ANGLE_DEG
    pulse: int = DEFAULT_PULSE_US  # always clamped to the pulse bounds
