from __future__ import annotations

import logging
import math
import time
from typing import TYPE_CHECKING

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from app.common.values import clamp_pulse
from app.constants import DEFAULT_ANGLE_DEG, DEFAULT_PULSE_US

if TYPE_CHECKING:
    from collections.abc import Callable

ADC_MAX = 4095
SERVO_MIN_US = 500  # pulse at 0 deg
SERVO_MAX_US = 2500  # pulse at 180 deg


def _sine_sensor() -> int:
    """Slow sweep over the ADC range, period ~19 s."""
    return int(round((math.sin(time.monotonic() / 3.0) + 1.0) * ADC_MAX / 2.0))


class SimulatedDevice:
    """In-process stand-in for the servo unit, for running the UI without hardware."""

    def __init__(self, sensor: Callable[[], int] | None = None, ip: str = "127.0.0.1") -> None:
        self.sensor = sensor or _sine_sensor
        self.ip = ip
        self.clients = 0
        self.calibrating = False
        self.cal_min = ADC_MAX
        self.cal_max = 0
        self.servo_min_us = SERVO_MIN_US
        self.servo_max_us = SERVO_MAX_US
        self.servo_zero_us = DEFAULT_PULSE_US
        self.angle = DEFAULT_ANGLE_DEG
        self.pulse = self.angle_to_pulse(self.angle)

    def angle_to_pulse(self, angle: int) -> int:
        angle = max(0, min(180, angle))
        return self.servo_min_us + (self.servo_max_us - self.servo_min_us) * angle // 180

    def calibrated_percent(self, raw: int) -> float:
        if self.cal_max <= self.cal_min:
            return 0.0
        v = (raw - self.cal_min) / (self.cal_max - self.cal_min)
        return max(0.0, min(1.0, v)) * 100.0

    def status(self) -> dict:
        raw = max(0, min(ADC_MAX, int(self.sensor())))
        if self.calibrating:
            self.cal_min = min(self.cal_min, raw)
            self.cal_max = max(self.cal_max, raw)
        return {
            "angle": self.angle,
            "raw": raw,
            "cal": round(self.calibrated_percent(raw), 1),
            "min": self.cal_min,
            "max": self.cal_max,
            "calibrating": self.calibrating,
            "wifi": True,
            "clients": self.clients,
            "ip": self.ip,
            "pulse": self.pulse,
            "servoMinUs": self.servo_min_us,
            "servoMaxUs": self.servo_max_us,
            "servoZeroUs": self.servo_zero_us,
        }

    def set_angle(self, angle: int) -> None:
        self.angle = max(0, min(180, angle))
        self.pulse = self.angle_to_pulse(self.angle)

    def calibrate(self, cmd: str) -> None:
        cmd = cmd.lower()
        if cmd == "start":
            self.calibrating = True
            self.cal_min, self.cal_max = ADC_MAX, 0
        elif cmd == "stop":
            self.calibrating = False
        elif cmd == "reset":
            self.calibrating = False
            self.cal_min, self.cal_max = ADC_MAX, 0

    def set_pulse(self, pulse: int) -> None:
        self.pulse = clamp_pulse(pulse)

    def servo(self, cmd: str, min_us: int | None, max_us: int | None, zero_us: int | None) -> None:
        cmd = cmd.lower()
        if cmd == "zero":
            self.pulse = self.servo_zero_us
        elif cmd == "save":
            if min_us is not None:
                self.servo_min_us = clamp_pulse(min_us)
            if max_us is not None:
                self.servo_max_us = clamp_pulse(max_us)
            if zero_us is not None:
                self.servo_zero_us = clamp_pulse(zero_us)
        elif cmd == "reset":
            self.servo_min_us = SERVO_MIN_US
            self.servo_max_us = SERVO_MAX_US
            self.servo_zero_us = DEFAULT_PULSE_US


def build_router(device: SimulatedDevice) -> APIRouter:
    """Routes mirroring the device's /api endpoints."""
    router = APIRouter(prefix="/api")

    @router.get("/status")
    def status() -> dict:
        return device.status()

    @router.get("/set", response_class=PlainTextResponse)
    def set_angle(angle: int | None = None):
        if angle is None:
            return PlainTextResponse("Missing angle", status_code=400)
        device.set_angle(angle)
        logging.debug("SIM angle=%s pulse=%s", device.angle, device.pulse)
        return "OK"

    @router.get("/calibrate", response_class=PlainTextResponse)
    def calibrate(cmd: str | None = None):
        if cmd is None:
            return PlainTextResponse("Missing cmd", status_code=400)
        device.calibrate(cmd)
        logging.debug("SIM calibrate %s", cmd)
        return "OK"

    @router.get("/servo", response_class=PlainTextResponse)
    def servo(
        pulse: int | None = None,
        cmd: str | None = None,
        min: int | None = None,  # noqa: A002
        max: int | None = None,  # noqa: A002
        zero: int | None = None,
    ):
        if pulse is not None:
            device.set_pulse(pulse)
        elif cmd is not None:
            device.servo(cmd, min, max, zero)
        else:
            return PlainTextResponse("Missing cmd", status_code=400)
        logging.debug("SIM servo pulse=%s cmd=%s", pulse, cmd)
        return "OK"

    return router
