from __future__ import annotations

import logging
import os

# Device target (what the UI polls and commands)
DEVICE_URL: str = os.getenv("SERVO_DEVICE_URL", "http://192.168.4.1").rstrip("/")
REQUEST_TIMEOUT_S: float = float(os.getenv("SERVO_REQUEST_TIMEOUT_S", "0.6"))
SIMULATE: bool = os.getenv("SERVO_SIMULATE", "0") in (
    "1",
    "true",
    "True",
    "yes",
    "YES",
)
# Webserver bind (NiceGUI host/port)
SERVER_HOST: str = os.getenv("SERVO_SERVER_IP", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("SERVO_SERVER_PORT", "8080"))

# Status poll cadence and pulse debounce quiet period
STATUS_POLL_INTERVAL_S: float = 0.7
PULSE_DEBOUNCE_S: float = 0.12

# Servo pulse bounds (microseconds)
PULSE_MIN_US: int = 300
PULSE_MAX_US: int = 3000
DEFAULT_PULSE_US: int = 1500
DEFAULT_ANGLE_DEG: int = 90

CALIBRATE_COMMANDS = ("start", "stop", "reset")
SERVO_COMMANDS = ("zero", "save", "reset")


def _resolve_log_level() -> int:
    s = os.getenv("SERVO_LOG_LEVEL")
    if s:
        name = s.strip().upper()
        mapping = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL,
        }
        return mapping.get(name, logging.WARNING)
    else:
        return logging.WARNING


LOG_LEVEL: int = _resolve_log_level()
