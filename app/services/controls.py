from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.common import elements as el

if TYPE_CHECKING:
    from app.common.focus import FocusGuard
    from app.common.surface import Surface
    from app.services.device_client import DeviceClient
    from app.state import UiState


class ControlActions:
    """Undebounced controls: angle slider, calibration and servo-limit buttons."""

    def __init__(
        self,
        client: DeviceClient,
        ui_state: UiState,
        surface: Surface,
        guard: FocusGuard,
    ) -> None:
        self.client = client
        self.ui_state = ui_state
        self.surface = surface
        self.guard = guard

    def set_angle(self, raw_angle: object) -> int | None:
        """Angle changes are low-frequency detents; send each one immediately."""
        try:
            angle = int(round(float(raw_angle)))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            logging.warning("Ignoring non-numeric angle %r", raw_angle)
            return None
        self.ui_state.angle = angle
        self.surface.set_text(el.ANGLE_TEXT, f"{angle} deg")
        self.client.set_angle(angle)
        logging.info("SET angle=%s", angle)
        return angle

    def calibrate(self, cmd: str) -> None:
        self.client.calibrate(cmd)
        logging.info("CALIBRATE %s", cmd.upper())

    def copy_pulse_to(self, element_id: str) -> bool:
        """Set min / Set max / Set zero: take the current pulse as the limit."""
        return self.guard.write_if_not_focused(element_id, self.ui_state.pulse)

    def servo_zero(self) -> None:
        self.client.servo_command("zero")
        logging.info("SERVO ZERO")

    def servo_reset(self) -> None:
        self.client.servo_command("reset")
        logging.info("SERVO RESET")

    def servo_save(self) -> None:
        min_us = self.surface.get_value(el.SERVO_MIN_INPUT)
        max_us = self.surface.get_value(el.SERVO_MAX_INPUT)
        zero_us = self.surface.get_value(el.SERVO_ZERO_INPUT)
        self.client.servo_save(min_us, max_us, zero_us)
        logging.info("SERVO SAVE min=%s max=%s zero=%s", min_us, max_us, zero_us)
