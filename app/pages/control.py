from __future__ import annotations

import logging
from functools import partial

from nicegui import ui

from app.common import elements as el
from app.common.focus import FocusGuard
from app.common.logging_config import attach_ui_log, detach_ui_log
from app.common.surface import NiceGuiSurface
from app.constants import (
    DEFAULT_ANGLE_DEG,
    DEFAULT_PULSE_US,
    PULSE_MAX_US,
    PULSE_MIN_US,
    STATUS_POLL_INTERVAL_S,
)
from app.services.controls import ControlActions
from app.services.debounce import CommandDebouncer
from app.services.device_client import DeviceClient
from app.services.status_sync import StatusSynchronizer
from app.state import UiState


class ControlPage:
    """Servo control page; one instance per connected browser tab."""

    def __init__(self, client: DeviceClient) -> None:
        self.client = client
        self.ui_state = UiState()
        self.surface = NiceGuiSurface()
        self.guard = FocusGuard(self.surface, self.surface.is_focused)
        self.synchronizer = StatusSynchronizer(
            client, self.ui_state, self.surface, self.guard
        )
        self.debouncer = CommandDebouncer(
            client, self.ui_state, self.surface, self.guard
        )
        self.actions = ControlActions(client, self.ui_state, self.surface, self.guard)

        self.poll_timer: ui.timer | None = None
        self.activity_log: ui.log | None = None

    def _label(self, element_id: str, text: str, classes: str = "text-sm") -> ui.label:
        return self.surface.register(element_id, ui.label(text).classes(classes))  # type: ignore[return-value]

    # ---- Event handlers ----

    def _on_angle_input(self, e) -> None:
        self.actions.set_angle(e.args)

    def _on_pulse_input(self, source: str, e) -> None:
        self.debouncer.submit_control_value(e.args, source=source)

    # ---- UI ----

    def _build_angle_card(self) -> None:
        with ui.card().classes("w-full"):
            with ui.row().classes("w-full items-center justify-between"):
                ui.label("Angle").classes("text-md font-medium")
                self._label(el.ANGLE_TEXT, f"{DEFAULT_ANGLE_DEG} deg", "text-2xl")
            angle_slider = ui.slider(min=0, max=180, step=1, value=DEFAULT_ANGLE_DEG)
            angle_slider.classes("w-full")
            self.surface.register(el.ANGLE_SLIDER, angle_slider)
            angle_slider.on("update:model-value", self._on_angle_input)

    def _build_sensor_card(self) -> None:
        with ui.card().classes("w-full"):
            with ui.row().classes("w-full items-center justify-between"):
                ui.label("Sensor").classes("text-md font-medium")
                self._label(el.CAL_STATE_TEXT, "Idle", "text-sm font-medium")
            with ui.row().classes("items-center gap-4"):
                self._label(el.RAW_TEXT, "raw: -")
                self._label(el.CAL_TEXT, "cal: -%")
                self._label(el.RANGE_TEXT, "min: - | max: -")
            with ui.element("div").classes("w-full h-3 rounded bg-grey-4"):
                fill = ui.element("div").classes("h-3 rounded bg-primary").style("width: 0%")
                self.surface.register(el.CAL_FILL, fill)
            with ui.row().classes("items-center gap-2 text-xs"):
                ui.label("min").classes("text-grey-7")
                self._label(el.MIN_TEXT, "-", "text-xs")
                ui.label("max").classes("text-grey-7")
                self._label(el.MAX_TEXT, "-", "text-xs")
            self._label(el.NOTICE_TEXT, "Calibration idle", "text-xs")
            with ui.row().classes("items-center gap-2"):
                ui.button("Start", on_click=partial(self.actions.calibrate, "start")).props(
                    "unelevated color=positive"
                )
                ui.button("Stop", on_click=partial(self.actions.calibrate, "stop")).props(
                    "unelevated color=warning"
                )
                ui.button("Reset", on_click=partial(self.actions.calibrate, "reset")).props(
                    "unelevated color=negative"
                )

    def _build_servo_card(self) -> None:
        with ui.card().classes("w-full"):
            with ui.row().classes("w-full items-center justify-between"):
                ui.label("Servo pulse").classes("text-md font-medium")
                self._label(el.PULSE_TEXT, f"{DEFAULT_PULSE_US} us", "text-2xl")
            with ui.row().classes("w-full items-center gap-4 no-wrap"):
                pulse_slider = ui.slider(
                    min=PULSE_MIN_US, max=PULSE_MAX_US, step=1, value=DEFAULT_PULSE_US
                ).classes("grow")
                self.surface.register(el.PULSE_SLIDER, pulse_slider)
                pulse_slider.on(
                    "update:model-value", partial(self._on_pulse_input, el.PULSE_SLIDER)
                )
                pulse_input = ui.number(
                    label="Pulse (us)",
                    value=DEFAULT_PULSE_US,
                    min=PULSE_MIN_US,
                    max=PULSE_MAX_US,
                    step=1,
                    format="%d",
                ).style("width: 120px")
                self.surface.register(el.PULSE_INPUT, pulse_input)
                pulse_input.on(
                    "update:model-value", partial(self._on_pulse_input, el.PULSE_INPUT)
                )

            ui.label("Limits").classes("text-sm mt-2")
            with ui.row().classes("items-center gap-2"):
                for element_id, label in (
                    (el.SERVO_MIN_INPUT, "Min (us)"),
                    (el.SERVO_MAX_INPUT, "Max (us)"),
                    (el.SERVO_ZERO_INPUT, "Zero (us)"),
                ):
                    field = ui.number(
                        label=label, min=PULSE_MIN_US, max=PULSE_MAX_US, step=1, format="%d"
                    ).style("width: 110px")
                    self.surface.register(element_id, field)
                self._label(el.SERVO_RANGE_TEXT, "range: -")
            with ui.row().classes("items-center gap-2"):
                ui.button(
                    "Set min", on_click=partial(self.actions.copy_pulse_to, el.SERVO_MIN_INPUT)
                ).props("unelevated")
                ui.button(
                    "Set max", on_click=partial(self.actions.copy_pulse_to, el.SERVO_MAX_INPUT)
                ).props("unelevated")
                ui.button(
                    "Set zero", on_click=partial(self.actions.copy_pulse_to, el.SERVO_ZERO_INPUT)
                ).props("unelevated")
            with ui.row().classes("items-center gap-2"):
                ui.button("Go to zero", on_click=self.actions.servo_zero).props(
                    "unelevated color=primary"
                )
                ui.button("Save", on_click=self.actions.servo_save).props(
                    "unelevated color=positive"
                )
                ui.button("Reset", on_click=self.actions.servo_reset).props(
                    "unelevated color=negative"
                )

    def _build_status_footer(self) -> None:
        with ui.footer().classes("justify-between items-center px-3 py-1"):
            with ui.row().classes("items-center gap-4"):
                self._label(el.WIFI_TEXT, "WiFi: OFF")
                ui.label("|").classes("text-sm")
                self._label(el.IP_TEXT, "IP: -")
                ui.label("|").classes("text-sm")
                self._label(el.CLIENTS_TEXT, "Clients: -")
            self._label(el.PULSE_STATUS_TEXT, "pulse: - us")

    def _build_log_card(self) -> None:
        with ui.card().classes("w-full"):
            ui.label("Activity").classes("text-md font-medium")
            self.activity_log = (
                ui.log(max_lines=200)
                .classes("w-full whitespace-pre-wrap break-words")
                .style("height: 160px")
            )
        attach_ui_log(self.activity_log)

    def close(self) -> None:
        """Drop the pending pulse command and stop mirroring logs into this page."""
        self.debouncer.debouncer.cancel_all()
        if self.poll_timer is not None:
            self.poll_timer.cancel()
        if self.activity_log is not None:
            detach_ui_log(self.activity_log)
        logging.debug("Control page closed")

    def build(self) -> None:
        with ui.column().classes("w-full max-w-3xl mx-auto gap-4 p-4"):
            self._build_angle_card()
            self._build_servo_card()
            self._build_sensor_card()
            self._build_log_card()
        self._build_status_footer()

        # Polls for the lifetime of the page; first tick fires immediately
        self.poll_timer = ui.timer(STATUS_POLL_INTERVAL_S, self.synchronizer.poll)
        ui.context.client.on_delete(self.close)
        logging.debug("Control page built (device=%s)", self.client.base_url)
