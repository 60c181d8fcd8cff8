from __future__ import annotations

import json

import httpx
import pytest

from app.common import elements as el
from app.services.status_sync import StatusSynchronizer


@pytest.fixture
def sync(recorder, ui_state, surface, guard) -> StatusSynchronizer:
    return StatusSynchronizer(recorder, ui_state, surface, guard)


@pytest.mark.unit
async def test_poll_projects_every_field(sync, recorder, surface, ui_state, status_payload):
    recorder.responses.append(status_payload)

    status = await sync.poll()

    assert status is not None
    assert surface.texts[el.ANGLE_TEXT] == "45 deg"
    assert surface.values[el.ANGLE_SLIDER] == 45
    assert surface.texts[el.RAW_TEXT] == "raw: 1234"
    assert surface.texts[el.CAL_TEXT] == "cal: 12.3%"
    assert surface.texts[el.MIN_TEXT] == "800"
    assert surface.texts[el.MAX_TEXT] == "3100"
    assert surface.texts[el.RANGE_TEXT] == "min: 800 | max: 3100"
    assert surface.texts[el.PULSE_STATUS_TEXT] == "pulse: 1600 us"
    assert surface.texts[el.PULSE_TEXT] == "1600 us"
    assert surface.values[el.PULSE_SLIDER] == 1600
    assert surface.values[el.PULSE_INPUT] == 1600
    assert surface.texts[el.WIFI_TEXT] == "WiFi: ON"
    assert surface.texts[el.IP_TEXT] == "IP: 192.168.4.1"
    assert surface.texts[el.CLIENTS_TEXT] == "Clients: 1"
    assert surface.values[el.SERVO_MIN_INPUT] == 500
    assert surface.values[el.SERVO_MAX_INPUT] == 2500
    assert surface.values[el.SERVO_ZERO_INPUT] == 1500
    assert surface.texts[el.SERVO_RANGE_TEXT] == "range: 500-2500"
    assert surface.widths[el.CAL_FILL] == pytest.approx(12.3)
    assert surface.texts[el.CAL_STATE_TEXT] == "Idle"
    assert surface.texts[el.NOTICE_TEXT] == "Calibration idle"
    assert ui_state.angle == 45
    assert ui_state.pulse == 1600
    # Polling never issues commands
    assert recorder.sent == []


@pytest.mark.unit
async def test_focused_pulse_field_is_left_alone(sync, recorder, surface, status_payload):
    surface.values[el.PULSE_INPUT] = 1234
    surface.focused.add(el.PULSE_INPUT)
    recorder.responses.append(status_payload)

    await sync.poll()

    assert surface.texts[el.PULSE_TEXT] == "1600 us"
    assert surface.values[el.PULSE_INPUT] == 1234
    assert surface.values[el.PULSE_SLIDER] == 1600
    assert surface.texts[el.CAL_STATE_TEXT] == "Idle"


@pytest.mark.unit
async def test_next_poll_after_blur_updates_field(sync, recorder, surface, status_payload):
    surface.values[el.SERVO_MIN_INPUT] = 700
    surface.focused.add(el.SERVO_MIN_INPUT)
    recorder.responses.append(status_payload)
    await sync.poll()
    assert surface.values[el.SERVO_MIN_INPUT] == 700

    surface.focused.clear()
    recorder.responses.append(dict(status_payload, servoMinUs=650))
    await sync.poll()

    assert surface.values[el.SERVO_MIN_INPUT] == 650


@pytest.mark.unit
async def test_focused_angle_slider_is_left_alone(sync, recorder, surface, ui_state, status_payload):
    surface.values[el.ANGLE_SLIDER] = 120
    surface.focused.add(el.ANGLE_SLIDER)
    recorder.responses.append(status_payload)

    await sync.poll()

    assert surface.values[el.ANGLE_SLIDER] == 120
    assert surface.texts[el.ANGLE_TEXT] == "45 deg"
    assert ui_state.angle == 45


@pytest.mark.unit
async def test_failed_poll_only_turns_wifi_off(sync, recorder, surface, status_payload):
    recorder.responses.append(status_payload)
    await sync.poll()
    texts_before = dict(surface.texts)
    values_before = dict(surface.values)

    recorder.responses.append(httpx.ConnectError("network down"))
    result = await sync.poll()

    assert result is None
    assert surface.texts[el.WIFI_TEXT] == "WiFi: OFF"
    texts_before.pop(el.WIFI_TEXT)
    assert {k: v for k, v in surface.texts.items() if k != el.WIFI_TEXT} == texts_before
    assert surface.values == values_before


@pytest.mark.unit
@pytest.mark.parametrize(
    "body",
    [
        ["not", "an", "object"],
        {"angle": 45, "cal": "n/a"},
        json.loads('{"angle": 1e400, "wifi": true}'),
        json.loads('{"cal": NaN, "wifi": true}'),
        {"angle": 45.9, "wifi": True},
    ],
    ids=["list", "text-cal", "huge-angle", "nan-cal", "fractional-angle"],
)
async def test_malformed_payload_takes_failure_path(sync, recorder, surface, body):
    surface.texts[el.RAW_TEXT] = "raw: 99"
    recorder.responses.append(body)

    assert await sync.poll() is None
    assert surface.texts[el.WIFI_TEXT] == "WiFi: OFF"
    assert surface.texts[el.RAW_TEXT] == "raw: 99"


@pytest.mark.unit
async def test_poll_recovers_after_failure(sync, recorder, surface, status_payload):
    recorder.responses.append(httpx.ReadTimeout("slow"))
    recorder.responses.append(status_payload)

    await sync.poll()
    assert surface.texts[el.WIFI_TEXT] == "WiFi: OFF"
    await sync.poll()
    assert surface.texts[el.WIFI_TEXT] == "WiFi: ON"


@pytest.mark.unit
async def test_calibrating_labels(sync, recorder, surface, status_payload):
    recorder.responses.append(dict(status_payload, calibrating=True))

    await sync.poll()

    assert surface.texts[el.CAL_STATE_TEXT] == "Calibrating"
    assert surface.texts[el.NOTICE_TEXT] == "Calibration running"


@pytest.mark.unit
@pytest.mark.parametrize("cal, width", [(-50, 0.0), (0, 0.0), (37.2, 37.2), (100, 100.0), (150, 100.0)])
async def test_fill_width_is_clamped(sync, recorder, surface, status_payload, cal, width):
    recorder.responses.append(dict(status_payload, cal=cal))

    await sync.poll()

    assert 0.0 <= surface.widths[el.CAL_FILL] <= 100.0
    assert surface.widths[el.CAL_FILL] == pytest.approx(width)


@pytest.mark.unit
async def test_wifi_off_reported_by_device(sync, recorder, surface, status_payload):
    recorder.responses.append(dict(status_payload, wifi=False))

    await sync.poll()

    assert surface.texts[el.WIFI_TEXT] == "WiFi: OFF"


@pytest.mark.unit
async def test_missing_fields_render_placeholders(sync, recorder, surface, ui_state):
    surface.values[el.PULSE_SLIDER] = 1400
    recorder.responses.append({"angle": 30, "wifi": True})

    await sync.poll()

    assert surface.texts[el.ANGLE_TEXT] == "30 deg"
    assert surface.texts[el.RAW_TEXT] == "raw: -"
    assert surface.texts[el.CAL_TEXT] == "cal: -%"
    assert surface.texts[el.RANGE_TEXT] == "min: - | max: -"
    assert surface.texts[el.IP_TEXT] == "IP: -"
    assert surface.texts[el.SERVO_RANGE_TEXT] == "range: ---"
    assert surface.widths[el.CAL_FILL] == 0.0
    # No pulse in the snapshot: the pulse controls keep their values
    assert surface.values[el.PULSE_SLIDER] == 1400
    assert ui_state.pulse == 1500
    assert el.PULSE_TEXT not in surface.texts


@pytest.mark.unit
async def test_server_pulse_overrides_client_prediction(
    sync, recorder, surface, ui_state, pulse_debouncer, scheduler, status_payload
):
    """A zero command moves the servo server-side; the next poll brings the UI along."""
    pulse_debouncer.submit_control_value(2400, source=el.PULSE_SLIDER)
    scheduler.advance(0.12)
    assert ui_state.pulse == 2400

    recorder.responses.append(dict(status_payload, pulse=1500))
    await sync.poll()

    assert ui_state.pulse == 1500
    assert surface.texts[el.PULSE_TEXT] == "1500 us"
    assert surface.values[el.PULSE_SLIDER] == 1500
