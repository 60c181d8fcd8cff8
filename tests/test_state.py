from __future__ import annotations

import pytest

from app.state import DeviceStatus, UiState


@pytest.mark.unit
def test_from_payload_maps_all_fields(status_payload):
    s = DeviceStatus.from_payload(status_payload)
    assert s.angle == 45
    assert s.raw == 1234
    assert s.cal == pytest.approx(12.3)
    assert (s.min, s.max) == (800, 3100)
    assert s.pulse == 1600
    assert (s.servo_min_us, s.servo_max_us, s.servo_zero_us) == (500, 2500, 1500)
    assert s.wifi is True
    assert s.ip == "192.168.4.1"
    assert s.clients == 1
    assert s.calibrating is False


@pytest.mark.unit
def test_from_payload_tolerates_missing_fields():
    s = DeviceStatus.from_payload({"angle": 10})
    assert s.angle == 10
    assert s.pulse is None
    assert s.wifi is None
    assert s.ip is None


@pytest.mark.unit
@pytest.mark.parametrize("body", [[1, 2], "status", 42, None])
def test_from_payload_rejects_non_object(body):
    with pytest.raises(ValueError):
        DeviceStatus.from_payload(body)


@pytest.mark.unit
@pytest.mark.parametrize(
    "field, value",
    [("cal", "n/a"), ("angle", "left"), ("wifi", "yes"), ("pulse", True)],
)
def test_from_payload_rejects_wrong_types(status_payload, field, value):
    status_payload[field] = value
    with pytest.raises(ValueError):
        DeviceStatus.from_payload(status_payload)


@pytest.mark.unit
def test_ui_state_defaults():
    state = UiState()
    assert state.angle == 90
    assert state.pulse == 1500


@pytest.mark.unit
@pytest.mark.parametrize(
    "field, value",
    [("angle", float("inf")), ("raw", float("-inf")), ("cal", float("nan")), ("angle", 45.9)],
)
def test_from_payload_rejects_non_finite_and_fractional(status_payload, field, value):
    status_payload[field] = value
    with pytest.raises(ValueError):
        DeviceStatus.from_payload(status_payload)


@pytest.mark.unit
def test_from_payload_accepts_integral_floats(status_payload):
    status_payload.update(angle=45.0, pulse=1600.0)
    s = DeviceStatus.from_payload(status_payload)
    assert s.angle == 45
    assert isinstance(s.angle, int)
    assert s.pulse == 1600
