from __future__ import annotations

import logging

import httpx
import pytest

from app.services.device_client import DeviceClient


def _client(handler) -> DeviceClient:
    return DeviceClient("http://device.test", transport=httpx.MockTransport(handler))


@pytest.mark.unit
async def test_fetch_status_decodes_body(status_payload):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/status"
        return httpx.Response(200, json=status_payload)

    client = _client(handler)
    status = await client.fetch_status()
    await client.aclose()

    assert status.pulse == 1600
    assert status.ip == "192.168.4.1"


@pytest.mark.unit
async def test_fetch_status_raises_on_http_error():
    client = _client(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(httpx.HTTPStatusError):
        await client.fetch_status()
    await client.aclose()


@pytest.mark.unit
async def test_fetch_status_raises_on_non_json():
    client = _client(lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(ValueError):
        await client.fetch_status()
    await client.aclose()


@pytest.mark.unit
async def test_commands_are_query_encoded():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="OK")

    client = _client(handler)
    client.set_angle(120)
    await client.drain()
    client.calibrate("start")
    await client.drain()
    client.servo_pulse(1750)
    await client.drain()
    client.servo_command("zero")
    await client.drain()
    client.servo_save("9999", 100, "abc")
    await client.drain()
    await client.aclose()

    assert [(r.method, r.url.path, dict(r.url.params)) for r in seen] == [
        ("GET", "/api/set", {"angle": "120"}),
        ("GET", "/api/calibrate", {"cmd": "start"}),
        ("GET", "/api/servo", {"pulse": "1750"}),
        ("GET", "/api/servo", {"cmd": "zero"}),
        ("GET", "/api/servo", {"cmd": "save", "min": "3000", "max": "300", "zero": "1500"}),
    ]


@pytest.mark.unit
async def test_send_returns_before_response():
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, text="OK")

    client = _client(handler)
    client.set_angle(10)
    # Nothing has run yet; the request is only scheduled
    assert seen == []
    await client.drain()
    assert seen == ["/api/set"]
    await client.aclose()


@pytest.mark.unit
async def test_command_failures_are_dropped(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    client = _client(handler)
    with caplog.at_level(logging.DEBUG):
        client.servo_pulse(1600)
        await client.drain()
    await client.aclose()

    assert "dropped" in caplog.text


@pytest.mark.unit
def test_servo_command_rejects_save_and_unknown():
    client = DeviceClient("http://device.test")
    with pytest.raises(ValueError):
        client.servo_command("save")
    with pytest.raises(ValueError):
        client.servo_command("spin")
