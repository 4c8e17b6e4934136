import json

import httpx
import pytest

from hardware.twinkly.errors import TransportError, UnauthorizedError
from hardware.twinkly.transport import DeviceTransport, TransportResponse


def make_transport(handler):
    client = httpx.AsyncClient(base_url="http://10.0.0.2", transport=httpx.MockTransport(handler))
    return DeviceTransport("10.0.0.2", client=client)


@pytest.mark.asyncio
async def test_json_body_decoded_and_headers_sent():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["token"] = request.headers.get("X-Auth-Token")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"code": 1000, "mode": "rt"})

    transport = make_transport(handler)
    res = await transport.request(
        "POST", "/xled/v1/led/mode", json={"mode": "rt"}, headers={"X-Auth-Token": "abc"}
    )
    await transport.aclose()

    assert res.ok
    assert res.data == {"code": 1000, "mode": "rt"}
    assert seen == {"url": "http://10.0.0.2/xled/v1/led/mode", "token": "abc", "body": {"mode": "rt"}}


@pytest.mark.asyncio
async def test_raw_content_upload():
    seen = {}

    def handler(request: httpx.Request):
        seen["content"] = request.content
        seen["type"] = request.headers.get("Content-Type")
        return httpx.Response(200, json={"code": 1000})

    transport = make_transport(handler)
    await transport.request(
        "POST", "/xled/v1/movies/full", content=b"\x01\x02",
        headers={"Content-Type": "application/octet-stream"},
    )
    assert seen == {"content": b"\x01\x02", "type": "application/octet-stream"}


@pytest.mark.asyncio
async def test_empty_and_non_json_bodies_give_none():
    bodies = iter([b"", b"<html>nope</html>"])
    transport = make_transport(lambda request: httpx.Response(200, content=next(bodies)))

    assert (await transport.request("GET", "/a")).data is None
    assert (await transport.request("GET", "/b")).data is None


@pytest.mark.asyncio
async def test_status_returned_not_raised():
    transport = make_transport(lambda request: httpx.Response(401))
    res = await transport.request("GET", "/xled/v1/gestalt")
    assert res.status_code == 401
    assert res.unauthorized


@pytest.mark.asyncio
async def test_connection_failure_raises_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    transport = make_transport(handler)
    with pytest.raises(TransportError, match="ConnectError"):
        await transport.request("GET", "/xled/v1/gestalt")


def test_raise_for_status():
    TransportResponse(200).raise_for_status("/ok")
    with pytest.raises(UnauthorizedError) as exc:
        TransportResponse(401).raise_for_status("/xled/v1/led/mode")
    assert exc.value.path == "/xled/v1/led/mode"
    with pytest.raises(TransportError) as exc:
        TransportResponse(500).raise_for_status("/x")
    assert exc.value.status_code == 500
    assert not isinstance(exc.value, UnauthorizedError)
