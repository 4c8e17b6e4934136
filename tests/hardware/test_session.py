import asyncio
import base64

import pytest

from fakes import FakeDeviceTransport
from hardware.twinkly.errors import DeviceNotReadyError, ProtocolError
from hardware.twinkly.session import AUTH_HEADER, SessionManager

MODE = "/xled/v1/led/mode"


@pytest.fixture
def manager(device):
    return SessionManager(device)


@pytest.mark.asyncio
async def test_login_stores_token_and_raw_bytes(manager, device):
    assert await manager.login_and_verify()

    assert manager.session.token == device.valid_token
    assert manager.session.token_bytes == base64.b64decode(device.valid_token)
    assert manager.session.authenticated
    verify = [r for r in device.requests if r[1].endswith("/verify")][0]
    assert verify[2] == {"challenge-response": "5a5a"}
    assert verify[3][AUTH_HEADER] == device.valid_token


@pytest.mark.asyncio
async def test_challenge_is_random_hex(manager, device):
    await manager.login_and_verify()
    await manager.login_and_verify()
    challenges = [r[2]["challenge"] for r in device.requests if r[1].endswith("/login")]
    assert len(challenges) == 2
    assert challenges[0] != challenges[1]
    assert len(bytes.fromhex(challenges[0])) == 256


@pytest.mark.asyncio
async def test_unauthenticated_request_logs_in_and_retries(manager, device):
    data = await manager.authorized_request(MODE, "GET")

    assert data["mode"] == "movie"
    assert device.login_count == 1
    assert device.count("GET", MODE) == 2


@pytest.mark.asyncio
async def test_expired_token_refreshed_once(manager, device):
    await manager.login_and_verify()
    device.expire_token()

    data = await manager.authorized_request(MODE, "POST", {"mode": "rt"})

    assert data == {"code": 1000}
    assert device.mode == "rt"
    assert device.login_count == 2
    assert manager.session.token == device.valid_token


@pytest.mark.asyncio
async def test_persistent_401_gives_up_after_one_retry(manager, device):
    await manager.login_and_verify()
    device.always_unauthorized.add(MODE)

    assert await manager.authorized_request(MODE, "GET") is None
    assert device.count("GET", MODE) == 2
    assert device.login_count == 2


@pytest.mark.asyncio
async def test_retry_count_is_configurable(device):
    manager = SessionManager(device, max_auth_retries=0)
    await manager.login_and_verify()
    device.expire_token()

    assert await manager.authorized_request(MODE, "GET") is None
    assert device.login_count == 1


@pytest.mark.asyncio
async def test_concurrent_401s_share_one_login(manager, device):
    await manager.login_and_verify()
    device.expire_token()

    results = await asyncio.gather(*(manager.authorized_request(MODE, "GET") for _ in range(5)))

    assert all(r is not None for r in results)
    assert device.login_count == 2


@pytest.mark.asyncio
async def test_concurrent_login_calls_join_in_flight_exchange(manager, device):
    device.delay = 0.01
    results = await asyncio.gather(*(manager.login_and_verify() for _ in range(3)))
    assert results == [True, True, True]
    assert device.login_count == 1


@pytest.mark.asyncio
async def test_failed_login_keeps_previous_token(manager, device):
    await manager.login_and_verify()
    token = manager.session.token
    device.fail_login = True

    assert await manager.login_and_verify() is False
    assert manager.session.token == token


@pytest.mark.asyncio
async def test_invalid_base64_token_rejected(manager, device):
    device.login_token = "not*base64!"
    assert await manager.login_and_verify() is False
    assert not manager.session.authenticated
    assert device.count("POST", "/xled/v1/verify") == 0


@pytest.mark.asyncio
async def test_failed_verify_does_not_commit_token(manager, device):
    device.login_token = "c3RhbGUtdG9rZW4="
    assert await manager.login_and_verify() is False
    assert manager.session.token == ""


@pytest.mark.asyncio
async def test_http_error_returns_none(manager, device):
    await manager.login_and_verify()
    assert await manager.authorized_request("/xled/v1/unknown", "GET") is None


@pytest.mark.asyncio
async def test_get_device_info(manager, device):
    info = await manager.get_device_info()
    assert info.number_of_leds == 10
    assert manager.require_info() is info


@pytest.mark.asyncio
async def test_vendor_error_code_is_not_fatal(manager, device):
    device.gestalt["code"] = 1105
    info = await manager.get_device_info()
    assert info is not None


@pytest.mark.asyncio
async def test_malformed_gestalt(manager, device):
    del device.gestalt["bytes_per_led"]
    assert await manager.get_device_info() is None
    with pytest.raises(DeviceNotReadyError):
        manager.require_info()


def test_check_vendor_code():
    SessionManager.check_vendor_code("/x", {"code": 1000})
    SessionManager.check_vendor_code("/x", {"mode": "rt"})
    SessionManager.check_vendor_code("/x", None)
    with pytest.raises(ProtocolError) as exc:
        SessionManager.check_vendor_code("/xled/v1/led/mode", {"code": 1104})
    assert exc.value.code == 1104
    assert "malformed JSON" in str(exc.value)
