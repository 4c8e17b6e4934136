"""
Session Manager

Owns the Twinkly authentication token and keeps it valid:
- login + verify challenge exchange
- X-Auth-Token on every other request
- one re-authentication + retry when a request comes back 401
- at most one login in flight; concurrent callers await the same result

Login serialization:
    The first caller that needs a login creates a shared future and runs the
    exchange under the session lock. Callers arriving while it runs await
    that future instead of starting their own exchange. A caller whose
    request was sent with a token that has since been replaced skips login
    entirely and retries with the new token.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import secrets
from dataclasses import dataclass
from typing import Any, Dict, Optional

from hardware.twinkly.errors import (
    DeviceNotReadyError,
    ProtocolError,
    TransportError,
    UnauthorizedError,
    VENDOR_OK,
)
from hardware.twinkly.transport import IDeviceTransport
from models.device import DeviceInfo
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SESSION)

API_PREFIX = "/xled/v1"
LOGIN_PATH = f"{API_PREFIX}/login"
VERIFY_PATH = f"{API_PREFIX}/verify"
GESTALT_PATH = f"{API_PREFIX}/gestalt"

AUTH_HEADER = "X-Auth-Token"
CHALLENGE_BYTES = 256


@dataclass
class Session:
    """
    Authentication state for one device

    token: opaque token string as sent in X-Auth-Token
    token_bytes: base64-decoded token, embedded in every realtime UDP header
    info: device metadata from gestalt (None until fetched)
    """

    token: str = ""
    token_bytes: bytes = b""
    info: Optional[DeviceInfo] = None

    @property
    def authenticated(self) -> bool:
        return bool(self.token)


class SessionManager:
    """
    Authenticated request layer for one device

    Example:
        manager = SessionManager(DeviceTransport("192.168.1.113"))
        await manager.login_and_verify()
        info = await manager.get_device_info()
        mode = await manager.authorized_request("/xled/v1/led/mode", "GET")
    """

    def __init__(
        self,
        transport: IDeviceTransport,
        session: Optional[Session] = None,
        max_auth_retries: int = 1,
    ):
        """
        Args:
            transport: HTTP transport bound to the device
            session: Existing session to reuse (a fresh one by default)
            max_auth_retries: Re-authentications allowed per request
        """
        self.transport = transport
        self.session = session or Session()
        self.max_auth_retries = max(0, max_auth_retries)

        self._login_lock = asyncio.Lock()
        self._login_future: Optional[asyncio.Future] = None

        self.login_exchanges = 0

    # ------------------------------------------------------------------
    # Login
    # ------------------------------------------------------------------

    async def login_and_verify(self) -> bool:
        """
        Run the login/verify exchange, or join the one already running.

        Returns:
            True if the session now holds a verified token. Failures are
            logged and leave the previous token in place.
        """
        pending = self._login_future
        if pending is not None and not pending.done():
            log.debug("Login already in progress, waiting for its result")
            return await asyncio.shield(pending)

        future = asyncio.get_running_loop().create_future()
        self._login_future = future
        result = False
        try:
            async with self._login_lock:
                result = await self._login_exchange()
        finally:
            if not future.done():
                future.set_result(result)
        return result

    async def reauthenticate(self, stale_token: str) -> bool:
        """
        Re-authenticate after a 401 received for a request sent with `stale_token`.

        If another caller already replaced the token, nothing is sent.
        """
        if self.session.token and self.session.token != stale_token:
            log.debug("Token already refreshed by another request")
            return True
        return await self.login_and_verify()

    async def _login_exchange(self) -> bool:
        self.login_exchanges += 1
        challenge = secrets.token_hex(CHALLENGE_BYTES)

        try:
            login = await self.transport.request("POST", LOGIN_PATH, json={"challenge": challenge})
            login.raise_for_status(LOGIN_PATH)
        except TransportError as e:
            log.error("Failed to login", error=str(e))
            return False

        if not isinstance(login.data, dict):
            log.error("Login response is not a JSON object")
            return False
        self._log_vendor_code(LOGIN_PATH, login.data)

        token = login.data.get("authentication_token")
        if not token:
            log.error("Login response has no authentication_token")
            return False

        try:
            token_bytes = base64.b64decode(token, validate=True)
        except (binascii.Error, ValueError) as e:
            log.error("Authentication token is not valid base64", error=str(e))
            return False

        try:
            verify = await self.transport.request(
                "POST",
                VERIFY_PATH,
                json={"challenge-response": login.data.get("challenge-response")},
                headers={AUTH_HEADER: token},
            )
            verify.raise_for_status(VERIFY_PATH)
        except TransportError as e:
            log.error("Failed to verify", error=str(e))
            return False
        self._log_vendor_code(VERIFY_PATH, verify.data)

        self.session.token = token
        self.session.token_bytes = token_bytes
        log.info("Logged in", token_bytes=len(token_bytes))
        return True

    # ------------------------------------------------------------------
    # Authorized requests
    # ------------------------------------------------------------------

    async def authorized_request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        *,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
        _attempt: int = 0,
    ) -> Optional[Any]:
        """
        Send a request with the current token attached.

        On 401 the session re-authenticates and the request is retried, at
        most `max_auth_retries` times. Transport and HTTP failures are logged.

        Returns:
            Decoded JSON body ({} for an empty body), or None on failure
        """
        pending = self._login_future
        if pending is not None and not pending.done():
            await asyncio.shield(pending)

        token = self.session.token
        request_headers = dict(headers or {})
        request_headers[AUTH_HEADER] = token

        try:
            response = await self.transport.request(
                method, path, json=body, content=content, headers=request_headers
            )
            response.raise_for_status(path)
        except UnauthorizedError:
            if _attempt >= self.max_auth_retries:
                log.error(f"Failed 401: {path}", detail="still unauthorized after re-authentication")
                return None
            log.debug(f"Unauthorized: {path}, re-authenticating")
            await self.reauthenticate(stale_token=token)
            return await self.authorized_request(
                path, method, body, content=content, headers=headers, _attempt=_attempt + 1
            )
        except TransportError as e:
            log.error(f"Failed: {path}", error=str(e))
            return None

        self._log_vendor_code(path, response.data)
        return response.data if response.data is not None else {}

    # ------------------------------------------------------------------
    # Device metadata
    # ------------------------------------------------------------------

    async def get_device_info(self) -> Optional[DeviceInfo]:
        """Fetch gestalt and store it on the session. Safe to call repeatedly."""
        data = await self.authorized_request(GESTALT_PATH, "GET")
        if not data:
            return None

        try:
            info = DeviceInfo.from_gestalt(data)
        except (KeyError, TypeError, ValueError) as e:
            log.error("Malformed gestalt response", error=str(e))
            return None

        self.session.info = info
        log.info(
            "Device info",
            leds=info.number_of_leds,
            bytes_per_led=info.bytes_per_led,
            frame_rate=info.frame_rate,
        )
        return info

    def require_info(self) -> DeviceInfo:
        if self.session.info is None:
            raise DeviceNotReadyError("Device info not loaded - call init() first")
        return self.session.info

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def check_vendor_code(path: str, data: Any) -> None:
        """
        Raises:
            ProtocolError: body carries a vendor code other than 1000
        """
        if not isinstance(data, dict) or "code" not in data:
            return
        code = data["code"]
        if code != VENDOR_OK:
            raise ProtocolError(code, path)

    @classmethod
    def _log_vendor_code(cls, path: str, data: Any) -> None:
        # Vendor codes are informational; the response is still used
        try:
            cls.check_vendor_code(path, data)
        except ProtocolError as e:
            log.warn(f"Device returned error code {e}", code=e.code)
