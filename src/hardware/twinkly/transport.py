"""
HTTP transport for the Twinkly control API

Thin wrapper around httpx.AsyncClient. Returns status + decoded JSON body and
leaves status interpretation (401 handling, vendor codes) to SessionManager.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

import httpx

from hardware.twinkly.errors import TransportError, UnauthorizedError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SESSION)


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    data: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def unauthorized(self) -> bool:
        return self.status_code == 401

    def raise_for_status(self, path: str) -> None:
        """
        Raises:
            UnauthorizedError: 401
            TransportError: any other non-2xx status
        """
        if self.unauthorized:
            raise UnauthorizedError(path)
        if not self.ok:
            raise TransportError(f"Failed {self.status_code}: {path}", status_code=self.status_code)


class IDeviceTransport(Protocol):
    """Minimal contract SessionManager needs from an HTTP transport."""

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> TransportResponse:
        """Raises TransportError when no response was received."""
        ...

    async def aclose(self) -> None:
        ...


class DeviceTransport:
    """
    httpx-backed transport bound to one device IP

    Example:
        transport = DeviceTransport("192.168.1.113")
        res = await transport.request("GET", "/xled/v1/gestalt")
        print(res.status_code, res.data)
    """

    def __init__(
        self,
        ip: str,
        timeout_s: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            ip: Device IP address (no scheme)
            timeout_s: Per-request timeout
            client: Preconfigured AsyncClient (tests pass one with MockTransport)
        """
        self.base_url = f"http://{ip}"
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout_s)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> TransportResponse:
        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                content=content,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {type(e).__name__}: {e}") from e

        data = None
        if response.content:
            try:
                data = response.json()
            except ValueError:
                log.debug("Non-JSON response body", path=path, status=response.status_code)

        return TransportResponse(status_code=response.status_code, data=data)

    async def aclose(self) -> None:
        await self._client.aclose()
