"""
In-memory stand-ins for a Twinkly device

FakeDeviceTransport answers the xled HTTP API the way a device does:
login hands out the current token, every other endpoint answers 401 unless
X-Auth-Token matches it.
"""

import asyncio
import base64
from typing import Any, Dict, List, Optional, Set

from hardware.twinkly.session import AUTH_HEADER
from hardware.twinkly.transport import TransportResponse

PREFIX = "/xled/v1"


def make_token(n: int) -> str:
    return base64.b64encode(f"token-{n:04d}".encode()).decode()


class FakeDeviceTransport:

    def __init__(
        self,
        number_of_leds: int = 10,
        bytes_per_led: int = 3,
        frame_rate: float = 25.0,
        mode: str = "movie",
    ):
        self.gestalt = {
            "product_name": "Twinkly",
            "number_of_led": number_of_leds,
            "bytes_per_led": bytes_per_led,
            "frame_rate": frame_rate,
            "code": 1000,
        }
        self.mode = mode
        self.brightness: Optional[int] = None
        self.movies: List[Dict[str, Any]] = []
        self.uploads: List[bytes] = []
        self.upload_headers: List[Dict[str, str]] = []
        self.current_movie: Optional[int] = None

        self._generation = 1
        self.valid_token = make_token(self._generation)
        self.login_token: Optional[str] = None  # override what login hands out
        self.fail_login = False
        self.always_unauthorized: Set[str] = set()

        self.login_count = 0
        self.requests: List[tuple] = []
        self.delay = 0.0
        self.closed = False

    def expire_token(self) -> None:
        self._generation += 1
        self.valid_token = make_token(self._generation)

    def count(self, method: str, path: str) -> int:
        return sum(1 for m, p, *_ in self.requests if m == method and p == path)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> TransportResponse:
        headers = headers or {}
        self.requests.append((method, path, json, headers))
        await asyncio.sleep(self.delay)

        if path == f"{PREFIX}/login":
            self.login_count += 1
            if self.fail_login:
                return TransportResponse(503)
            return TransportResponse(200, {
                "authentication_token": self.login_token or self.valid_token,
                "authentication_token_expires_in": 14400,
                "challenge-response": "5a5a",
                "code": 1000,
            })

        if headers.get(AUTH_HEADER) != self.valid_token or path in self.always_unauthorized:
            return TransportResponse(401)

        if path == f"{PREFIX}/verify":
            return TransportResponse(200, {"code": 1000})
        if path == f"{PREFIX}/gestalt":
            return TransportResponse(200, dict(self.gestalt))

        if path == f"{PREFIX}/led/mode":
            if method == "GET":
                return TransportResponse(200, {"mode": self.mode, "code": 1000})
            self.mode = json["mode"]
            return TransportResponse(200, {"code": 1000})

        if path == f"{PREFIX}/led/out/brightness":
            self.brightness = json["value"]
            return TransportResponse(200, {"code": 1000})

        if path == f"{PREFIX}/movies" and method == "DELETE":
            self.movies.clear()
            return TransportResponse(200, {"code": 1000})
        if path == f"{PREFIX}/movies/new":
            self.movies.append(dict(json))
            return TransportResponse(200, {"id": len(self.movies) - 1, "code": 1000})
        if path == f"{PREFIX}/movies/full":
            self.uploads.append(content)
            self.upload_headers.append(headers)
            return TransportResponse(200, {"frames_number": self.movies[-1]["frames_number"], "code": 1000})
        if path == f"{PREFIX}/movies/current":
            self.current_movie = json["id"]
            return TransportResponse(200, {"code": 1000})

        return TransportResponse(404)

    async def aclose(self) -> None:
        self.closed = True


class FakeClock:
    """Manually advanced clock; callable like time.monotonic"""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, amount: float) -> None:
        self.now += amount
