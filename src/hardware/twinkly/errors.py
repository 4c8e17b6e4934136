"""
Twinkly error types and vendor error codes

Transport and protocol errors are absorbed at the session/realtime boundary
and logged. ConfigurationError signals a programming or config mistake and
is raised to the caller.
"""

from typing import Optional

# https://xled-docs.readthedocs.io/en/latest/rest_api.html
VENDOR_OK = 1000

VENDOR_ERROR_CODES = {
    1000: "OK",
    1001: "Error",
    1101: "Invalid argument value",
    1102: "Error",
    1103: "Error - value too long? Or missing required object key?",
    1104: "Error - malformed JSON on input?",
    1105: "Invalid argument key",
    1107: "Ok?",
    1108: "Ok?",
    1205: "Error with firmware upgrade - SHA1SUM does not match",
}


def describe_code(code: int) -> str:
    return VENDOR_ERROR_CODES.get(code, "Unknown error code")


class TwinklyError(Exception):
    """Base class for device communication errors"""


class TransportError(TwinklyError):
    """HTTP request could not be completed (connection, timeout, bad status)"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UnauthorizedError(TransportError):
    """Device answered 401 - token missing or expired"""

    def __init__(self, path: str):
        super().__init__(f"Unauthorized: {path}", status_code=401)
        self.path = path


class ProtocolError(TwinklyError):
    """Response body carried a non-OK vendor code"""

    def __init__(self, code: int, path: str = ""):
        self.code = code
        self.path = path
        super().__init__(f"{code}: {describe_code(code)}" + (f" ({path})" if path else ""))


class ConfigurationError(TwinklyError, ValueError):
    """Unsupported channel count, oversized fragment, missing device info"""


class DeviceNotReadyError(TwinklyError):
    """Operation needs device metadata or a realtime channel that is not set up yet"""