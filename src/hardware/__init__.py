"""
Hardware Layer

Low-level device communication only:

- Twinkly HTTP control API (session, mode, brightness, movies)
- Twinkly realtime UDP frame protocol
"""
from .twinkly.client import TwinklyClient
from .twinkly.session import Session, SessionManager
from .twinkly.transport import DeviceTransport, TransportResponse
from .twinkly.realtime import RealtimeSender

__all__ = [
    "TwinklyClient",
    "Session",
    "SessionManager",
    "DeviceTransport",
    "TransportResponse",
    "RealtimeSender",
]
