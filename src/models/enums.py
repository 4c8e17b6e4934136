"""
Enums for the Twinkly realtime controller
"""

from enum import Enum, auto


class DeviceMode(Enum):
    """
    LED operating modes reported by /xled/v1/led/mode

    OFF: LEDs disabled
    RT: Realtime - device renders frames pushed over UDP
    MOVIE: Device plays the currently selected stored movie
    """
    OFF = "off"
    RT = "rt"
    MOVIE = "movie"
    DEMO = "demo"
    EFFECT = "effect"
    PLAYLIST = "playlist"
    COLOR = "color"


class MovieFormat(Enum):
    """Movie descriptor types accepted by /xled/v1/movies/new"""
    RGB_RAW = "rgb_raw"
    RGBW_RAW = "rgbw_raw"


class RunMode(Enum):
    """How the application drives the device"""
    REALTIME = "realtime"   # stream frames over UDP
    MOVIE = "movie"         # upload a movie once, animate brightness only


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    SESSION = auto()     # Login, verify, token refresh
    REALTIME = auto()    # UDP frame protocol
    DEVICE = auto()      # Device client (mode, brightness, movies)
    TWEEN = auto()       # Tween scheduler
    RENDER = auto()      # Frame pacing loop
    API = auto()
    SYSTEM = auto()      # Startup, shutdown, errors
    SHUTDOWN = auto()
    TASK = auto()

    GENERAL = auto()    # Default general category
