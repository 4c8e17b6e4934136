"""
Configuration models

Typed view of config.yaml. ConfigManager builds these from the merged YAML
dict and applies environment overrides.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from models.enums import LogLevel, RunMode
from utils.enum_helper import EnumHelper


@dataclass
class DeviceConfig:
    ip: str = "192.168.1.113"
    realtime_port: int = 7777
    request_timeout_s: float = 5.0
    keep_alive_interval_s: float = 60.0
    max_auth_retries: int = 1


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 12345


@dataclass
class AnimationConfig:
    offset_per_second: float = 3.0
    fade_duration_ms: int = 2000
    easing: str = "out"
    movie_name: str = "Maki"
    upload_movie: bool = False


@dataclass
class AppConfig:
    device: DeviceConfig = field(default_factory=DeviceConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    animation: AnimationConfig = field(default_factory=AnimationConfig)
    run_mode: RunMode = RunMode.REALTIME
    log_level: LogLevel = LogLevel.INFO

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AppConfig':
        """
        Build from a parsed YAML dict. Missing sections fall back to defaults.

        Raises:
            ValueError: on unknown run_mode / log_level values
            TypeError: on unknown keys inside a section
        """
        data = data or {}
        return cls(
            device=DeviceConfig(**(data.get("device") or {})),
            server=ServerConfig(**(data.get("server") or {})),
            animation=AnimationConfig(**(data.get("animation") or {})),
            run_mode=EnumHelper.to_enum(RunMode, data.get("run_mode", RunMode.REALTIME)),
            log_level=EnumHelper.to_enum(LogLevel, data.get("log_level", LogLevel.INFO)),
        )
