"""
Config Manager

Loads config.yaml (relative to src/), falls back to factory defaults when it
is missing or broken, builds the typed AppConfig and applies environment
overrides:

    TWINKLY_IP        device.ip
    PORT              server.port
    TWINKLY_RUN_MODE  run_mode (realtime | movie)
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from models.config import AppConfig
from models.enums import RunMode
from utils.enum_helper import EnumHelper
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

SRC_DIR = Path(__file__).parent.parent


class ConfigManager:
    """
    Example:
        config = ConfigManager().load()
        config.device.ip, config.server.port, config.run_mode
    """

    def __init__(
        self,
        config_path: str = "config/config.yaml",
        defaults_path: str = "config/factory_defaults.yaml",
        env: Optional[Mapping[str, str]] = None,
    ):
        """
        Args:
            config_path: Main config, relative to src/ unless absolute
            defaults_path: Fallback config, relative to src/ unless absolute
            env: Environment mapping (os.environ by default)
        """
        self.config_path = self._resolve(config_path)
        self.factory_defaults_path = self._resolve(defaults_path)
        self.env = os.environ if env is None else env
        self.data: Dict[str, Any] = {}
        self.config: Optional[AppConfig] = None

    @staticmethod
    def _resolve(path: str) -> Path:
        p = Path(path)
        return p if p.is_absolute() else SRC_DIR / p

    def load(self) -> AppConfig:
        """
        Raises:
            ValueError: config values invalid (bad run_mode, bad env override)
            OSError: neither the config nor the factory defaults can be read
        """
        try:
            self.data = self._read_yaml(self.config_path)
            log.info(f"Loaded {self.config_path.name}")
        except (OSError, yaml.YAMLError) as ex:
            log.error("Failed to load config.yaml", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")
            self.data = self._read_yaml(self.factory_defaults_path)

        config = AppConfig.from_dict(self.data)
        self._apply_env_overrides(config)
        self.config = config

        log.info(
            "Configuration ready",
            device=config.device.ip,
            port=config.server.port,
            run_mode=config.run_mode.value,
        )
        return config

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise yaml.YAMLError(f"{path.name}: top level must be a mapping")
        return data

    def _apply_env_overrides(self, config: AppConfig) -> None:
        ip = self.env.get("TWINKLY_IP")
        if ip:
            config.device.ip = ip
            log.debug("Env override", key="device.ip", value=ip)

        port = self.env.get("PORT")
        if port:
            try:
                config.server.port = int(port)
            except ValueError:
                raise ValueError(f"PORT must be an integer, got '{port}'")
            log.debug("Env override", key="server.port", value=port)

        run_mode = self.env.get("TWINKLY_RUN_MODE")
        if run_mode:
            config.run_mode = EnumHelper.to_enum(RunMode, run_mode)
            log.debug("Env override", key="run_mode", value=config.run_mode.value)
