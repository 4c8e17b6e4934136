from unittest.mock import AsyncMock, MagicMock

import pytest

from lifecycle.shutdown_coordinator import ShutdownCoordinator
from main_asyncio import connect_device, load_config, parse_args
from models.enums import LogLevel, RunMode


def test_parse_args_defaults():
    args = parse_args([])
    assert args.config == "config/config.yaml"
    assert args.mode is None
    assert args.init is False


def test_cli_overrides_config(tmp_path, monkeypatch):
    monkeypatch.delenv("TWINKLY_RUN_MODE", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text("run_mode: realtime\nlog_level: INFO\n")

    config = load_config(parse_args(["--config", str(path), "--mode", "movie", "--log-level", "DEBUG"]))

    assert config.run_mode == RunMode.MOVIE
    assert config.log_level == LogLevel.DEBUG


def test_unknown_mode_rejected():
    with pytest.raises(SystemExit):
        parse_args(["--mode", "karaoke"])


@pytest.mark.asyncio
async def test_connect_device_retries_until_ready():
    client = MagicMock(ip="10.0.0.2")
    client.init_realtime = AsyncMock(side_effect=[False, False, True])

    assert await connect_device(client, True, ShutdownCoordinator(), retry_delay_s=0)
    assert client.init_realtime.await_count == 3


@pytest.mark.asyncio
async def test_connect_device_gives_up_on_shutdown():
    coordinator = ShutdownCoordinator()
    client = MagicMock(ip="10.0.0.2")

    async def refuse():
        coordinator.request_shutdown("SIGINT")
        return False

    client.init = AsyncMock(side_effect=refuse)

    assert await connect_device(client, False, coordinator, retry_delay_s=0) is False
    client.init.assert_awaited_once()
