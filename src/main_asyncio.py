"""
main_asyncio.py - Application entry point
-----------------------------------------

Responsible for:
- loading configuration
- connecting to the Twinkly device (retrying until it answers)
- wiring the frame loop, activity fade and control API
- graceful shutdown on Ctrl+C, SIGTERM or a failed critical task

Run modes:
    realtime  stream the animation over UDP at the device frame rate
    movie     upload the animation once (--init), the device plays it back
              and /api/active fades the device brightness
"""

import sys

if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore
if hasattr(sys.stderr, 'reconfigure') and sys.stderr.encoding != 'UTF-8':
    sys.stderr.reconfigure(encoding='utf-8')  # type: ignore

import argparse
import asyncio
from typing import List, Optional

from animations import GnomeStripesAnimation
from api.dependencies import set_service_container
from api.main import create_app
from engine import FrameComposer, FrameDriver, TweenManager
from hardware import TwinklyClient
from lifecycle import ShutdownCoordinator
from lifecycle.api_server_wrapper import APIServerWrapper
from lifecycle.handlers import (
    APIServerShutdownHandler,
    DeviceShutdownHandler,
    FrameDriverShutdownHandler,
    TaskCancellationHandler,
)
from lifecycle.task_registry import create_tracked_task, TaskCategory
from managers import ConfigManager
from models.config import AppConfig
from models.easing import easing_by_name
from models.enums import LogCategory, LogLevel, RunMode
from services import ActivityService, MovieService, ServiceContainer
from utils.enum_helper import EnumHelper
from utils.logger import get_logger, configure_logger

log = get_logger().for_category(LogCategory.SYSTEM)

DEVICE_RETRY_DELAY_S = 5.0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Twinkly realtime controller")
    parser.add_argument("--config", default="config/config.yaml", help="Config file (relative to src/)")
    parser.add_argument("--mode", choices=[m.value for m in RunMode], help="Override run_mode")
    parser.add_argument(
        "--init",
        action="store_true",
        help="Movie mode: delete stored movies, bake and upload the animation",
    )
    parser.add_argument("--log-level", choices=[l.name for l in LogLevel], help="Override log_level")
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> AppConfig:
    config = ConfigManager(config_path=args.config).load()
    if args.mode:
        config.run_mode = EnumHelper.to_enum(RunMode, args.mode)
    if args.log_level:
        config.log_level = EnumHelper.to_enum(LogLevel, args.log_level)
    return config


async def connect_device(
    client: TwinklyClient,
    realtime: bool,
    coordinator: ShutdownCoordinator,
    retry_delay_s: float = DEVICE_RETRY_DELAY_S,
) -> bool:
    """Initialize the device, retrying until it answers or shutdown is requested."""
    while not coordinator.shutdown_requested:
        ok = await (client.init_realtime() if realtime else client.init())
        if ok:
            return True
        log.warn(f"Device {client.ip} not ready, retrying in {retry_delay_s:g}s")
        await asyncio.sleep(retry_delay_s)
    return False


async def main(argv: Optional[List[str]] = None) -> None:
    """Main async entry point (dependency wiring and event loop startup)."""
    args = parse_args(argv)
    config = load_config(args)
    configure_logger(config.log_level)

    log.info(f"Starting in {config.run_mode.value} mode", device=config.device.ip)

    coordinator = ShutdownCoordinator()
    coordinator.setup_signal_handlers(asyncio.get_running_loop())

    # ============================================================
    # 1. DEVICE
    # ============================================================

    client = TwinklyClient(
        config.device.ip,
        realtime_port=config.device.realtime_port,
        request_timeout_s=config.device.request_timeout_s,
        max_auth_retries=config.device.max_auth_retries,
    )
    coordinator.register(DeviceShutdownHandler(client))
    coordinator.register(TaskCancellationHandler())

    realtime = config.run_mode == RunMode.REALTIME
    if not await connect_device(client, realtime, coordinator):
        await coordinator.shutdown_all()
        return

    info = client.session_manager.require_info()

    # ============================================================
    # 2. ANIMATION, ACTIVITY, FRAME LOOP
    # ============================================================

    tween_manager = TweenManager()
    animation = GnomeStripesAnimation(config.animation.offset_per_second)
    easing = easing_by_name(config.animation.easing)

    if realtime:
        activity = ActivityService(
            tween_manager,
            fade_duration_ms=config.animation.fade_duration_ms,
            easing=easing,
            initial_active=True,
        )
        composer = FrameComposer(animation, client.send_frame, info.number_of_leds, activity.get_opacity)
        frame_driver = FrameDriver(tween_manager, info.frame_rate, on_tick=composer)

        create_tracked_task(
            client.keep_alive_loop(config.device.keep_alive_interval_s),
            category=TaskCategory.SESSION,
            description="Device keep-alive",
        )
    else:
        movies = MovieService(client, animation, name=config.animation.movie_name)
        if not await movies.prepare(upload=args.init or config.animation.upload_movie):
            log.warn("Movie preparation incomplete; brightness control still available")

        activity = ActivityService(
            tween_manager,
            fade_duration_ms=config.animation.fade_duration_ms,
            easing=easing,
            initial_active=await movies.is_playing(),
            on_opacity=movies.on_opacity,
        )
        frame_driver = FrameDriver(tween_manager, info.frame_rate)

    frame_driver.start()
    coordinator.register(FrameDriverShutdownHandler(frame_driver))

    # ============================================================
    # 3. CONTROL API
    # ============================================================

    set_service_container(ServiceContainer(
        config=config,
        client=client,
        tween_manager=tween_manager,
        activity=activity,
        frame_driver=frame_driver,
    ))

    api = APIServerWrapper(create_app(), host=config.server.host, port=config.server.port)
    create_tracked_task(api.start(), category=TaskCategory.API, description="FastAPI/Uvicorn Server")
    coordinator.register(APIServerShutdownHandler(api))

    log.info("Application initialized. Waiting for exit signal...")

    await coordinator.wait_for_shutdown()
    await coordinator.shutdown_all()
    set_service_container(None)
    log.info("Shut down cleanly.")


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
    except Exception as e:
        log.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    run()
