import logging
import signal
from pathlib import Path
from typing import Optional

from app_config import AppConfigurationError, load_app_config, resolve_config_path
from runtime import RuntimeBootstrap, RuntimeEngine, RuntimeHooks
from server import ServerConfigurationError, UIServer, UIServerConfig
from storage import DailyCounterStore, Settings, SettingsStore, StorageError


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("eyerest")


def setup_signal_handlers(engine: RuntimeEngine) -> None:
    """Stop the runtime loop gracefully on SIGTERM and SIGINT."""
    logger = logging.getLogger("eyerest")

    def signal_handler(signum: int, frame) -> None:
        del frame
        logger.info("%s received, stopping...", signal.Signals(signum).name)
        engine.request_stop()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def main() -> int:
    """Run the break reminder until interrupted."""
    logger = setup_logging(level=logging.INFO)

    try:
        config_path = resolve_config_path()
        app_config = load_app_config()
    except AppConfigurationError as error:
        logger.error("App configuration error: %s", error)
        return 1

    logging.getLogger().setLevel(app_config.logging.level)
    if app_config.source_file:
        logger.info("Loaded runtime config: %s", config_path)
    else:
        logger.info("No config file at %s; using built-in defaults.", config_path)

    data_dir = Path(app_config.storage.data_dir)
    defaults = app_config.timer
    try:
        settings_store = SettingsStore(
            data_dir / app_config.storage.settings_file,
            defaults=Settings(
                work_minutes=defaults.work_minutes,
                rest_seconds=defaults.rest_seconds,
                auto_start=defaults.auto_start,
                theme=defaults.theme,
            ),
            logger=logging.getLogger("storage.settings"),
        )
    except StorageError as error:
        logger.error("Invalid timer defaults: %s", error)
        return 1
    stats_store = DailyCounterStore(
        data_dir / app_config.storage.stats_file,
        logger=logging.getLogger("storage.stats"),
    )

    ui_server: Optional[UIServer] = None
    try:
        ui_server_config = UIServerConfig.from_settings(app_config.ui_server)
    except ServerConfigurationError as error:
        logger.error("UI server configuration error: %s", error)
        return 1

    if ui_server_config.enabled:
        ui_server = UIServer(
            config=ui_server_config,
            logger=logging.getLogger("ui_server"),
        )
    else:
        logger.info("UI server disabled; rest overlays will be skipped.")

    engine = RuntimeEngine(
        RuntimeBootstrap(
            logger=logging.getLogger("runtime"),
            settings_store=settings_store,
            stats_store=stats_store,
            ui_server=ui_server,
            hooks=RuntimeHooks(setup_signal_handlers=setup_signal_handlers),
        )
    )

    if ui_server is not None:
        try:
            ui_server.start(timeout_seconds=5.0)
        except RuntimeError as error:
            logger.error("Failed to start UI server: %s", error)
            return 1
        logger.info(
            "Open http://%s:%d in a browser to see the timer.",
            ui_server.host,
            ui_server.port,
        )

    return engine.run()


if __name__ == "__main__":
    raise SystemExit(main())
