"""
Entry point for dockdash.

Wires the pieces together and runs the dashboard:
  1. Load configuration (~/.config/dockdash/config.yaml)
  2. Set up file logging (the terminal belongs to the UI)
  3. Build the runtime gateway, state machine and renderer
  4. Run the textual app until the user quits or listing fails

Exit Codes:
  - 0: normal quit
  - 1: the terminal session could not be started, the app crashed, or the
       container listing failed (the error is printed on exit)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from . import get_log_path
from .backend import RuntimeGateway
from .config import ConfigManager
from .state import StateMachine
from .textual_app import DashboardApp
from .ui import Renderer, Theme

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(config_manager: ConfigManager) -> str:
    """Send all log records to a rotating file and return its path."""
    log_config = config_manager.get_config().logging
    log_path = config_manager.get_custom_log_path() or get_log_path()
    handler = RotatingFileHandler(
        log_path,
        maxBytes=int(log_config.max_size_mb) * 1024 * 1024,
        backupCount=int(log_config.backup_count),
    )
    level = getattr(logging, config_manager.get_log_level(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[handler], force=True)
    return log_path


def build_app(config_manager: ConfigManager) -> DashboardApp:
    gateway = RuntimeGateway(config_manager.get_runtime_binary())
    machine = StateMachine(refresh_delay=config_manager.get_refresh_delay())
    presenter = Renderer(Theme.from_color_theme(config_manager.get_color_theme()))
    return DashboardApp(gateway, machine, presenter)


def main(config_manager: Optional[ConfigManager] = None) -> int:
    config_manager = config_manager or ConfigManager()
    try:
        log_path = setup_logging(config_manager)
    except OSError as e:
        print(f"Error: cannot open log file: {e}", file=sys.stderr)
        return 1
    logger.info(f"Main started, logging to {log_path}")

    app = build_app(config_manager)
    try:
        app.run()
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt caught, exiting...")
        return 0
    except Exception as e:
        logger.critical(f"Critical error: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return_code = app.return_code or 0
    logger.info(f"Exited with code {return_code}")
    return return_code
