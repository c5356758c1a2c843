"""
dockdash - A keyboard-driven terminal dashboard for containers.

This module provides a textual-based dashboard that lists the containers of an
external runtime (docker by default), filters them live and runs lifecycle
actions on the selected one by invoking the runtime's command-line interface.

Features:
  - Live, case-insensitive filtering over id, name, image, state and ports
  - Start / stop / delete the selected container, manual refresh
  - Automatic delayed refresh after every action
  - Column widths derived from the terminal size

Main Components:
  - main.py: Entry point, logging setup and exit codes
  - textual_app.py: Event loop, widgets and workers
  - state.py: Event-driven state machine
  - backend.py: Runtime CLI gateway
  - parser.py / projection.py / layout.py: Data decoding and display rows
  - ui.py: Theme and renderer
  - model.py: Data structures (ContainerRecord, AppState, ...)

Usage:
  python -m dockdash

Dependencies:
  - textual, rich
  - PyYAML (configuration file)
  - A container runtime CLI on PATH
"""

import os
from pathlib import Path

__version__ = "0.1.0"


def get_log_path() -> str:
    """
    Get the log file path following XDG Base Directory spec.

    Returns XDG_DATA_HOME/dockdash/logs/dockdash.log with fallback to /tmp.
    Creates directory if it doesn't exist.
    """
    xdg_data_home = os.environ.get('XDG_DATA_HOME')
    if not xdg_data_home:
        xdg_data_home = Path.home() / '.local' / 'share'
    else:
        xdg_data_home = Path(xdg_data_home)

    log_dir = xdg_data_home / 'dockdash' / 'logs'

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        return str(log_dir / 'dockdash.log')
    except (PermissionError, OSError):
        return '/tmp/dockdash.log'
