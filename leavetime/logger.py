"""
Logging

All leavetime loggers are children of the ``leavetime`` logger, which owns
the console and file handlers. Handlers are set up once from config, so
every module shares one log file.
"""

import logging
import os
import sys
import threading
from pathlib import Path

ROOT_LOGGER = "leavetime"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False
_lock = threading.Lock()


def configure_logging(config=None, force: bool = False) -> logging.Logger:
    """Attach handlers to the package logger.

    Only the first call configures anything unless ``force`` is set, in which
    case existing handlers are closed and replaced.
    """
    global _configured
    root = logging.getLogger(ROOT_LOGGER)
    with _lock:
        if _configured and not force:
            return root

        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

        level_str = config.get("logging.level", "INFO") if config else "INFO"
        log_file = config.get("logging.file") if config else None
        console_enabled = config.get("logging.console", True) if config else True

        # Autostarted hosts have no terminal.
        if os.environ.get("LEAVETIME_LOG_FILE_ONLY"):
            console_enabled = False
            log_file = log_file or str(Path.home() / ".leavetime" / "leavetime.log")

        root.setLevel(getattr(logging, str(level_str).upper(), logging.INFO))
        formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

        if console_enabled:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            root.addHandler(console_handler)

        if log_file:
            log_path = Path(log_file).expanduser()
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(str(log_path))
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

        if not root.handlers:
            root.addHandler(logging.NullHandler())

        root.propagate = False
        _configured = True
    return root


def get_logger(name: str, config=None) -> logging.Logger:
    """Logger under the ``leavetime`` hierarchy, e.g. get_logger(__name__)."""
    configure_logging(config)
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
