"""Logging setup for the popup process.

One call configures the root logger: a rotating ``locpopup.log`` file,
an optional console stream, and Qt's message handler routed into the
``PySide6`` logger.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

__all__ = ["LOG_FORMAT", "get_log_path", "setup_logging"]

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DEFAULT_LOG_DIR = Path.home() / ".locpopup" / "logs"
_LOG_PATH: Path | None = None

LOGGER = logging.getLogger(__name__)


def setup_logging(
    debug: bool = False,
    *,
    log_dir: Path | str | None = None,
    console: bool = True,
    force: bool = False,
) -> Path:
    """Configure logging once per process and return the log file path.

    ``log_dir`` falls back to ``LOCPOPUP_LOG_DIR`` and then
    ``~/.locpopup/logs``. Later calls are no-ops unless ``force`` is set.
    """

    global _LOG_PATH
    if _LOG_PATH is not None and not force:
        return _LOG_PATH

    level = logging.DEBUG if debug else logging.INFO
    directory = Path(log_dir or os.environ.get("LOCPOPUP_LOG_DIR") or _DEFAULT_LOG_DIR).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / "locpopup.log"

    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(
            log_path, maxBytes=512_000, backupCount=2, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.captureWarnings(True)
    # RPC chatter from the host client drowns out pass logging at DEBUG.
    logging.getLogger("pynvim").setLevel(max(level, logging.WARNING))
    _install_qt_message_handler()

    _LOG_PATH = log_path
    LOGGER.debug("Logging configured (level=%s, file=%s)", logging.getLevelName(level), log_path)
    return log_path


def get_log_path() -> Path | None:
    return _LOG_PATH


def _install_qt_message_handler() -> None:
    try:
        from PySide6.QtCore import QtMsgType, qInstallMessageHandler
    except Exception:  # pragma: no cover - PySide6 optional during tests
        return

    level_map = {
        QtMsgType.QtDebugMsg: logging.DEBUG,
        QtMsgType.QtInfoMsg: logging.INFO,
        QtMsgType.QtWarningMsg: logging.WARNING,
        QtMsgType.QtCriticalMsg: logging.ERROR,
        QtMsgType.QtFatalMsg: logging.CRITICAL,
    }
    qt_logger = logging.getLogger("PySide6")

    def _handler(mode, context, message):  # type: ignore[no-untyped-def]
        del context
        qt_logger.log(level_map.get(mode, logging.INFO), message)

    qInstallMessageHandler(_handler)
