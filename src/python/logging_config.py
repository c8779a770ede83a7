"""
Logging setup for the flame graph viewer.

Everything is driven by the 'logging' section of config.json:

    level          root and file handler level
    file           rotating log file; empty or null disables file logging
    maxBytes       rotation size
    backupCount    rotated files kept
    console        stderr handler on/off
    consoleLevel   stderr handler level
    raiseOnError   turn logger.error into a RuntimeError (debugging aid)

Qt's own warnings (qWarning, qCritical) are forwarded to the ``qt`` logger
so they land in the same handlers as the engine's messages.
"""

import logging
import logging.handlers
from pathlib import Path
from PyQt6.QtCore import QtMsgType, qInstallMessageHandler
from config_manager import config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

QT_MESSAGE_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}

qt_logger = logging.getLogger("qt")


class ErrorRaisingHandler(logging.Handler):
    """Handler that raises an exception on ERROR or CRITICAL logs."""

    def emit(self, record):
        if record.levelno >= logging.ERROR:
            raise RuntimeError(f"Logger error: {record.getMessage()}")


def qt_message_handler(mode, context, message) -> None:
    """Forward a Qt diagnostic message to the ``qt`` logger."""
    qt_logger.log(QT_MESSAGE_LEVELS.get(mode, logging.WARNING), "%s", message)


def _level(name: str | None, fallback: int) -> int:
    return getattr(logging, str(name or "").upper(), fallback)


def _file_handler(log_file: str, level: int, formatter: logging.Formatter) -> logging.Handler | None:
    max_bytes = config.get_logging_setting("maxBytes", 10485760)
    backup_count = config.get_logging_setting("backupCount", 3)
    try:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8'
        )
    except OSError as e:
        logging.getLogger(__name__).warning("Could not open log file %s: %s", log_file, e)
        return None
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(raise_on_error: bool | None = None, debug: bool = False) -> None:
    """Configure the root logger from config.json.

    Args:
        raise_on_error: Overrides the 'raiseOnError' setting when not None
        debug: Force DEBUG on the root logger and every handler
    """
    level = _level(config.get_logging_setting("level"), logging.INFO)
    console_level = _level(config.get_logging_setting("consoleLevel"), logging.WARNING)
    if debug:
        level = console_level = logging.DEBUG
    if raise_on_error is None:
        raise_on_error = config.get_logging_setting("raiseOnError", False)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if config.get_logging_setting("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(console_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    log_file = config.get_logging_setting("file", "logs/flamegraph.log")
    if log_file:
        file_handler = _file_handler(log_file, level, formatter)
        if file_handler is not None:
            root_logger.addHandler(file_handler)

    if raise_on_error:
        root_logger.addHandler(ErrorRaisingHandler())

    # pyqtgraph is chatty at DEBUG
    logging.getLogger('pyqtgraph').setLevel(logging.WARNING)
    qInstallMessageHandler(qt_message_handler)

    root_logger.info("Logging initialized - level %s, file %s",
                     logging.getLevelName(level), log_file or "disabled")
