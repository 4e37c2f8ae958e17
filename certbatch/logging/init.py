from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Console logging for certbatch.

全メッセージは `<LABEL> <message>` の1行で stdout に出す。
ラベルは INFO / WARN / ERROR / SUMMARY (--debug 時は DEBUG も)。
各モジュールは logging.getLogger(__name__) を使い、"certbatch" ロガーの
ハンドラを共有する。
"""

__all__ = [
    "APP_LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "enable_debug",
    "log_summary",
    "reset_logging",
]

APP_LOGGER_NAME = "certbatch"

# INFO(20) と WARNING(30) の間: SUMMARY 行は WARN 扱いにしない
SUMMARY_LEVEL = 25
logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

LEVEL_LABELS: dict[int, str] = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    SUMMARY_LEVEL: "SUMMARY",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
}

_configured: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Prefix each message with a short level label (WARNING is shortened to WARN)."""

    def format(self, record: logging.LogRecord) -> str:
        label = LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{label} {record.getMessage()}"


def setup_logging(*, debug: bool = False, stream: TextIO | None = None) -> logging.Logger:
    """Attach the labeled console handler to the "certbatch" logger.

    Calling it again returns the already configured logger unchanged;
    reset_logging() forgets it so the next call rebinds the stream.
    """
    global _configured
    if _configured is not None:
        return _configured

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    for old in list(app_logger.handlers):
        app_logger.removeHandler(old)

    console = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console.setFormatter(LabeledFormatter())
    app_logger.addHandler(console)
    # ルートロガーへは流さない (pytest 等の二重出力防止)
    app_logger.propagate = False

    level = logging.DEBUG if debug else logging.INFO
    console.setLevel(level)
    app_logger.setLevel(level)

    _configured = app_logger
    return app_logger


def get_logger() -> logging.Logger:
    return _configured if _configured is not None else setup_logging()


def enable_debug(logger: logging.Logger) -> None:
    """Switch an already configured logger (and its handlers) to DEBUG."""
    logger.setLevel(logging.DEBUG)
    for h in logger.handlers:
        h.setLevel(logging.DEBUG)


def log_summary(message: str) -> None:
    """Emit ``message`` at SUMMARY level; the formatter adds the "SUMMARY " prefix."""
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger (tests call this before capturing stdout)."""
    global _configured
    _configured = None
