from __future__ import annotations

import logging
import os
import sys
from typing import Any, TextIO

from config.settings import get_settings


_INITIALIZED: bool = False

# Third-party loggers that are chatty at INFO (suffix-list cache locks, connection pools)
_QUIET_LOGGERS = ("filelock", "tldextract", "urllib3", "httpx")


class SafeExtraFormatter(logging.Formatter):
    """Formatter that tolerates missing extra fields by injecting defaults.

    ``run_id`` falls back to the RUN_ID environment variable.
    """

    DEFAULTS: dict[str, Any] = {
        "step": "-",
        "status": "-",
        "duration_ms": "-",
        "member_id": "-",
        "error": "-",
        "run_id": "-",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        for key, value in self.DEFAULTS.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        if record.run_id == "-":
            record.run_id = os.getenv("RUN_ID", "-")
        return super().format(record)


LOG_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s %(message)s "
    "step=%(step)s status=%(status)s duration_ms=%(duration_ms)s "
    "member_id=%(member_id)s error=%(error)s run_id=%(run_id)s"
)


def init_logging(level: str | None = None, stream: TextIO | None = None) -> None:
    """Configure the root logger once per process (stdout unless ``stream`` is given)."""
    global _INITIALIZED
    if _INITIALIZED:
        return

    settings = get_settings()
    log_level_str = (level or settings.log_level).upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if not root_logger.handlers:
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setLevel(log_level)
        handler.setFormatter(SafeExtraFormatter(fmt=LOG_FORMAT))
        root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    _INITIALIZED = True
