# src/disco_gpt/logging_utils.py
import json
import logging
import logging.handlers
import os
import sys
import time
from typing import Any, Dict, Optional

from .config import Settings, is_log_level

# Keys commonly present on a LogRecord that we don't want to echo as "extra"
_EXCLUDE_KEYS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
}


def _jsonify(value: Any) -> Any:
    """Return a JSON-serializable representation of `value`."""
    try:
        json.dumps(value)
        return value
    except Exception:
        # Fallback to string to avoid formatter explosions
        return str(value)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base: Dict[str, Any] = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        # Merge any "extra" attributes that were added to the record
        for k, v in record.__dict__.items():
            if k not in _EXCLUDE_KEYS and k not in base and not k.startswith("_"):
                base[k] = _jsonify(v)
        if record.exc_info:
            try:
                base["exc"] = self.formatException(record.exc_info)
            except Exception:
                base["exc"] = "unavailable"
        return json.dumps(base, ensure_ascii=False)


class PlainFormatter(logging.Formatter):
    """Human-readable single-line log formatter with colourised levels."""

    LEVEL_COLOURS = {
        "DEBUG": "\033[36m",  # cyan
        "INFO": "\033[32m",  # green
        "WARNING": "\033[33m",  # yellow
        "ERROR": "\033[31m",  # red
        "CRITICAL": "\033[35m",  # magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        ts = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created))
        level = record.levelname
        msg = record.getMessage()
        extras: list[str] = []
        for k, v in record.__dict__.items():
            if k not in _EXCLUDE_KEYS and not k.startswith("_"):
                extras.append(f"{k}={_jsonify(v)}")
        extra_str = " " + " ".join(extras) if extras else ""
        colour = self.LEVEL_COLOURS.get(level, "")
        reset = self.RESET if colour else ""
        line = f"{ts} {colour}{level:<8}{reset} {record.name}: {msg}{extra_str}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(settings: Settings, level: Optional[str] = None) -> None:
    """Configure logging for Disco GPT.

    When LOG_PLAIN is set to 1 (see ``Settings.log_plain``) the console output
    uses a human-readable single-line format with colourised levels, otherwise
    JSON lines.  Regardless of this setting a JSON log is written to a rotating
    file in ``<DATA_DIR>/logs`` together with a separate WARNING+ error log.
    The ``level`` argument wins over ``Settings.log_level``; an unknown level
    name falls back to INFO.

    discord.py attaches no handlers of its own when started with
    ``log_handler=None``, so its ``discord.*`` loggers propagate here too.
    """
    level_upper = (level or settings.log_level or "INFO").strip().upper()
    if not is_log_level(level_upper):
        level_upper = "INFO"

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level_upper)

    try:
        log_dir = settings.data_dir / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        rotation_days = int(os.getenv("LOG_ROTATION_DAYS", "7"))
        max_bytes = 10 * 1024 * 1024  # 10MB per file

        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / "bot.jsonl",
            maxBytes=max_bytes,
            backupCount=rotation_days,
            encoding="utf-8",
        )
        file_handler.setFormatter(JsonFormatter())
        root.addHandler(file_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            log_dir / "errors.log",
            maxBytes=max_bytes,
            backupCount=rotation_days,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.WARNING)
        error_handler.setFormatter(JsonFormatter())
        root.addHandler(error_handler)
    except (OSError, ValueError):
        # Unwritable data dir: keep console logging only
        pass

    stream_handler = logging.StreamHandler(sys.stdout)
    if settings.log_plain:
        stream_handler.setFormatter(PlainFormatter())
    else:
        stream_handler.setFormatter(JsonFormatter())
    root.addHandler(stream_handler)

    # The gateway client is chatty at DEBUG; keep it at INFO unless asked.
    if level_upper != "DEBUG":
        logging.getLogger("discord").setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
