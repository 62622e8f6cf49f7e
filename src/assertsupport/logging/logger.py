from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

# LogRecord attributes that are not user-supplied `extra` fields
_RESERVED = frozenset((
    "args", "msg", "levelname", "levelno", "name", "created", "msecs", "relativeCreated",
    "pathname", "filename", "module", "lineno", "funcName", "stack_info", "exc_info", "exc_text",
    "thread", "threadName", "processName", "process", "taskName",
))

ROOT_LOGGER = "assertsupport"


@dataclass(frozen=True)
class LogConfig:
    level: str = "warning"
    json: bool = False
    to_file: Optional[str] = None
    utc: bool = True

    @classmethod
    def from_settings(cls, settings: Any) -> "LogConfig":
        return cls(level=settings.log_level, json=settings.log_json, to_file=settings.log_file)


class _JsonFormatter(logging.Formatter):
    def __init__(self, utc: bool = True):
        super().__init__()
        self.utc = utc

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc if self.utc else None)
        payload: Dict[str, Any] = {
            "ts": ts.isoformat(),
            "level": record.levelname.lower(),
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for k, v in record.__dict__.items():
            if k.startswith("_") or k in payload or k in _RESERVED:
                continue
            payload[k] = v
        return json.dumps(payload, ensure_ascii=False, default=repr)


def setup_logging(cfg: LogConfig) -> logging.Logger:
    """Attach handlers to the package logger (not the root logger).

    Safe to call repeatedly; previously attached handlers are replaced.
    """
    lvl = _LEVELS.get(cfg.level.lower().strip(), logging.WARNING)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(lvl)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    if cfg.json:
        fmt: logging.Formatter = _JsonFormatter(utc=cfg.utc)
    else:
        fmt = logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    sh = logging.StreamHandler()
    sh.setLevel(lvl)
    sh.setFormatter(fmt)
    logger.addHandler(sh)

    if cfg.to_file:
        os.makedirs(os.path.dirname(cfg.to_file) or ".", exist_ok=True)
        fh = logging.FileHandler(cfg.to_file, encoding="utf-8")
        fh.setLevel(lvl)
        fh.setFormatter(fmt)
        logger.addHandler(fh)
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
