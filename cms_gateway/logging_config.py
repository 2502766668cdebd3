import logging
import logging.config
import os
import json
import threading
from datetime import datetime, timezone
from collections import deque
from typing import Optional
import contextvars

import yaml

from .config import LOG_FORMAT, LOG_LEVEL, LOG_SAMPLE_RATE, LOG_EXCLUDE_PATHS

# Context variable for trace ID
trace_id_var = contextvars.ContextVar('trace_id', default=None)

_STANDARD_ATTRS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'exc_info', 'exc_text',
    'stack_info', 'taskName', 'message',
}

_STRUCTURED_ATTRS = {
    'method', 'path', 'status', 'latency_ms', 'client_ip', 'tenant_id',
    'component', 'resource', 'action',
}


def get_trace_id() -> Optional[str]:
    """Get the current trace ID from context"""
    return trace_id_var.get()


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class JsonFormatter(logging.Formatter):
    """JSON formatter with the gateway's structured fields"""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": _utc_timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "trace_id": get_trace_id(),
            "component": getattr(record, 'component', 'api'),
        }
        for key in _STRUCTURED_ATTRS - {'component'}:
            value = getattr(record, key, None)
            if value is not None:
                log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and key not in _STRUCTURED_ATTRS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


class MemoryLogHandler(logging.Handler):
    """In-memory log handler with ring buffer for live logs"""

    def __init__(self, max_size: int = 10000):
        super().__init__()
        self.max_size = max_size
        self.logs = deque(maxlen=max_size)
        self._lock = threading.Lock()

    def emit(self, record: logging.LogRecord):
        try:
            msg = self.format(record)

            if isinstance(self.formatter, JsonFormatter):
                try:
                    log_entry = json.loads(msg)
                except json.JSONDecodeError:
                    log_entry = {"msg": msg, "timestamp": _utc_timestamp()}
            else:
                log_entry = {
                    "msg": msg,
                    "timestamp": _utc_timestamp(),
                    "level": record.levelname,
                    "logger": record.name,
                }

            with self._lock:
                self.logs.append(log_entry)

        except Exception:
            self.handleError(record)

    def get_logs(self, limit: int = 1000) -> list:
        """Get the most recent logs from the memory buffer"""
        with self._lock:
            logs = list(self.logs)
        return logs[-limit:] if limit else logs


# Global memory handler instance
memory_handler = MemoryLogHandler()


def _default_config(log_format: str, log_level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": JsonFormatter},
            "text": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": log_format,
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "cms": {"level": log_level, "handlers": ["console"], "propagate": False},
            "uvicorn": {"level": log_level, "handlers": ["console"], "propagate": False},
            "uvicorn.error": {"level": log_level, "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": log_level, "handlers": ["console"], "propagate": False},
        },
        "root": {"level": log_level, "handlers": ["console"]},
    }


def setup_logging(config_path: str = "LOGGING.yaml"):
    """Setup logging configuration from YAML file or environment"""
    log_format = LOG_FORMAT if LOG_FORMAT in ("json", "text") else "json"
    log_level = LOG_LEVEL

    config = None
    if os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logging.getLogger("cms").warning("Could not load %s: %s", config_path, e)

    if not config:
        config = _default_config(log_format, log_level)

    for logger_cfg in config.get("loggers", {}).values():
        logger_cfg["level"] = log_level

    logging.config.dictConfig(config)

    formatter = JsonFormatter() if log_format == "json" else logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    memory_handler.setFormatter(formatter)

    for name in (None, "cms", "uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.handlers = [h for h in logger.handlers if not isinstance(h, MemoryLogHandler)]
        logger.addHandler(memory_handler)

    return config


def get_request_log_config() -> dict:
    """Sampling settings used by the tracing middleware"""
    return {
        "exclude_paths": LOG_EXCLUDE_PATHS,
        "sample_rate": LOG_SAMPLE_RATE,
    }


def get_memory_handler():
    """Get the singleton memory handler instance"""
    return memory_handler
