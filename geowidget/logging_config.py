import logging
import logging.config
import os
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import contextvars

import yaml

# Context variable for trace ID
trace_id_var = contextvars.ContextVar('trace_id', default=None)

# LogRecord attributes that are not user supplied extras
_RESERVED = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'taskName', 'exc_info',
    'exc_text', 'stack_info', 'message', 'asctime',
}


def get_trace_id() -> Optional[str]:
    """Get the current trace ID from context"""
    return trace_id_var.get()


class JsonFormatter(logging.Formatter):
    """JSON formatter with structured fields"""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "trace_id": get_trace_id(),
            "component": getattr(record, 'component', 'api'),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED and key not in log_entry:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


def _default_config(log_level: str, log_format: str) -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": JsonFormatter},
            "text": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": log_format,
                "stream": "ext://sys.stdout"
            }
        },
        "loggers": {
            "geowidget": {"level": log_level, "handlers": [], "propagate": True},
            "uvicorn": {"level": log_level, "handlers": [], "propagate": True},
            "uvicorn.error": {"level": log_level, "handlers": [], "propagate": True},
            # access lines come from the tracing middleware
            "uvicorn.access": {"level": "WARNING", "handlers": [], "propagate": True},
        },
        "root": {
            "level": log_level,
            "handlers": ["console"]
        }
    }


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None,
                  config_path: Optional[str] = None) -> Dict[str, Any]:
    """Setup logging configuration from a YAML file or the environment"""
    log_level = (log_level or os.getenv("LOG_LEVEL", "WARNING")).upper()
    log_format = log_format or os.getenv("LOG_FORMAT", "text")
    if log_format not in ("json", "text"):
        log_format = "text"
    config_path = config_path or os.getenv("LOGGING_CONFIG", "LOGGING.yaml")

    config = None
    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            print(f"Warning: Could not load {config_path}: {e}")

    if not config:
        config = _default_config(log_level, log_format)

    logging.config.dictConfig(config)
    return config
