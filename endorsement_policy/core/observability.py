"""
Observability module for the endorsement policy codec.

Provides:
- Structured logging with JSON format
- Prometheus metrics for encode/decode operations

Usage:
    from endorsement_policy.core.observability import (
        configure_logging,
        metrics,
        render_metrics,
    )
"""

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

if TYPE_CHECKING:
    from endorsement_policy.core.config import Settings

# LogRecord attributes that are not user-supplied `extra` fields
_RESERVED_RECORD_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
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
        "getMessage",
        "exc_info",
        "exc_text",
        "stack_info",
        "message",
    }
)

# ============================================================================
# Structured Logging Configuration
# ============================================================================


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs as JSON with standard fields:
    - timestamp: ISO 8601 format
    - level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - logger: Logger name
    - message: Log message
    - file, line, function: Source location
    - exception: Type and message, if the record carries exc_info
    - extra: Any additional context from logging.extra
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
            }

        # These come from logger.info("msg", extra={"key": "value"})
        extra_keys = {
            k: v for k, v in record.__dict__.items() if k not in _RESERVED_RECORD_KEYS
        }
        if extra_keys:
            log_entry["extra"] = extra_keys

        return json.dumps(log_entry, default=str)


def configure_structured_logging(level: str = "INFO") -> None:
    """
    Configure root logger with structured JSON formatting.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    _install_root_handler(level, StructuredFormatter())


def configure_logging(settings: "Settings") -> None:
    """
    Configure root logging from settings.

    Uses JSON lines when `observability_structured_logs` is set, plain text
    otherwise.
    """
    if settings.observability_structured_logs:
        configure_structured_logging(settings.app_log_level)
    else:
        _install_root_handler(
            settings.app_log_level,
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"),
        )


def _install_root_handler(level: str, formatter: logging.Formatter) -> None:
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


# ============================================================================
# Prometheus Metrics
# ============================================================================

# Use a custom registry to avoid conflicts with other Prometheus metrics
_registry = CollectorRegistry()


class Metrics:
    """
    Centralized metrics collection for the codec.

    Metrics groups:
    - Operations: encode/decode counts and latency
    - Payloads: serialized policy size
    - Decoder: nodes resolved by the And/Or ambiguity rule
    """

    def __init__(self, registry: CollectorRegistry) -> None:
        self.registry = registry

        self.codec_operations_total = Counter(
            "codec_operations_total",
            "Total policy encode/decode operations",
            ["operation", "status"],
            registry=self.registry,
        )

        self.codec_duration_seconds = Histogram(
            "codec_duration_seconds",
            "Policy encode/decode duration in seconds",
            ["operation"],
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
            registry=self.registry,
        )

        self.codec_payload_bytes = Histogram(
            "codec_payload_bytes",
            "Size of serialized endorsement policies in bytes",
            ["operation"],
            buckets=(16, 64, 256, 1024, 4096, 16384, 65536, 262144, 1048576),
            registry=self.registry,
        )

        self.codec_ambiguous_nodes_total = Counter(
            "codec_ambiguous_nodes_total",
            "Wire nodes whose combinator was resolved by the And/Or priority rule",
            ["resolution"],
            registry=self.registry,
        )


# Global metrics instance
metrics = Metrics(_registry)


def render_metrics() -> bytes:
    """Return all codec metrics in Prometheus text format."""
    return generate_latest(_registry)
