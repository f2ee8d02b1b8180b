"""Structured logging and in-process request metrics.

Every log line is a single JSON object. Besides the usual level/logger/message
fields it carries the current request id and, when the caller supplies them,
the order, record and user the event concerns.
"""

import json
import logging
import time
from collections import defaultdict
from contextvars import ContextVar
from dataclasses import dataclass

_request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

LOGGER_NAME = "marketplace"
CONTEXT_FIELDS = ("order_id", "record_id", "user_id")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None) or _request_id_ctx.get(),
        }
        payload.update({field: getattr(record, field, None) for field in CONTEXT_FIELDS})
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO") -> None:
    """Route all records through one stderr handler emitting JSON."""
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def set_request_id(request_id: str) -> None:
    _request_id_ctx.set(request_id)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


def log_event(
    message: str,
    *,
    level: int = logging.INFO,
    order_id: str | None = None,
    record_id: str | None = None,
    user_id: str | None = None,
) -> None:
    """Log a domain event such as ``shipping_record_created``.

    Messages are short machine-readable tags; detail belongs in the id fields.
    """
    get_logger().log(
        level,
        message,
        extra={
            "request_id": get_request_id(),
            "order_id": order_id,
            "record_id": record_id,
            "user_id": user_id,
        },
    )


@dataclass
class MetricsSnapshot:
    counters: dict[str, int]
    timings: dict[str, dict[str, float]]


class MetricsStore:
    """Process-local counters and timing samples, exposed by ``GET /metrics``.

    Values reset on restart and are not shared between workers.
    """

    def __init__(self) -> None:
        self._counters: dict[str, int] = defaultdict(int)
        self._timings: dict[str, list[float]] = defaultdict(list)

    def increment(self, name: str, amount: int = 1) -> None:
        self._counters[name] += amount

    def observe(self, name: str, value_s: float) -> None:
        self._timings[name].append(value_s)

    def reset(self) -> None:
        self._counters.clear()
        self._timings.clear()

    def snapshot(self) -> MetricsSnapshot:
        timings = {
            name: {
                "count": len(samples),
                "avg_s": sum(samples) / len(samples),
                "max_s": max(samples),
            }
            for name, samples in self._timings.items()
            if samples
        }
        return MetricsSnapshot(counters=dict(self._counters), timings=timings)


metrics_store = MetricsStore()


class observe_timing:
    """Context manager recording the wall time of its block under ``metric_name``."""

    def __init__(self, metric_name: str, store: MetricsStore | None = None) -> None:
        self.metric_name = metric_name
        self.store = store or metrics_store
        self._start = 0.0

    def __enter__(self) -> "observe_timing":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.store.observe(self.metric_name, time.perf_counter() - self._start)
