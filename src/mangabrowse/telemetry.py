"""Fetch-cycle tracing and JSON-lines logging for mangabrowse.

Every FeedController cycle runs inside one ``feed.fetch_cycle`` span
opened through ``Telemetry.feed_cycle()``. The span carries the feed
name, page, request URL, stale-discard count, and the outcome, so one
trace id covers a cycle's rate-limit retries and refetches. Records
written to the log file inside a cycle carry that trace id, plus the feed
name when logged with ``extra={"feed": ...}``. ``mangabrowse logs``
filters on both.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Generator

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from mangabrowse.constants import NO_TRACE

LOGGER_NAME = "mangabrowse"
FETCH_CYCLE_SPAN = "feed.fetch_cycle"

logger = logging.getLogger(LOGGER_NAME)


class FeedCycleSpan:
    """Records one fetch cycle's progress on its OTel span.

    Attribute writes that OTel rejects are logged and dropped so tracing
    cannot fail a cycle.
    """

    def __init__(self, span: object, feed_name: str) -> None:
        self._span = span
        self.feed_name = feed_name
        self.stale_discards = 0

    def _set(self, key: str, value: object) -> None:
        try:
            self._span.set_attribute(key, value)  # type: ignore[attr-defined]
        except Exception:
            logger.debug("span attribute %s rejected", key)

    def requesting(self, url: str) -> None:
        self._set("feed.url", url)

    def discarded_stale(self) -> None:
        self.stale_discards += 1
        self._set("feed.stale_discards", self.stale_discards)

    def completed(self, page: int, item_count: int) -> None:
        self._set("feed.page", page)
        self._set("feed.item_count", item_count)
        self._set("feed.outcome", "ok")

    def failed(self, error: BaseException) -> None:
        self._set("feed.outcome", "error")
        try:
            self._span.record_exception(error)  # type: ignore[attr-defined]
        except Exception:
            logger.debug("span exception record rejected")


class Telemetry:
    """Tracer plus the package logger shared by the controllers and the TUI."""

    def __init__(self, tracer: object) -> None:
        self._tracer = tracer
        self.log = logger

    @contextmanager
    def feed_cycle(
        self, feed_name: str, page: int, show_loading: bool
    ) -> Generator[FeedCycleSpan, None, None]:
        """Open the span for one fetch cycle of *feed_name*."""
        with self._tracer.start_as_current_span(FETCH_CYCLE_SPAN) as otel_span:  # type: ignore[attr-defined]
            cycle = FeedCycleSpan(otel_span, feed_name)
            cycle._set("feed.name", feed_name)
            cycle._set("feed.page", page)
            cycle._set("feed.show_loading", show_loading)
            yield cycle

    @classmethod
    def for_testing(cls) -> tuple[Telemetry, InMemorySpanExporter]:
        """Telemetry whose finished spans land in the returned exporter."""
        exporter = InMemorySpanExporter()
        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        return cls(provider.get_tracer(LOGGER_NAME)), exporter

    @classmethod
    def noop(cls) -> Telemetry:
        return cls(TracerProvider().get_tracer(LOGGER_NAME))


_active: Telemetry | None = None


def get_telemetry() -> Telemetry:
    """Return the process-wide Telemetry, creating a no-op one on first use."""
    global _active
    if _active is None:
        _active = Telemetry.noop()
    return _active


def set_telemetry(telemetry: Telemetry) -> None:
    global _active
    _active = telemetry


# ---------------------------------------------------------------------------
# JSON-lines log file
# ---------------------------------------------------------------------------

class _TraceContextFilter(logging.Filter):
    """Stamp each record with the trace id of the span active when it was logged."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = trace.get_current_span().get_span_context()
        record.trace_id = format(ctx.trace_id, "032x") if ctx.is_valid else NO_TRACE  # type: ignore[attr-defined]
        return True


class _JsonLineFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, feed, trace, msg."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "feed": getattr(record, "feed", ""),
            "trace": getattr(record, "trace_id", NO_TRACE),
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def configure_file_logging(log_dir: str = "logs") -> str:
    """Write the ``mangabrowse`` logger tree to ``{log_dir}/mangabrowse-YYYYMMDD.log``.

    Only the ``tui`` command calls this; the console commands keep their
    output on the terminal. Repeated calls reuse the existing handler.

    Returns:
        Path of the log file.
    """
    import os
    from datetime import datetime

    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(
        log_dir, f"mangabrowse-{datetime.now().strftime('%Y%m%d')}.log"
    )

    if any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        return log_path

    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.addFilter(_TraceContextFilter())
    handler.setFormatter(_JsonLineFormatter())
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    return log_path
