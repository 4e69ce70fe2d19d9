"""
Structured logging for the Product Sheet Extractor.

One extraction is followed end to end through a short trace id carried in
a context variable and stamped on every event.
"""
import logging
import uuid
from contextvars import ContextVar
from typing import Any, Dict, List, Optional

import structlog

from product_sheet.config import config

_trace_id: ContextVar[str] = ContextVar("trace_id", default="")


def _new_trace_id() -> str:
    return uuid.uuid4().hex[:8]


def set_trace_id(trace_id: Optional[str] = None) -> str:
    """Start a trace for the current context (one per extraction request)."""
    value = trace_id or _new_trace_id()
    _trace_id.set(value)
    return value


def get_trace_id() -> str:
    """Current trace id; a caller outside any request gets a fresh one."""
    return _trace_id.get() or set_trace_id()


def stamp_trace_id(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    event_dict.setdefault("trace_id", get_trace_id())
    return event_dict


def configure_logging():
    """JSON lines by default, colored console output when LOG_FORMAT=console."""
    renderer = (
        structlog.processors.JSONRenderer()
        if config.LOG_FORMAT == "json"
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    level = getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            stamp_trace_id,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


class LayerLogger:
    """
    Event vocabulary shared by the pipeline stages.

    decision_made      a candidate or page was accepted or rejected
    action_<status>    a stage started or completed
    fallback_triggered a lookup failed and the next one is tried
    error_occurred     a stage-level fault was absorbed
    fields_extracted   summary of one raw extraction pass
    """

    def __init__(self, layer_name: str):
        self.layer_name = layer_name
        self.logger = get_logger(layer_name).bind(layer=layer_name)

    def _emit(self, level: str, event: str, **fields):
        getattr(self.logger, level)(event, **fields)

    def log_decision(self, decision: str, reason: str, url: Optional[str] = None, **extra):
        self._emit("info", "decision_made", decision=decision, reason=reason, url=url, **extra)

    def log_action(self, action: str, status: str = "started", **extra):
        self._emit("info", f"action_{status}", action=action, **extra)

    def log_fallback(self, from_source: str, to_source: str, reason: str, **extra):
        self._emit(
            "warning",
            "fallback_triggered",
            from_source=from_source,
            to_source=to_source,
            reason=reason,
            **extra
        )

    def log_error(self, error: str, error_type: str = "unknown", **extra):
        self._emit("error", "error_occurred", error=error, error_type=error_type, **extra)

    def log_extraction(
        self,
        fields_present: List[str],
        fields_missing: List[str],
        url: Optional[str] = None,
        **extra
    ):
        self._emit(
            "info",
            "fields_extracted",
            url=url,
            fields_present=fields_present,
            fields_missing=fields_missing,
            **extra
        )


configure_logging()
