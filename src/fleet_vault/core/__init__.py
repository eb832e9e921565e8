# Core module - shared utilities
#
# - Structured operation events (structlog)
# - Logging setup for the CLI

from .events import EventType, configure_logging, get_event_logger, log_event

__all__ = [
    "EventType",
    "configure_logging",
    "get_event_logger",
    "log_event",
]
