# Structured operation events
#
# Every vault/deploy operation emits a structlog event to stderr so runs can
# be inspected or piped into a log collector. Events carry names, paths and
# counts only. Secret values never appear in event details.

import logging
import sys
from enum import Enum
from typing import Any

import structlog


class EventType(str, Enum):
    """Operation events emitted by the CLI and the merger."""

    # Vault
    VAULT_ENCRYPTED = "vault.encrypted"
    VAULT_DECRYPTED = "vault.decrypted"
    VAULT_DECRYPT_FAILED = "vault.decrypt.failed"

    # Deployment
    DEPLOY_STARTED = "deploy.started"
    DEPLOY_BUNDLE_SKIPPED = "deploy.bundle.skipped"
    DEPLOY_TARGET_UNAVAILABLE = "deploy.target.unavailable"
    DEPLOY_TARGET_WRITTEN = "deploy.target.written"
    DEPLOY_TARGET_FAILED = "deploy.target.failed"
    DEPLOY_COMPLETED = "deploy.completed"

    # Introspection
    STATUS_REPORTED = "status.reported"


_handler_installed = False
_structlog_configured = False


def _configure_structlog() -> None:
    """Send structlog events through stdlib logging as JSON."""
    global _structlog_configured
    if _structlog_configured:
        return
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _structlog_configured = True


def configure_logging(verbosity: int = 0) -> None:
    """Route stdlib logging and structlog events to stderr.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    global _handler_installed

    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    _configure_structlog()

    root_logger = logging.getLogger()
    if not _handler_installed:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))  # structlog handles formatting
        root_logger.addHandler(handler)
        _handler_installed = True
    root_logger.setLevel(level)


def get_event_logger():
    _configure_structlog()
    return structlog.get_logger("fleet_vault.events")


def log_event(event_type: EventType, message: str, **details: Any) -> None:
    """Emit one operation event.

    Failures are logged at WARNING, everything else at INFO.
    """
    logger = get_event_logger()
    failed = event_type in (EventType.VAULT_DECRYPT_FAILED, EventType.DEPLOY_TARGET_FAILED)
    emit = logger.warning if failed else logger.info
    emit(event_type.value, message=message, **details)
