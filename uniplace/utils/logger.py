"""
Logging infrastructure for UniPlace.

Uses Loguru for console and rotating file output, plus a separate audit
log (`audit.log`) holding one line per application decision, posting
change or failed notification. Audit entries carry the student and
company identifiers they concern, so contact details and resume links
are masked before they are written.
"""

import sys
from typing import Any

from loguru import logger

from uniplace.utils.config import get_settings
from uniplace.utils.constants import AUDIT_CATEGORIES, AuditAction

REDACTED = "***REDACTED***"

# Keys whose values never reach the logs
_REDACTED_KEYS = frozenset({"resume_ref", "phone", "password", "secret", "token"})


def setup_logging() -> None:
    """
    Configure application-wide logging.

    Sets up console and rotating file output at the configured level, and
    routes audit entries to their own long-retention file.
    """
    settings = get_settings()
    log_settings = settings.logging

    logger.remove()

    # diagnose=False outside development keeps variable values out of tracebacks
    enable_diagnose = settings.debug and settings.environment == "development"

    if log_settings.console_output:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>",
            level=log_settings.level,
            colorize=True,
            backtrace=True,
            diagnose=enable_diagnose,
        )

    log_file = log_settings.file_path
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_file,
        format=log_settings.format,
        level=log_settings.level,
        rotation=log_settings.rotation,
        retention=log_settings.retention,
        compression="zip",
        backtrace=True,
        diagnose=enable_diagnose,
        enqueue=True,
    )

    logger.add(
        log_file.parent / "audit.log",
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {extra[audit_category]} | "
        "{extra[audit_action]} | {message}",
        level="INFO",
        filter=is_audit_record,
        rotation="1 week",
        retention="1 year",
        compression="zip",
        enqueue=True,
    )

    logger.info(f"Logging initialized - Level: {log_settings.level}")


def get_logger(name: str) -> Any:
    """Logger bound to a module or class name."""
    return logger.bind(name=name)


def is_audit_record(record: dict) -> bool:
    return "audit_action" in record["extra"]


def _mask_email(address: str) -> str:
    local, at, domain = address.partition("@")
    if not at:
        return REDACTED
    return f"{local[:1]}***@{domain}"


def _sanitize_for_logging(data: Any) -> Any:
    """
    Strip personal data from an audit payload.

    Email addresses keep their first letter and domain; resume links,
    phone numbers and credentials are replaced outright. Nested dicts and
    lists are walked.
    """
    if isinstance(data, dict):
        cleaned = {}
        for key, value in data.items():
            lowered = str(key).lower()
            if any(k in lowered for k in _REDACTED_KEYS):
                cleaned[key] = REDACTED
            elif "email" in lowered and isinstance(value, str):
                cleaned[key] = _mask_email(value)
            else:
                cleaned[key] = _sanitize_for_logging(value)
        return cleaned
    if isinstance(data, list):
        return [_sanitize_for_logging(item) for item in data]
    return data


def audit_log(action: AuditAction, details: dict[str, Any]) -> None:
    """
    Write an audit entry.

    Args:
        action: What happened; also decides the audit category
        details: Identifiers and values describing the event
    """
    action = AuditAction(action)
    logger.bind(
        audit_action=action.value,
        audit_category=AUDIT_CATEGORIES[action].value,
    ).info(str(_sanitize_for_logging(details)))


class LoggerMixin:
    """Gives a class a `logger` bound to its class name."""

    @property
    def logger(self) -> Any:
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger
