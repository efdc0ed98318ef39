"""
Logging utilities.

Primary goals:
- Avoid leaking credentials (database URL passwords, tokens) in logs.
- Reduce noisy third-party logs (openpyxl style warnings, multipart parser, SQL echo).
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

NOISY_LOGGERS = ("openpyxl", "multipart", "python_multipart", "sqlalchemy.engine", "httpx", "httpcore")


class RedactSecretsFilter(logging.Filter):
    """
    Best-effort redaction for secrets in log messages.

    Covers passwords embedded in connection URLs, token-like query params and
    bearer headers.
    """

    _url_password_re = re.compile(r"(?i)\b([a-z][a-z0-9+.\-]*://[^:/\s]+):([^@\s]+)@")
    _query_param_re = re.compile(r"(?i)\b(token|key|secret|password|apikey)=([^&\s]+)")
    _bearer_re = re.compile(r"(?i)\bBearer\s+([A-Za-z0-9._\-]+)")

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (Filter.filter)
        try:
            msg = record.getMessage()
        except Exception:
            return True

        redacted = self.redact(msg)
        if redacted != msg:
            # Replace the fully formatted message to avoid re-formatting with args.
            record.msg = redacted
            record.args = ()
        return True

    @classmethod
    def redact(cls, text: str) -> str:
        text = cls._url_password_re.sub(lambda m: f"{m.group(1)}:REDACTED@", text)
        text = cls._query_param_re.sub(lambda m: f"{m.group(1)}=REDACTED", text)
        return cls._bearer_re.sub("Bearer REDACTED", text)


_FILTER_NAME = "edgecore_redact_secrets"


def _has_filter(filters: Iterable[logging.Filter], name: str) -> bool:
    return any(getattr(f, "name", None) == name for f in filters)


def install_log_safety() -> None:
    """
    Install log safety defaults:
    - Redact credentials in log messages
    - Quiet noisy library loggers
    """
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    redact_filter = RedactSecretsFilter()
    redact_filter.name = _FILTER_NAME  # type: ignore[attr-defined]

    root = logging.getLogger()
    if not _has_filter(root.filters, _FILTER_NAME):
        root.addFilter(redact_filter)
    for handler in root.handlers:
        if not _has_filter(handler.filters, _FILTER_NAME):
            handler.addFilter(redact_filter)

    # Also attach to existing non-root handlers (e.g., uvicorn).
    for obj in logging.Logger.manager.loggerDict.values():
        if isinstance(obj, logging.Logger):
            for handler in obj.handlers:
                if not _has_filter(handler.filters, _FILTER_NAME):
                    handler.addFilter(redact_filter)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the CLI and web server."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    install_log_safety()
