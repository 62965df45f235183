"""
Logging utilities for the FastAPI application and operations scripts.

Provides a consistent logging format and keeps OAuth authorization codes out of
the uvicorn access log.
"""

import logging
import re
import sys

_SENSITIVE_QUERY = re.compile(r"(?P<key>\b(?:code|state)=)[^&\s]+")


def redact_query(path: str) -> str:
    """Mask ``code`` and ``state`` query values in a request path."""
    return _SENSITIVE_QUERY.sub(r"\g<key>[redacted]", path)


class OAuthQueryRedactionFilter(logging.Filter):
    """Rewrite uvicorn access log records so callback parameters are masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        # uvicorn.access args: (client_addr, method, full_path, http_version, status)
        if isinstance(record.args, tuple) and len(record.args) >= 3:
            args = list(record.args)
            if isinstance(args[2], str):
                args[2] = redact_query(args[2])
                record.args = tuple(args)
        return True


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a sensible default format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    access_logger = logging.getLogger("uvicorn.access")
    if not any(isinstance(f, OAuthQueryRedactionFilter) for f in access_logger.filters):
        access_logger.addFilter(OAuthQueryRedactionFilter())


__all__ = ["OAuthQueryRedactionFilter", "configure_logging", "redact_query"]
