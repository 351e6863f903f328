"""
core/log.py -- Logging bootstrap and per-operation context.

configure_logging() is called once by the process entry point (main.py).
Library code never configures logging; it receives a Logger by injection
and wraps it in ContextAdapter to tag every record with the operation and
its non-secret inputs.

Nothing passed to ContextAdapter may be a password, a password hash, or an
app secret.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, datefmt=DATE_FORMAT)


class ContextAdapter(logging.LoggerAdapter):
    """LoggerAdapter that appends its context as key=value pairs.

    The context is also attached to each LogRecord as attributes, so
    structured handlers can read record.op directly.
    """

    def process(self, msg, kwargs):
        ctx = " ".join(f"{k}={v}" for k, v in self.extra.items())
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return f"{msg} [{ctx}]", kwargs


def op_logger(logger: logging.Logger, op: str, **context) -> ContextAdapter:
    """Return an adapter tagging records with op plus the given context."""
    return ContextAdapter(logger, {"op": op, **context})
