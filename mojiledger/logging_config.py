"""
Structured logging for the moji ledger.

Every line of one transition carries the same trace_id (a prefix of the
signer's public key) so a node's logs can be grepped per identity.

Environment Variables:
    MOJI_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL - default: INFO
    MOJI_LOG_FORMAT: json, text - default: json

Usage:
    from mojiledger.logging_config import setup_logging, get_logger, trace_id_for

    setup_logging()
    log = get_logger(__name__, trace_id=trace_id_for(txn.identity_hex), action=txn.action)
    log.info("Collection created", extra={"address": address})
"""

import logging
import os
import sys
from typing import Any, Optional

from pythonjsonlogger import jsonlogger

TRACE_ID_LENGTH = 16
NO_TRACE = "N/A"

JSON_FIELDS = "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s"
TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s [%(trace_id)s] %(message)s"


def trace_id_for(identity_hex: str) -> str:
    return identity_hex[:TRACE_ID_LENGTH] or NO_TRACE


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Install one stderr handler on the root logger.

    Arguments override MOJI_LOG_LEVEL / MOJI_LOG_FORMAT. stdout stays free
    for the CLI's --json output.
    """
    name = (level or os.getenv("MOJI_LOG_LEVEL", "INFO")).upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        resolved = logging.INFO
    fmt = (log_format or os.getenv("MOJI_LOG_FORMAT", "json")).lower()

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.addFilter(TraceIDFilter())
    if fmt == "json":
        handler.setFormatter(
            jsonlogger.JsonFormatter(
                JSON_FIELDS,
                rename_fields={"asctime": "timestamp", "name": "logger", "levelname": "level"},
            )
        )
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(handler)

    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


class ContextAdapter(logging.LoggerAdapter):
    """LoggerAdapter whose bound context is merged with each call's extra."""

    def process(self, msg: Any, kwargs: Any):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(name: str, trace_id: Optional[str] = None, **context: Any) -> ContextAdapter:
    """
    Logger bound to a trace_id and any extra context (action, address, ...).

    Fields passed per call through extra= are kept alongside the bound ones.
    """
    return ContextAdapter(logging.getLogger(name), {"trace_id": trace_id or NO_TRACE, **context})


class TraceIDFilter(logging.Filter):
    """Gives records from plain loggers a trace_id so both formats render."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = NO_TRACE  # type: ignore
        return True
