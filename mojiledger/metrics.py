"""
Prometheus metrics for the moji ledger.

Environment Variables:
    MOJI_METRICS_ENABLED: Enable metrics server (true/false) - default: false
    MOJI_METRICS_PORT: HTTP port for /metrics endpoint - default: 8080

Usage:
    from mojiledger.metrics import start_metrics_server, track_transition

    start_metrics_server(enabled=True, port=8080)
    track_transition("CREATE_COLLECTION", "committed")
"""

import logging
import threading
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

TRANSITIONS_TOTAL = Counter(
    "moji_transitions_total",
    "Total number of applied transactions by outcome",
    labelnames=["action", "outcome"],
)

TRANSITION_DURATION = Histogram(
    "moji_transition_duration_seconds",
    "Duration of state transitions in seconds",
    labelnames=["action"],
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
)

REPLAY_DURATION = Histogram(
    "moji_replay_duration_seconds",
    "Duration of journal replay operations in seconds",
    buckets=(0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0),
)

_server_started = False
_server_lock = threading.Lock()


def start_metrics_server(enabled: bool, port: int) -> None:
    """
    Start Prometheus metrics HTTP server in a background thread.

    Args:
        enabled: Whether to start the server (from MOJI_METRICS_ENABLED)
        port: HTTP port for /metrics (from MOJI_METRICS_PORT)
    """
    global _server_started

    if not enabled:
        logger.info("Metrics server disabled (MOJI_METRICS_ENABLED=false)")
        return

    with _server_lock:
        if _server_started:
            return
        try:
            start_http_server(port, addr="0.0.0.0")
        except OSError as e:
            logger.error(f"Failed to start metrics server: {e}")
            return
        _server_started = True
        logger.info(f"Metrics server started on http://0.0.0.0:{port}/metrics")


@contextmanager
def track_transition_duration(action: str) -> Generator[None, None, None]:
    """
    Context manager for tracking transition duration.

    Usage:
        with track_transition_duration("CREATE_COLLECTION"):
            ...
    """
    with TRANSITION_DURATION.labels(action=action).time():
        yield


def track_transition(action: str, outcome: str) -> None:
    """
    Count one applied transaction.

    Args:
        action: Action discriminator
        outcome: committed, rejected or failed
    """
    TRANSITIONS_TOTAL.labels(action=action, outcome=outcome).inc()
