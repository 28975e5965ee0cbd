"""Delivery statistics for the component logger.

Counts what happened to each event handed to a Logger:
- delivered to the remote endpoint
- degraded to the local fallback sink
- which exception types caused the degradation

Thread-safe; one DeliveryStats is usually shared by every Logger bound to
the same session.

Example:
    stats = DeliveryStats()
    logger = create_logger(config, stats=stats)

    await logger.info("Component initialized")

    summary = stats.get_summary()
    print(f"Delivery rate: {summary.delivery_rate:.1%}")
"""

from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


def _utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


@dataclass
class DeliverySummary:
    """Snapshot of delivery statistics.

    Attributes:
        delivered: Events accepted by the remote endpoint, per level.
        fallback: Events written to the fallback sink, per level.
        failure_counts: Degradations by exception type name.
        total_delivered: Sum of ``delivered``.
        total_fallback: Sum of ``fallback``.
        delivery_rate: total_delivered / all events (0.0 when empty).
        session_fallback: True if the session id was generated locally.
        last_failure_time: Time of the most recent degradation.
        uptime_seconds: Seconds since creation or last reset.
    """

    delivered: dict[str, int] = field(default_factory=dict)
    fallback: dict[str, int] = field(default_factory=dict)
    failure_counts: dict[str, int] = field(default_factory=dict)
    total_delivered: int = 0
    total_fallback: int = 0
    delivery_rate: float = 0.0
    session_fallback: bool = False
    last_failure_time: datetime | None = None
    uptime_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert the summary to JSON-compatible types.

        Returns:
            Dict with every attribute; ``last_failure_time`` is ISO text
            or None.
        """
        return {
            "delivered": dict(self.delivered),
            "fallback": dict(self.fallback),
            "failure_counts": dict(self.failure_counts),
            "total_delivered": self.total_delivered,
            "total_fallback": self.total_fallback,
            "delivery_rate": self.delivery_rate,
            "session_fallback": self.session_fallback,
            "last_failure_time": (
                self.last_failure_time.isoformat() if self.last_failure_time else None
            ),
            "uptime_seconds": self.uptime_seconds,
        }


class DeliveryStats:
    """Thread-safe counters for remote delivery outcomes."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._delivered: Counter[str] = Counter()
        self._fallback: Counter[str] = Counter()
        self._failures: Counter[str] = Counter()
        self._session_fallback = False
        self._last_failure_time: datetime | None = None
        self._start_time = _utc_now()

    def record_delivered(self, level: str) -> None:
        """Count one event accepted by the remote endpoint."""
        with self._lock:
            self._delivered[level] += 1

    def record_fallback(self, level: str, error: BaseException | None = None) -> None:
        """Count one event degraded to the fallback sink.

        Args:
            level: Level string of the event.
            error: Exception that caused the degradation, if any. Its type
                name is counted in ``failure_counts``.
        """
        with self._lock:
            self._fallback[level] += 1
            if error is not None:
                self._failures[type(error).__name__] += 1
            self._last_failure_time = _utc_now()

    def record_session_fallback(self) -> None:
        """Note that the session id was generated locally."""
        with self._lock:
            self._session_fallback = True

    def get_summary(self) -> DeliverySummary:
        """Compute a snapshot of the current counters.

        Returns:
            DeliverySummary. Counters keep running after the call.
        """
        with self._lock:
            total_delivered = sum(self._delivered.values())
            total_fallback = sum(self._fallback.values())
            total = total_delivered + total_fallback
            return DeliverySummary(
                delivered=dict(self._delivered),
                fallback=dict(self._fallback),
                failure_counts=dict(self._failures),
                total_delivered=total_delivered,
                total_fallback=total_fallback,
                delivery_rate=total_delivered / total if total else 0.0,
                session_fallback=self._session_fallback,
                last_failure_time=self._last_failure_time,
                uptime_seconds=(_utc_now() - self._start_time).total_seconds(),
            )

    def reset(self) -> None:
        """Clear all counters and restart the uptime clock."""
        with self._lock:
            self._delivered.clear()
            self._fallback.clear()
            self._failures.clear()
            self._session_fallback = False
            self._last_failure_time = None
            self._start_time = _utc_now()

    def to_dict(self) -> dict[str, Any]:
        """Shortcut for ``get_summary().to_dict()``."""
        return self.get_summary().to_dict()
