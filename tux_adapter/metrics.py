"""
Tux Exchange Adapter - Metrics.

============================================================
PURPOSE
============================================================
In-process request metrics:
- Latency per remote method
- Success/failure counts
- Failure distribution by error type

============================================================
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Any, List

from .types import EXCHANGE_ID


logger = logging.getLogger(__name__)


@dataclass
class LatencyStats:
    """Latency statistics."""

    count: int = 0
    total_ms: float = 0.0
    min_ms: float = float("inf")
    max_ms: float = 0.0

    @property
    def avg_ms(self) -> float:
        return self.total_ms / self.count if self.count > 0 else 0.0

    def record(self, latency_ms: float) -> None:
        self.count += 1
        self.total_ms += latency_ms
        self.min_ms = min(self.min_ms, latency_ms)
        self.max_ms = max(self.max_ms, latency_ms)

    def to_dict(self) -> Dict[str, float]:
        return {
            "count": self.count,
            "avg_ms": self.avg_ms,
            "min_ms": self.min_ms if self.count else 0.0,
            "max_ms": self.max_ms,
        }


class AdapterMetrics:
    """Metrics collector for one adapter instance."""

    def __init__(self, exchange_id: str = EXCHANGE_ID, max_recent: int = 100):
        self._exchange_id = exchange_id
        self._max_recent = max_recent
        self.reset()

    def record_request(
        self,
        method: str,
        latency_ms: float,
        success: bool,
        status_code: int = None,
        error_type: str = None,
    ) -> None:
        """
        Record one remote call.

        Args:
            method: Remote method (e.g. "getticker")
            latency_ms: Round-trip latency
            success: Whether the call classified as success
            status_code: HTTP status, None on network failure
            error_type: Exception class name on failure
        """
        self._latency[method].record(latency_ms)
        self._latency["_all"].record(latency_ms)

        if success:
            self._success += 1
        else:
            self._failure += 1
            if error_type:
                self._errors[error_type] += 1

        self._recent.append({
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "method": method,
            "latency_ms": latency_ms,
            "success": success,
            "status_code": status_code,
            "error_type": error_type,
        })
        if len(self._recent) > self._max_recent:
            self._recent.pop(0)

    def get_summary(self) -> Dict[str, Any]:
        """Get metrics summary."""
        total = self._success + self._failure
        return {
            "exchange_id": self._exchange_id,
            "requests": {
                "total": total,
                "success": self._success,
                "failure": self._failure,
                "success_rate": self._success / total if total else 1.0,
            },
            "latency": self._latency["_all"].to_dict(),
            "errors": dict(self._errors),
        }

    def get_latency_by_method(self) -> Dict[str, Dict[str, float]]:
        """Latency stats keyed by remote method."""
        return {
            method: stats.to_dict()
            for method, stats in self._latency.items()
            if method != "_all"
        }

    def get_recent_requests(self, limit: int = 20) -> List[Dict[str, Any]]:
        return self._recent[-limit:]

    def reset(self) -> None:
        """Reset all metrics."""
        self._latency: Dict[str, LatencyStats] = defaultdict(LatencyStats)
        self._success = 0
        self._failure = 0
        self._errors: Dict[str, int] = defaultdict(int)
        self._recent: List[Dict[str, Any]] = []
