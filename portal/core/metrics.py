from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from threading import Lock


def _status_class(status_code: int) -> str:
    return f"{status_code // 100}xx"


@dataclass
class RouteStats:
    requests: int = 0
    duration_total_ms: float = 0.0
    duration_max_ms: float = 0.0
    status_classes: Counter = field(default_factory=Counter)

    def record(self, status_code: int, duration_ms: float) -> None:
        self.requests += 1
        self.duration_total_ms += duration_ms
        self.duration_max_ms = max(self.duration_max_ms, duration_ms)
        self.status_classes[_status_class(status_code)] += 1

    @property
    def errors(self) -> int:
        return self.status_classes["4xx"] + self.status_classes["5xx"]

    def as_dict(self) -> dict[str, object]:
        avg = self.duration_total_ms / self.requests if self.requests else 0.0
        return {
            "total_requests": self.requests,
            "error_count": self.errors,
            "avg_duration_ms": round(avg, 2),
            "max_duration_ms": round(self.duration_max_ms, 2),
            "status_classes": dict(sorted(self.status_classes.items())),
        }


class InMemoryRequestMetrics:
    """Per-route counters kept for the lifetime of the process."""

    def __init__(self) -> None:
        self._routes: dict[str, RouteStats] = {}
        self._lock = Lock()

    def observe(self, endpoint: str, method: str, status_code: int, duration_ms: float) -> None:
        with self._lock:
            self._routes.setdefault(f"{method} {endpoint}", RouteStats()).record(status_code, duration_ms)

    def snapshot(self) -> dict[str, dict[str, object]]:
        with self._lock:
            return {key: stats.as_dict() for key, stats in sorted(self._routes.items())}

    def reset(self) -> None:
        with self._lock:
            self._routes.clear()


request_metrics = InMemoryRequestMetrics()
