"""Process-wide resolution metrics: request count, tier usage and mean latency."""
import threading
from typing import Dict

from exercise_resolver.core.models import PerformanceMetrics, TierName

# Tiers counted as "covered" by real catalog content
_COVERAGE_TIERS = (TierName.EXACT, TierName.FUZZY, TierName.SEMANTIC)


class MetricsTracker:
    """Thread-safe aggregate of pipeline calls."""

    def __init__(self):
        self._lock = threading.Lock()
        self._total_requests = 0
        self._tier_usage: Dict[TierName, int] = {tier: 0 for tier in TierName}
        self._average_elapsed_ms = 0.0

    def record(self, tier: TierName, elapsed_ms: float) -> None:
        """Count one finished pipeline call."""
        with self._lock:
            self._total_requests += 1
            self._tier_usage[tier] += 1
            # Incremental running mean
            self._average_elapsed_ms += (
                (elapsed_ms - self._average_elapsed_ms) / self._total_requests
            )

    def snapshot(self, cache_size: int = 0) -> PerformanceMetrics:
        with self._lock:
            total = self._total_requests
            usage = {tier.value: count for tier, count in self._tier_usage.items()}
            average = self._average_elapsed_ms

        covered = sum(usage[tier.value] for tier in _COVERAGE_TIERS)
        return PerformanceMetrics(
            total_requests=total,
            tier_usage_counts=usage,
            average_elapsed_ms=average,
            cache_size=cache_size,
            coverage_rate=covered / max(total, 1) * 100,
        )

    def reset(self) -> None:
        """Administrative reset (tests, maintenance)."""
        with self._lock:
            self._total_requests = 0
            self._tier_usage = {tier: 0 for tier in TierName}
            self._average_elapsed_ms = 0.0
