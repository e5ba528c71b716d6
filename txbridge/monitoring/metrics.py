"""
Metrics module for txbridge with a dedicated Prometheus registry.
"""
import threading
from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram


class MetricsManager:
    """Singleton metrics manager owning the translation metrics."""

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True
        self._registry = CollectorRegistry()
        self.translations_total = Counter(
            "txbridge_translations_total",
            "Translated legacy transactions by outcome",
            ["outcome"],
            registry=self._registry,
        )
        self.submission_duration_seconds = Histogram(
            "txbridge_submission_duration_seconds",
            "Duration of action submissions in seconds",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def record_translation(self, outcome: str) -> None:
        self.translations_total.labels(outcome=outcome).inc()

    def translation_count(self, outcome: str) -> float:
        value: Optional[float] = self._registry.get_sample_value(
            "txbridge_translations_total", {"outcome": outcome}
        )
        return value or 0.0


def get_metrics_manager() -> MetricsManager:
    return MetricsManager()
