"""
Metrics Collection for the AI suggestion layer.

Counts MCP runs, provider failures and adapter fallbacks, and accumulates
time spent in model handlers.
"""

from typing import Dict, Any
from collections import defaultdict
from datetime import datetime, timezone
import threading


class MetricsCollector:
    """Collects and manages in-process metrics."""

    def __init__(self):
        """Initialize metrics collector."""
        self.metrics = defaultdict(int)
        self.timers = defaultdict(float)
        self.lock = threading.Lock()

        self.metrics["mcp_runs_total"] = 0
        self.metrics["mcp_provider_errors_total"] = 0
        self.metrics["mcp_unparsed_responses_total"] = 0
        self.metrics["mcp_fallbacks_total"] = 0

    def increment_counter(self, metric_name: str, value: int = 1):
        """Increment a counter metric."""
        with self.lock:
            self.metrics[metric_name] += value

    def record_timer(self, metric_name: str, duration: float):
        """Record a timing metric."""
        with self.lock:
            self.timers[metric_name] += duration

    def get_metrics(self) -> Dict[str, Any]:
        """Get current metrics values."""
        with self.lock:
            return {
                "counters": dict(self.metrics),
                "timers": dict(self.timers),
                "timestamp": datetime.now(timezone.utc).isoformat()
            }

    def mcp_run(self, operation: str):
        self.increment_counter("mcp_runs_total")
        self.increment_counter(f"mcp_runs_total.{operation}")

    def provider_error(self, model: str):
        self.increment_counter("mcp_provider_errors_total")
        self.increment_counter(f"mcp_provider_errors_total.{model}")

    def unparsed_response(self):
        self.increment_counter("mcp_unparsed_responses_total")

    def fallback_used(self, operation: str):
        """Record that an adapter returned its deterministic fallback."""
        self.increment_counter("mcp_fallbacks_total")
        self.increment_counter(f"mcp_fallbacks_total.{operation}")


# Global metrics instance
metrics_collector = MetricsCollector()


def get_metrics_collector() -> MetricsCollector:
    return metrics_collector
