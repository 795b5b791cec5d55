"""Prometheus metrics for the Early Access Service.

Metrics are created once per process on the default registry and cached in a
module-level dictionary, so building several apps in one process (tests)
reuses the same collectors.
"""

from __future__ import annotations

from typing import Any

from prometheus_client import REGISTRY, Counter, Histogram
from tiktrend_service_libs.logging_utils import create_service_logger

logger = create_service_logger("early_access_service.metrics")

# Global metrics dictionary to avoid re-creation
_metrics: dict[str, Any] = {}

_METRIC_NAMES = {
    "request_count": "early_access_service_http_requests_total",
    "request_duration": "early_access_service_http_request_duration_seconds",
    "signups_total": "early_access_signups_total",
    "partial_deliveries_total": "early_access_partial_deliveries_total",
    "rate_limit_rejections_total": "early_access_rate_limit_rejections_total",
    "emails_dispatched_total": "early_access_emails_dispatched_total",
    "provider_response_time_seconds": "early_access_provider_response_time_seconds",
    "hook_requests_total": "early_access_hook_requests_total",
}


def _create_metrics() -> dict[str, Any]:
    """Create Prometheus metrics for the Early Access Service.

    Returns:
        Dictionary of metric instances keyed by metric name
    """
    try:
        metrics = {
            # HTTP operational metrics
            "request_count": Counter(
                _METRIC_NAMES["request_count"],
                "Total HTTP requests",
                ["method", "endpoint", "status_code"],
                registry=REGISTRY,
            ),
            "request_duration": Histogram(
                _METRIC_NAMES["request_duration"],
                "HTTP request duration in seconds",
                ["method", "endpoint"],
                registry=REGISTRY,
            ),
            # Intake outcomes
            "signups_total": Counter(
                _METRIC_NAMES["signups_total"],
                "Signup requests by outcome",
                ["outcome"],  # accepted/invalid/rate_limited/failed
                registry=REGISTRY,
            ),
            "partial_deliveries_total": Counter(
                _METRIC_NAMES["partial_deliveries_total"],
                "Failed signups where the operator was notified but the submitter was not",
                registry=REGISTRY,
            ),
            "rate_limit_rejections_total": Counter(
                _METRIC_NAMES["rate_limit_rejections_total"],
                "Requests rejected by the fixed-window rate limiter",
                ["action"],
                registry=REGISTRY,
            ),
            # Email provider metrics
            "emails_dispatched_total": Counter(
                _METRIC_NAMES["emails_dispatched_total"],
                "Notification emails handed to the provider",
                ["recipient_role", "status"],  # operator/submitter, success/error/timeout
                registry=REGISTRY,
            ),
            "provider_response_time_seconds": Histogram(
                _METRIC_NAMES["provider_response_time_seconds"],
                "Email provider response time in seconds",
                ["provider"],
                buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
                registry=REGISTRY,
            ),
            "hook_requests_total": Counter(
                _METRIC_NAMES["hook_requests_total"],
                "Hook generator proxy requests by outcome",
                ["outcome"],  # success/invalid/rate_limited/upstream_error
                registry=REGISTRY,
            ),
        }
        logger.info("Successfully created all Early Access Service metrics")
        return metrics

    except ValueError as e:
        if "Duplicated timeseries" in str(e):
            logger.warning(f"Metrics already exist in registry: {e}")
            return _get_existing_metrics()
        raise


def _get_existing_metrics() -> dict[str, Any]:
    """Look up already registered collectors by their metric names."""
    existing: dict[str, Any] = {}
    names_to_collectors = REGISTRY._names_to_collectors
    for key, metric_name in _METRIC_NAMES.items():
        collector = names_to_collectors.get(metric_name)
        if collector is not None:
            existing[key] = collector
    return existing


def get_metrics() -> dict[str, Any]:
    """Get or create Early Access Service metrics."""
    global _metrics

    if not _metrics:
        _metrics = _create_metrics()
    return _metrics


__all__ = ["get_metrics"]
