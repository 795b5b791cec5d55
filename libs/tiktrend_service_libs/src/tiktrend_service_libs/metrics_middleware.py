"""Prometheus request metrics for TikTrend Quart services.

Requests are labelled by the matched route template (``/api/hooks``), never by
the raw path, so the number of label values is bounded by the route table.
Requests that match no route share the ``unmatched`` label.
"""

from __future__ import annotations

import time
from typing import Any

from quart import Quart, Response, current_app, g, request

from tiktrend_service_libs.logging_utils import create_service_logger

UNMATCHED_ENDPOINT = "unmatched"


def endpoint_label() -> str:
    """Route template of the current request, or ``unmatched``."""
    rule = request.url_rule
    return rule.rule if rule is not None else UNMATCHED_ENDPOINT


def _service_metrics() -> dict[str, Any]:
    extensions = getattr(current_app, "extensions", None) or {}
    return extensions.get("metrics") or {}


def setup_request_metrics_middleware(
    app: Quart,
    service_name: str,
    count_key: str = "request_count",
    duration_key: str = "request_duration",
) -> None:
    """Count requests and observe their duration.

    The collectors are looked up in ``app.extensions["metrics"]`` under
    ``count_key`` (labels: method, endpoint, status_code) and ``duration_key``
    (labels: method, endpoint). A missing collector is skipped.
    """
    logger = create_service_logger(f"{service_name}.metrics")

    @app.before_request
    async def start_request_timer() -> None:
        g.request_started = time.perf_counter()

    @app.after_request
    async def record_request_metrics(response: Response) -> Response:
        started = getattr(g, "request_started", None)
        metrics = _service_metrics()
        if started is None or not metrics:
            return response

        try:
            elapsed = time.perf_counter() - started
            endpoint = endpoint_label()

            counter = metrics.get(count_key)
            if counter:
                counter.labels(
                    method=request.method,
                    endpoint=endpoint,
                    status_code=str(response.status_code),
                ).inc()

            histogram = metrics.get(duration_key)
            if histogram:
                histogram.labels(method=request.method, endpoint=endpoint).observe(elapsed)
        except Exception as e:
            # Metrics must never turn a served response into an error
            logger.error(f"Error recording request metrics: {e}")

        return response
