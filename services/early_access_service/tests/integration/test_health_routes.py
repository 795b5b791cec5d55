"""Tests for the health and Prometheus metrics endpoints."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
from quart.typing import TestClientProtocol as QuartTestClient

from services.early_access_service.app import create_app
from services.early_access_service.config import Settings
from services.early_access_service.metrics import get_metrics
from services.early_access_service.tests.fakes import FakeClock


@pytest.mark.integration
class TestHealthRoutes:
    @pytest.fixture
    async def client(
        self, settings: Settings, clock: FakeClock
    ) -> AsyncGenerator[QuartTestClient, None]:
        app = create_app(settings, clock=clock)
        async with app.test_client() as client:
            yield client
        await app.container.close()

    async def test_healthz(self, client: QuartTestClient) -> None:
        response = await client.get("/healthz")

        assert response.status_code == 200
        data = await response.get_json()
        assert data["service"] == "early_access_service"
        assert data["status"] == "healthy"
        assert data["checks"] == {"email_provider": "mock", "rate_limit_backend": "memory"}

    async def test_metrics_exposes_service_counters(
        self, client: QuartTestClient, valid_signup_payload: dict[str, object]
    ) -> None:
        await client.post(
            "/api/early-access",
            json=valid_signup_payload,
            headers={"X-Forwarded-For": "192.0.2.50"},
        )

        response = await client.get("/metrics")

        assert response.status_code == 200
        body = await response.get_data(as_text=True)
        assert "early_access_signups_total" in body
        assert "early_access_emails_dispatched_total" in body
        assert "early_access_service_http_requests_total" in body

    async def test_unrouted_paths_share_one_endpoint_label(self, client: QuartTestClient) -> None:
        for i in range(25):
            response = await client.get(f"/nope/{i}")
            assert response.status_code == 404

        endpoints = {
            sample.labels["endpoint"]
            for metric in get_metrics()["request_count"].collect()
            for sample in metric.samples
            if "endpoint" in sample.labels
        }

        assert "unmatched" in endpoints
        assert not any(endpoint.startswith("/nope/") for endpoint in endpoints)

    async def test_routed_requests_are_labelled_by_route(
        self, client: QuartTestClient
    ) -> None:
        await client.get("/healthz")

        endpoints = {
            sample.labels["endpoint"]
            for metric in get_metrics()["request_count"].collect()
            for sample in metric.samples
            if "endpoint" in sample.labels
        }

        assert "/healthz" in endpoints
