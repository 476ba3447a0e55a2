"""Integration tests for request correlation and log masking."""

import logging
import uuid

import pytest

from config.settings import mask_sensitive_data

pytestmark = pytest.mark.integration


class TestCorrelationIdMiddleware:
    def test_returns_provided_request_id(self, client):
        custom_id = "my-custom-request-id-123"
        response = client.get("/health", HTTP_X_REQUEST_ID=custom_id)
        assert response["X-Request-ID"] == custom_id

    def test_generates_uuid_when_no_request_id(self, client):
        response = client.get("/health")
        request_id = response["X-Request-ID"]
        assert str(uuid.UUID(request_id, version=4)) == request_id

    def test_api_client_fixture_header(self, api_client_with_correlation):
        client, cid = api_client_with_correlation
        response = client.get("/health")
        assert response["X-Request-ID"] == cid

    def test_correlation_id_in_logs(self, client, caplog):
        custom_id = "log-test-correlation-456"
        with caplog.at_level(logging.INFO):
            client.get("/health", HTTP_X_REQUEST_ID=custom_id)
        assert any(custom_id in record.getMessage() for record in caplog.records)


class TestSensitiveDataMasking:
    @pytest.mark.parametrize(
        "value, secret",
        [
            ("password='s3cret123'", "s3cret123"),
            ("token=abc123xyz", "abc123xyz"),
            ("authorization: Bearer-xyz", "Bearer-xyz"),
            ("contact ana@example.com now", "ana@example.com"),
        ],
    )
    def test_masks_secrets(self, value, secret):
        result = mask_sensitive_data(None, None, {"event": "test", "data": value})

        assert secret not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_non_sensitive_data_unchanged(self):
        event_dict = {"event": "order.created", "order_id": "0190-abc", "total": 3}
        result = mask_sensitive_data(None, None, dict(event_dict))
        assert result == event_dict
