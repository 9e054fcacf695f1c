"""
Tests for the risk API endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from sentinel.config import settings
from sentinel.main import app

NOON_MS = 1735540200000  # 2024-12-30 12:00 Asia/Kolkata
DAY_MS = 86_400_000


@pytest.fixture
def client():
    """Test client with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


class TestEvaluateEndpoint:
    """Tests for POST /api/v1/risk/evaluate."""

    def test_suspicious_identifier(self, client):
        response = client.post(
            "/api/v1/risk/evaluate",
            json={"identifier": "test123@paytm", "timestamp": NOON_MS},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 42
        assert data["level"] == "warning"
        assert data["isRisky"] is True
        assert data["fraudType"] == "suspicious_pattern"
        assert data["description"] == "Matches known fraud patterns"
        assert data["recommendation"].startswith("WARNING")

    def test_trusted_merchant(self, client):
        response = client.post(
            "/api/v1/risk/evaluate", json={"identifier": "zomato@hdfcbank"}
        )

        data = response.json()
        assert data["score"] == 0
        assert data["level"] == "safe"
        assert data["reasons"] == ["Verified trusted merchant"]
        assert data["confidence"] == 95
        assert data["fraudType"] is None

    def test_history_and_context(self, client):
        priors = [
            {"identifier": "merchant@upi", "amount": 500, "timestamp": NOON_MS - (i + 1) * DAY_MS}
            for i in range(20)
        ]

        response = client.post(
            "/api/v1/risk/evaluate",
            json={
                "identifier": "merchant@upi",
                "amount": 500,
                "timestamp": NOON_MS,
                "priorTransactions": priors,
            },
        )

        data = response.json()
        assert data["score"] == 0
        assert data["reasons"] == [
            "Trusted merchant (20 previous scans)",
            "Consistent safe history with this merchant",
        ]

    def test_merchant_context(self, client):
        response = client.post(
            "/api/v1/risk/evaluate",
            json={
                "identifier": "ravi.kumar@okaxis",
                "merchant": {"safetyScore": 20, "verifiedReports": 7, "totalReports": 12},
                "nearbyReports": [{"severity": "critical"}],
            },
        )

        data = response.json()
        # first scan 15 + reputation 40 + nearby 35
        assert data["score"] == 90
        assert data["level"] == "danger"
        assert data["fraudType"] == "fake_merchant"

    def test_missing_identifier_is_unscored(self, client):
        response = client.post("/api/v1/risk/evaluate", json={"amount": 100})

        assert response.status_code == 422
        assert response.json()["level"] == "unknown"

    def test_negative_amount_rejected(self, client):
        response = client.post(
            "/api/v1/risk/evaluate", json={"identifier": "shop@ybl", "amount": -5}
        )
        assert response.status_code == 422
        assert response.json()["level"] == "unknown"

    def test_unknown_outcome_rejected(self, client):
        response = client.post(
            "/api/v1/risk/evaluate",
            json={
                "identifier": "shop@ybl",
                "priorTransactions": [
                    {"identifier": "shop@ybl", "timestamp": NOON_MS, "outcome": "fraud"}
                ],
            },
        )
        assert response.status_code == 422

    def test_timestamp_out_of_date_range(self, client):
        response = client.post(
            "/api/v1/risk/evaluate",
            json={"identifier": "shop@ybl", "timestamp": 10**18},
        )

        assert response.status_code == 422
        assert response.json()["level"] == "unknown"

    def test_too_many_priors(self, client, monkeypatch):
        monkeypatch.setattr(settings, "max_prior_transactions", 1)
        priors = [
            {"identifier": "shop@ybl", "timestamp": NOON_MS - i * DAY_MS} for i in range(1, 3)
        ]

        response = client.post(
            "/api/v1/risk/evaluate",
            json={"identifier": "shop@ybl", "priorTransactions": priors},
        )

        assert response.status_code == 422
        data = response.json()
        assert data["level"] == "unknown"
        assert "At most 1" in data["message"]


class TestScanEndpoint:
    """Tests for POST /api/v1/risk/scan."""

    def test_scan_scores_payee(self, client):
        response = client.post(
            "/api/v1/risk/scan",
            json={"qr": "upi://pay?pa=Test123@Paytm&pn=Quick%20Mart&mc=5411&tr=TXN42"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["payment"] == {
            "vpa": "test123@paytm",
            "payeeName": "Quick Mart",
            "merchantCode": "5411",
            "transactionRef": "TXN42",
        }
        assert data["verdict"]["score"] == 42

    def test_scan_trusted_payee(self, client):
        response = client.post(
            "/api/v1/risk/scan", json={"qr": "upi://pay?pa=swiggy@axisbank"}
        )

        data = response.json()
        assert data["payment"]["payeeName"] == "Unknown"
        assert data["verdict"]["level"] == "safe"

    @pytest.mark.parametrize(
        "qr", ["https://example.com/pay", "upi://pay?pn=Shop", "not a qr"]
    )
    def test_unparseable_qr(self, client, qr):
        response = client.post("/api/v1/risk/scan", json={"qr": qr})

        assert response.status_code == 422
        assert response.json()["level"] == "unknown"


class TestServiceEndpoints:
    """Tests for health and root endpoints."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["reference"] == {"blacklisted": 5, "trusted": 10}

    def test_root(self, client):
        assert client.get("/").json()["name"] == "Sentinel"

    def test_security_headers(self, client):
        response = client.get("/health")

        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert "X-Request-ID" in response.headers
