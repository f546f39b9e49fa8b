"""Tests for the challenge-gated domain search endpoints."""

from __future__ import annotations

import hashlib
import hmac

import httpx
import pytest
import respx
from fastapi.testclient import TestClient

from tests.helpers import WHMCS_URL, whmcs_dispatch

SECRET = "test-challenge-secret"


def _sig(a: int, b: int, challenge_id: str) -> str:
    return hmac.new(SECRET.encode(), f"{a}:{b}:{challenge_id}".encode(), hashlib.sha256).hexdigest()


def _body(answer: object, challenge_id: str = "abc123", sig: str | None = None) -> dict:
    return {
        "domain": "Example.com",
        "answer": answer,
        "challengeId": challenge_id,
        "sig": sig if sig is not None else _sig(3, 4, challenge_id),
    }


WHOIS_AVAILABLE = {
    "DomainWhois": {"result": "success", "status": "available", "whois": ""},
    "GetTLDPricing": {
        "result": "success",
        "currency": {"code": "NGN"},
        "pricing": {"com": {"register": {"1": "15000.00"}, "renew": {"1": "16000.00"}}},
    },
}


class TestIssueChallenge:
    def test_issue(self, client: TestClient):
        resp = client.get("/domains/search")
        assert resp.status_code == 200
        data = resp.json()
        assert set(data) == {"a", "b", "challengeId", "sig"}
        assert 1 <= data["a"] <= 9
        assert 1 <= data["b"] <= 9
        assert data["sig"] == _sig(data["a"], data["b"], data["challengeId"])

    def test_issued_challenge_can_be_answered(self, client: TestClient):
        challenge = client.get("/domains/search").json()
        with respx.mock:
            respx.post(WHMCS_URL).mock(side_effect=whmcs_dispatch(WHOIS_AVAILABLE))
            resp = client.post(
                "/domains/search",
                json={
                    "domain": "example.com",
                    "answer": challenge["a"] + challenge["b"],
                    "challengeId": challenge["challengeId"],
                    "sig": challenge["sig"],
                },
            )
        assert resp.status_code == 200


class TestSearch:
    @respx.mock
    def test_correct_answer_returns_availability(self, client: TestClient):
        seen: list[dict[str, str]] = []
        respx.post(WHMCS_URL).mock(side_effect=whmcs_dispatch(WHOIS_AVAILABLE, seen))
        resp = client.post("/domains/search", json=_body(7))

        assert resp.status_code == 200
        assert resp.json() == {
            "domain": "example.com",
            "available": True,
            "price": 15000.0,
            "currency": "NGN",
            "registrationPeriod": 1,
            "renewalPrice": 16000.0,
        }
        assert seen[0]["domain"] == "example.com"

    @respx.mock
    def test_integral_float_answer_accepted(self, client: TestClient) -> None:
        """A JSON number like 7.0 is accepted as the answer 7."""
        respx.post(WHMCS_URL).mock(side_effect=whmcs_dispatch(WHOIS_AVAILABLE))
        resp = client.post("/domains/search", json=_body(7.0))
        assert resp.status_code == 200
        assert resp.json()["available"] is True

    def test_fractional_answer_rejected(self, client: TestClient) -> None:
        """7.5 is not a whole number and fails validation."""
        resp = client.post("/domains/search", json=_body(7.5))
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Challenge validation failed"}

    def test_wrong_answer_rejected(self, client: TestClient):
        resp = client.post("/domains/search", json=_body(8))
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Invalid challenge response"}

    def test_forged_signature_rejected(self, client: TestClient):
        resp = client.post("/domains/search", json=_body(7, sig="0" * 64))
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid challenge response"

    def test_missing_domain(self, client: TestClient):
        body = _body(7)
        body["domain"] = " "
        resp = client.post("/domains/search", json=body)
        assert resp.status_code == 400
        assert resp.json()["error"] == "Domain parameter is required"

    @pytest.mark.parametrize(
        "body",
        [
            _body("7"),
            _body(None),
            _body(True),
            _body(7, challenge_id=""),
            _body(7, sig=""),
        ],
    )
    def test_malformed_challenge_fields(self, client: TestClient, body: dict):
        resp = client.post("/domains/search", json=body)
        assert resp.status_code == 400
        assert resp.json()["error"] == "Challenge validation failed"

    def test_non_json_body(self, client: TestClient):
        resp = client.post(
            "/domains/search", content=b"domain=x", headers={"Content-Type": "text/plain"}
        )
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Invalid request body"}

    @respx.mock
    def test_registrar_unreachable(self, client: TestClient):
        respx.post(WHMCS_URL).mock(side_effect=httpx.ConnectError("refused"))
        resp = client.post("/domains/search", json=_body(7))
        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": "Failed to connect to WHMCS API"}


class TestSuggestions:
    def test_suggestions(self, client: TestClient):
        resp = client.get("/domains/suggestions", params={"name": "myshop"})
        assert resp.status_code == 200
        assert resp.json()[:3] == ["myshop.com", "myshop.net", "myshop.org"]

    def test_name_required(self, client: TestClient):
        assert client.get("/domains/suggestions").status_code == 400
