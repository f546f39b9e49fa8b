"""Client for the Paystack payments API.

Checkout uses Paystack's hosted payment page: the backend initializes a
transaction, redirects the customer to ``authorization_url`` and later either
verifies the transaction by reference or receives a signed webhook.
API docs: https://paystack.com/docs/api/transaction/
"""

from __future__ import annotations

import hashlib
import hmac
import time
from typing import Any

import httpx
import structlog

from domainfront.errors import CollaboratorError, NotConfiguredError
from domainfront.metrics import collaborator_request_seconds
from domainfront.models.payment import PaymentInitialization

logger = structlog.get_logger()

_COLLABORATOR = "paystack"


def to_minor_units(amount: float) -> int:
    """Paystack amounts are integers in the currency's smallest unit (kobo)."""
    return int(round(amount * 100))


def verify_webhook_signature(raw_body: bytes, signature: str, secret: str) -> bool:
    """Check ``x-paystack-signature``: hex HMAC-SHA512 of the raw request body."""
    if not signature or not secret:
        return False
    expected = hmac.new(secret.encode(), raw_body, hashlib.sha512).hexdigest()
    return hmac.compare_digest(expected.encode(), signature.encode())


class PaystackClient:
    """Paystack transaction API client."""

    def __init__(
        self,
        secret_key: str = "",
        base_url: str = "https://api.paystack.co",
        currency: str = "NGN",
        timeout: float = 30.0,
    ) -> None:
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.currency = currency
        self.timeout = timeout

    @property
    def is_available(self) -> bool:
        return bool(self.secret_key)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, path: str, action: str, **kwargs: Any) -> dict[str, Any]:
        if not self.is_available:
            raise NotConfiguredError(_COLLABORATOR, "Paystack secret key not configured")

        start = time.monotonic()
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.request(
                    method, f"{self.base_url}{path}", headers=self._headers(), **kwargs
                )
                data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Paystack API unreachable", action=action, error=str(exc))
            raise CollaboratorError(_COLLABORATOR, "Failed to reach payment gateway") from exc
        finally:
            collaborator_request_seconds.labels(collaborator=_COLLABORATOR, action=action).observe(
                time.monotonic() - start
            )

        if not isinstance(data, dict):
            raise CollaboratorError(_COLLABORATOR, "Unexpected payment gateway response")
        return data

    async def initialize(
        self,
        amount: float,
        email: str,
        reference: str,
        callback_url: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> PaymentInitialization:
        """Create a transaction and return the hosted-page redirect details.

        Args:
            amount: Amount in major units (e.g. naira); converted to kobo.
            email: Customer email.
            reference: Caller-chosen unique transaction reference.
            callback_url: Where Paystack redirects after payment.
            metadata: Opaque data echoed back in the webhook
                (``customer`` and ``domains`` drive order creation).

        Raises:
            CollaboratorError: Paystack rejected the transaction.
        """
        payload: dict[str, Any] = {
            "amount": to_minor_units(amount),
            "email": email,
            "reference": reference,
            "currency": self.currency,
        }
        if callback_url:
            payload["callback_url"] = callback_url
        if metadata is not None:
            payload["metadata"] = metadata

        data = await self._request("POST", "/transaction/initialize", "initialize", json=payload)
        body = data.get("data")
        if not data.get("status") or not isinstance(body, dict):
            message = str(data.get("message") or "Failed to initialize payment")
            logger.warning("Paystack initialization failed", reference=reference, message=message)
            raise CollaboratorError(_COLLABORATOR, message)

        logger.info("Paystack transaction initialized", reference=reference)
        return PaymentInitialization(
            authorization_url=str(body.get("authorization_url", "")),
            access_code=str(body.get("access_code", "")),
            reference=str(body.get("reference", reference)),
        )

    async def verify(self, reference: str) -> dict[str, Any] | None:
        """Return the transaction data when it settled successfully, else None."""
        data = await self._request("GET", f"/transaction/verify/{reference}", "verify")
        body = data.get("data")
        if data.get("status") and isinstance(body, dict) and body.get("status") == "success":
            return body
        logger.info("Paystack transaction not successful", reference=reference)
        return None
