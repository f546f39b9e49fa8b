"""Client for the WHMCS billing/registrar API.

WHMCS exposes a single RPC endpoint (``/includes/api.php``). Every call is a
form-encoded POST carrying the API credentials, ``responsetype=json`` and an
``action`` name; the JSON response always has ``result`` set to ``success`` or
``error``. API docs: https://developers.whmcs.com/api/
"""

from __future__ import annotations

import time
from typing import Any

import httpx
import structlog

from domainfront.errors import CollaboratorError, NotConfiguredError
from domainfront.metrics import collaborator_request_seconds

logger = structlog.get_logger()

_COLLABORATOR = "whmcs"


def encode_params(params: dict[str, Any]) -> dict[str, str]:
    """Flatten call parameters into WHMCS form fields.

    Lists become indexed fields (``domain[0]``, ``domain[1]``); a list of dicts
    is spread per key, which is how ``AddOrder`` takes multiple domains.
    Booleans are sent as ``1``/``0`` and ``None`` values are dropped.
    """
    fields: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, list):
            for index, item in enumerate(value):
                if isinstance(item, dict):
                    for sub_key, sub_value in item.items():
                        if sub_value is not None:
                            fields[f"{sub_key}[{index}]"] = _scalar(sub_value)
                else:
                    fields[f"{key}[{index}]"] = _scalar(item)
        else:
            fields[key] = _scalar(value)
    return fields


def _scalar(value: object) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


class WhmcsClient:
    """Thin RPC wrapper. Raises CollaboratorError on any failed call."""

    def __init__(
        self,
        api_url: str = "",
        identifier: str = "",
        secret: str = "",
        access_key: str = "",
        timeout: float = 30.0,
    ) -> None:
        self.api_url = api_url
        self.identifier = identifier
        self.secret = secret
        self.access_key = access_key
        self.timeout = timeout

    @property
    def is_available(self) -> bool:
        return bool(self.api_url and self.identifier and self.secret)

    def _auth_fields(self) -> dict[str, str]:
        fields = {
            "identifier": self.identifier,
            "secret": self.secret,
            "responsetype": "json",
        }
        if self.access_key:
            fields["accesskey"] = self.access_key
        return fields

    async def call_raw(self, action: str, **params: Any) -> dict[str, Any]:
        """Invoke *action* and return the decoded body without checking ``result``.

        Raises:
            NotConfiguredError: API URL or credentials are missing.
            CollaboratorError: transport failure, non-2xx status or undecodable body.
        """
        if not self.is_available:
            raise NotConfiguredError(_COLLABORATOR, "WHMCS API credentials not configured")

        form = {**self._auth_fields(), "action": action, **encode_params(params)}
        logger.debug("WHMCS API call", action=action, domain=params.get("domain"))

        start = time.monotonic()
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self.api_url, data=form)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "WHMCS API returned error status",
                action=action,
                status=exc.response.status_code,
            )
            raise CollaboratorError(
                _COLLABORATOR,
                f"WHMCS API request failed with status: {exc.response.status_code}",
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("WHMCS API unreachable", action=action, error=str(exc))
            raise CollaboratorError(_COLLABORATOR, "Failed to connect to WHMCS API") from exc
        finally:
            collaborator_request_seconds.labels(collaborator=_COLLABORATOR, action=action).observe(
                time.monotonic() - start
            )

        if not isinstance(data, dict):
            raise CollaboratorError(_COLLABORATOR, "Unexpected WHMCS API response")
        return data

    async def call(self, action: str, **params: Any) -> dict[str, Any]:
        """Like call_raw, but ``result == "error"`` raises CollaboratorError
        carrying the WHMCS message."""
        data = await self.call_raw(action, **params)
        if data.get("result") == "error":
            message = str(data.get("message") or "WHMCS API error")
            logger.info("WHMCS API refused call", action=action, message=message)
            raise CollaboratorError(_COLLABORATOR, message)
        return data
