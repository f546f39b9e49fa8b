"""Order placement in WHMCS and Paystack webhook handling."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from domainfront.clients.paystack import verify_webhook_signature
from domainfront.errors import CollaboratorError, InvalidRequestError, SignatureError
from domainfront.metrics import webhook_events_total
from domainfront.models.payment import (
    CustomerData,
    DomainOrderType,
    OrderDomain,
    OrderResult,
)

if TYPE_CHECKING:
    from domainfront.clients.whmcs import WhmcsClient

logger = structlog.get_logger()

REQUIRED_CUSTOMER_FIELDS = (
    "firstName",
    "lastName",
    "email",
    "address1",
    "city",
    "state",
    "postcode",
    "country",
    "phonenumber",
)


def validate_customer(data: Any) -> CustomerData:
    if not isinstance(data, dict):
        raise InvalidRequestError("Missing required fields: customerData and domains")
    for field in REQUIRED_CUSTOMER_FIELDS:
        if not data.get(field):
            raise InvalidRequestError(f"Missing required customer field: {field}")
    try:
        return CustomerData.model_validate(data)
    except ValidationError as exc:
        raise InvalidRequestError("Invalid customer data") from exc


def normalize_domains(items: Any, default_nameservers: tuple[str, ...]) -> list[OrderDomain]:
    """Accept the field spellings the checkout UI has used over time."""
    if not isinstance(items, list) or not items:
        raise InvalidRequestError("Missing required fields: customerData and domains")

    ns1 = default_nameservers[0] if default_nameservers else ""
    ns2 = default_nameservers[1] if len(default_nameservers) > 1 else ns1
    normalized: list[OrderDomain] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise InvalidRequestError(f"Domain name is required for domain at index {index}")
        name = item.get("name") or item.get("domain") or item.get("fullName")
        if not name:
            raise InvalidRequestError(f"Domain name is required for domain at index {index}")

        domain_type = item.get("domaintype") or item.get("domainType") or "register"
        if domain_type not in (DomainOrderType.REGISTER, DomainOrderType.TRANSFER):
            raise InvalidRequestError(
                f'Domain type must be either "register" or "transfer" for domain: {name}'
            )

        period = (
            item.get("regperiod") or item.get("registrationPeriod") or item.get("regPeriod") or 1
        )
        if isinstance(period, bool) or not isinstance(period, int) or period < 1:
            raise InvalidRequestError(
                f"Registration period must be a number greater than 0 for domain: {name}"
            )

        normalized.append(
            OrderDomain(
                domain=str(name),
                domaintype=DomainOrderType(domain_type),
                regperiod=period,
                nameserver1=item.get("nameserver1") or ns1,
                nameserver2=item.get("nameserver2") or ns2,
            )
        )
    return normalized


class OrderService:
    """Creates WHMCS clients and orders for paid carts."""

    def __init__(self, whmcs: WhmcsClient, default_nameservers: tuple[str, ...]) -> None:
        self.whmcs = whmcs
        self.default_nameservers = default_nameservers

    async def _find_client(self, email: str) -> str | None:
        try:
            response = await self.whmcs.call("GetClientsDetails", email=email)
        except CollaboratorError as exc:
            # WHMCS answers "Client Not Found" with result=error.
            logger.debug("No existing WHMCS client", error=exc.message)
            return None
        client_id = response.get("id") or response.get("userid")
        return str(client_id) if client_id else None

    async def _add_client(self, customer: CustomerData) -> str:
        response = await self.whmcs.call(
            "AddClient",
            firstname=customer.first_name,
            lastname=customer.last_name,
            email=customer.email,
            phonenumber=customer.phonenumber,
            companyname=customer.companyname,
            address1=customer.address1,
            address2=customer.address2,
            city=customer.city,
            state=customer.state,
            country=customer.country,
            postcode=customer.postcode,
        )
        client_id = response.get("clientid")
        if not client_id:
            raise CollaboratorError("whmcs", "Failed to create client")
        return str(client_id)

    async def create_order(
        self,
        customer_data: Any,
        domains: Any,
        payment_method: str = "paystack",
    ) -> OrderResult:
        """Validate the cart, reuse or create the client, then ``AddOrder``.

        Raises:
            InvalidRequestError: customer or domain data is incomplete.
            CollaboratorError: WHMCS refused or could not be reached.
        """
        customer = validate_customer(customer_data)
        lines = normalize_domains(domains, self.default_nameservers)

        client_id = await self._find_client(customer.email)
        is_new_client = client_id is None
        if client_id is None:
            client_id = await self._add_client(customer)
            logger.info("Created WHMCS client", client_id=client_id)
        else:
            logger.info("Using existing WHMCS client", client_id=client_id)

        response = await self.whmcs.call(
            "AddOrder",
            clientid=client_id,
            paymentmethod=payment_method,
            domains=[line.model_dump(mode="json") for line in lines],
        )
        order_id = response.get("orderid")
        if not order_id:
            raise CollaboratorError("whmcs", "Failed to create order in WHMCS")

        logger.info("Order created", order_id=order_id, client_id=client_id, domains=len(lines))
        return OrderResult(
            order_id=str(order_id),
            client_id=client_id,
            is_new_client=is_new_client,
            domains=lines,
            payment_method=payment_method,
        )

    async def handle_webhook(
        self,
        raw_body: bytes,
        signature: str | None,
        webhook_secret: str,
    ) -> OrderResult | None:
        """Process a Paystack webhook delivery.

        ``charge.success`` events carrying ``metadata.customer`` and
        ``metadata.domains`` create the order; every other event is only
        acknowledged. Returns the created order, if any.

        Raises:
            SignatureError: signature header missing or not matching the body.
        """
        if not signature:
            webhook_events_total.labels(event="unknown", outcome="rejected").inc()
            raise SignatureError("Missing signature")
        if not verify_webhook_signature(raw_body, signature, webhook_secret):
            webhook_events_total.labels(event="unknown", outcome="rejected").inc()
            raise SignatureError("Invalid signature")

        try:
            event = json.loads(raw_body)
        except ValueError as exc:
            raise InvalidRequestError("Invalid webhook payload") from exc
        if not isinstance(event, dict):
            raise InvalidRequestError("Invalid webhook payload")

        name = str(event.get("event", "unknown"))
        data = event.get("data") or {}
        metadata = data.get("metadata") if isinstance(data, dict) else None
        metadata = metadata if isinstance(metadata, dict) else {}

        if name == "charge.success" and metadata.get("customer") and metadata.get("domains"):
            order = await self.create_order(metadata["customer"], metadata["domains"])
            webhook_events_total.labels(event=name, outcome="order_created").inc()
            return order

        logger.info("Received Paystack webhook event", paystack_event=name)
        webhook_events_total.labels(event=name, outcome="acknowledged").inc()
        return None
