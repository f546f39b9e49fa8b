"""Checkout models: customers, order lines, payment initialization."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from domainfront.models.base import WireModel


class DomainOrderType(StrEnum):
    REGISTER = "register"
    TRANSFER = "transfer"


class CustomerData(WireModel):
    first_name: str
    last_name: str
    email: str
    address1: str
    city: str
    state: str
    postcode: str
    country: str
    phonenumber: str
    companyname: str = ""
    address2: str = ""


class OrderDomain(WireModel):
    """One normalized order line as sent to WHMCS ``AddOrder``."""

    domain: str
    domaintype: DomainOrderType = DomainOrderType.REGISTER
    regperiod: int = Field(default=1, ge=1)
    nameserver1: str
    nameserver2: str


class OrderResult(WireModel):
    order_id: str
    client_id: str
    is_new_client: bool
    domains: list[OrderDomain]
    payment_method: str


class PaymentInitialization(WireModel):
    authorization_url: str
    access_code: str
    reference: str
