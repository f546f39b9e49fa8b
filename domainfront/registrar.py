"""Registrar operations backed by WHMCS: search, pricing and managed domains."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Any

import structlog

from domainfront.errors import CollaboratorError, InvalidRequestError, NotFoundError
from domainfront.models.registrar import (
    DomainLifecycle,
    DomainSearchResult,
    DomainStatus,
    ExpiryStatus,
    ManagedDomain,
    RenewalPricing,
    RenewalResult,
    TldPricing,
)

if TYPE_CHECKING:
    from domainfront.clients.doh import DohClient
    from domainfront.clients.whmcs import WhmcsClient

logger = structlog.get_logger()

POPULAR_TLDS = (".com", ".net", ".org", ".ng", ".com.ng", ".co.uk", ".info", ".biz")

MAX_RENEWAL_YEARS = 10


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _to_float(value: object) -> float | None:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def _parse_date(value: str | None) -> date | None:
    if not value or value.startswith("0000"):
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def days_until(expiry_date: str | None, today: date | None = None) -> int | None:
    expiry = _parse_date(expiry_date)
    if expiry is None:
        return None
    return (expiry - (today or datetime.now(UTC).date())).days


def expiry_status(expiry_date: str, today: date | None = None) -> ExpiryStatus:
    """Classify how close a domain is to expiring.

    Negative days are ``expired``; a week or less is critical, a month or
    less a warning, anything later is ``active``.
    """
    days = days_until(expiry_date, today)
    if days is None:
        raise InvalidRequestError(f"Invalid expiry date: {expiry_date}")
    if days < 0:
        return ExpiryStatus(days_until_expiry=days, status="expired", urgency="critical")
    if days <= 7:
        return ExpiryStatus(days_until_expiry=days, status="expiring", urgency="critical")
    if days <= 30:
        return ExpiryStatus(days_until_expiry=days, status="expiring", urgency="warning")
    return ExpiryStatus(days_until_expiry=days, status="active", urgency="normal")


def _domains_array(response: dict[str, Any]) -> list[dict[str, Any]]:
    """WHMCS nests the list as ``domains`` or ``domains.domain`` depending on version."""
    raw = response.get("domains")
    if isinstance(raw, dict):
        raw = raw.get("domain")
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, dict)]


def _nameservers(row: dict[str, Any]) -> list[str]:
    return [str(row[key]) for key in ("ns1", "ns2", "ns3", "ns4") if row.get(key)]


class Registrar:
    """Availability search and client-domain management over WHMCS."""

    def __init__(self, whmcs: WhmcsClient, dns: DohClient | None = None) -> None:
        self.whmcs = whmcs
        self.dns = dns

    # ------------------------------------------------------------------
    # Search and pricing
    # ------------------------------------------------------------------

    async def tld_pricing(self, domain: str) -> TldPricing | None:
        """One-year registration/renewal price for the domain's last label."""
        tld = domain.rsplit(".", 1)[-1].lower() if "." in domain else ""
        if not tld:
            logger.warning("Invalid domain format for pricing", domain=domain)
            return None
        try:
            response = await self.whmcs.call("GetTLDPricing", tld=tld)
        except CollaboratorError as exc:
            logger.warning("TLD pricing lookup failed", tld=tld, error=exc.message)
            return None

        pricing = response.get("pricing") or {}
        tld_data = pricing.get(tld) or pricing.get(f".{tld}")
        register = (tld_data or {}).get("register") or {}
        price = _to_float(register.get("1"))
        if price is None:
            logger.warning("No pricing data for TLD", tld=tld)
            return None

        renew = (tld_data or {}).get("renew") or {}
        currency = (response.get("currency") or {}).get("code") or "USD"
        return TldPricing(price=price, currency=currency, renewal_price=_to_float(renew.get("1")))

    async def check_availability(self, domain: str) -> DomainSearchResult:
        """Availability via ``DomainWhois``; an empty whois body means available.

        Raises:
            CollaboratorError: WHMCS could not be reached.
        """
        response = await self.whmcs.call_raw("DomainWhois", domain=domain)
        if response.get("result") != "success":
            logger.info("DomainWhois did not succeed", domain=domain)
            return DomainSearchResult(domain=domain, available=False)

        available = not response.get("whois")
        pricing = await self.tld_pricing(domain) if available else None
        logger.info("Domain availability checked", domain=domain, available=available)
        return DomainSearchResult(
            domain=domain,
            available=available,
            price=pricing.price if pricing else 0,
            currency=pricing.currency if pricing else "USD",
            registration_period=1,
            renewal_price=pricing.renewal_price if pricing else None,
        )

    async def renewal_pricing(self, domain: str) -> RenewalPricing:
        """Renewal price keyed by everything after the first label (``.com.ng``)."""
        tld = "." + ".".join(domain.split(".")[1:])
        try:
            response = await self.whmcs.call("GetTLDPricing")
        except CollaboratorError as exc:
            logger.warning("Renewal pricing lookup failed", domain=domain, error=exc.message)
            return RenewalPricing(price=0, currency="NGN")

        pricing = response.get("pricing") or {}
        tld_data = pricing.get(tld) or pricing.get(tld.lstrip("."))
        if not tld_data:
            return RenewalPricing(price=0, currency="NGN")
        renew = tld_data.get("renew") or {}
        price = _to_float(renew.get("1") or renew.get("2") or "0") or 0
        currency = (response.get("currency") or {}).get("code") or "NGN"
        return RenewalPricing(price=price, currency=currency)

    @staticmethod
    def suggestions(base: str) -> list[str]:
        label = base.strip().lower().split(".", 1)[0]
        if not label:
            raise InvalidRequestError("Domain name is required")
        return [f"{label}{tld}" for tld in POPULAR_TLDS]

    # ------------------------------------------------------------------
    # Managed domains
    # ------------------------------------------------------------------

    def _managed(self, row: dict[str, Any]) -> ManagedDomain:
        return ManagedDomain(
            id=str(row.get("id", "")),
            domain=str(row.get("domainname") or row.get("domain") or ""),
            status=DomainLifecycle.from_whmcs(str(row.get("status", ""))),
            registration_date=row.get("regdate"),
            expiry_date=row.get("nextduedate") or row.get("expirydate"),
            auto_renew=str(row.get("donotrenew", "")) == "0",
            nameservers=_nameservers(row),
            registrar=row.get("registrar") or "Unknown",
            renewal_price=_to_float(row.get("recurringamount")) or 0,
            currency="NGN",
            last_checked=_now_iso(),
        )

    async def list_client_domains(self, client_id: str) -> list[ManagedDomain]:
        response = await self.whmcs.call("GetClientsDomains", clientid=client_id, limitnum=1000)
        return [self._managed(row) for row in _domains_array(response)]

    async def get_domain(self, domain_id: str) -> ManagedDomain:
        """One managed domain, enriched with its live DNS records.

        Raises:
            NotFoundError: WHMCS has no domain with that id.
        """
        response = await self.whmcs.call("GetClientsDomains", domainid=domain_id)
        rows = _domains_array(response)
        if not rows:
            raise NotFoundError("Domain not found")
        managed = self._managed(rows[0])
        if self.dns is None:
            return managed
        records = await self.dns.resolve_records(managed.domain)
        return managed.model_copy(update={"dns_records": records})

    async def domain_status(self, domain: str) -> DomainStatus:
        response = await self.whmcs.call("GetClientsDomains", domain=domain)
        rows = _domains_array(response)
        if not rows:
            raise NotFoundError("Domain not found")
        row = rows[0]
        expiry = row.get("nextduedate")
        expiry_info = expiry_status(expiry) if _parse_date(expiry) else None
        return DomainStatus(
            domain=str(row.get("domainname") or row.get("domain") or domain),
            status=DomainLifecycle.from_whmcs(str(row.get("status", ""))),
            expiry_date=expiry,
            days_until_expiry=expiry_info.days_until_expiry if expiry_info else None,
            urgency=expiry_info.urgency if expiry_info else None,
            auto_renew=str(row.get("donotrenew", "")) == "0",
            nameservers=_nameservers(row),
            last_checked=_now_iso(),
        )

    async def renew(self, domain_id: str, period: int, auto_renew: bool = False) -> RenewalResult:
        if not 1 <= period <= MAX_RENEWAL_YEARS:
            raise InvalidRequestError(
                f"Renewal period must be between 1 and {MAX_RENEWAL_YEARS} years"
            )
        try:
            response = await self.whmcs.call("DomainRenew", domainid=domain_id, regperiod=period)
            if auto_renew:
                await self.update_auto_renew(domain_id, True)
        except CollaboratorError as exc:
            logger.warning("Domain renewal failed", domain_id=domain_id, error=exc.message)
            return RenewalResult(
                success=False, message="Failed to renew domain", error=exc.message
            )

        order_id = response.get("orderid")
        logger.info("Domain renewal ordered", domain_id=domain_id, period=period)
        return RenewalResult(
            success=True,
            message="Domain renewal order created successfully",
            order_id=str(order_id) if order_id is not None else None,
        )

    async def update_auto_renew(self, domain_id: str, auto_renew: bool) -> None:
        await self.whmcs.call("UpdateClientDomain", domainid=domain_id, donotrenew=not auto_renew)
        logger.info("Auto-renewal updated", domain_id=domain_id, auto_renew=auto_renew)

    async def update_nameservers(self, domain_id: str, nameservers: list[str]) -> None:
        servers = [ns for ns in nameservers if ns]
        if not servers:
            raise InvalidRequestError("At least one nameserver is required")
        if len(servers) > 5:
            raise InvalidRequestError("At most five nameservers are supported")
        params = {f"ns{index}": ns for index, ns in enumerate(servers, start=1)}
        await self.whmcs.call("UpdateClientDomain", domainid=domain_id, **params)
        logger.info("Nameservers updated", domain_id=domain_id, nameservers=servers)
