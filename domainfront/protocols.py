"""Port interfaces (Protocols) for the pluggable seams."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from domainfront.models.dns import DNSRecord, RecordType


@runtime_checkable
class MacSigner(Protocol):
    """Keyed message authentication used by the search challenge."""

    def sign(self, message: str) -> str: ...


@runtime_checkable
class DnsResolver(Protocol):
    """Record lookup used by the connection evaluator.

    An empty list means no records; a failed lookup raises instead.
    """

    async def lookup(self, domain: str, record_type: RecordType) -> list[DNSRecord]: ...
