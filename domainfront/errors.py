"""Exception hierarchy shared by clients, services and the API boundary."""

from __future__ import annotations


class DomainfrontError(Exception):
    """Base class for all domainfront errors."""


class CollaboratorError(DomainfrontError):
    """An external collaborator (WHMCS, Paystack) failed or refused a call.

    ``message`` is safe to return to API callers; transport details stay in logs.
    """

    def __init__(self, collaborator: str, message: str) -> None:
        super().__init__(message)
        self.collaborator = collaborator
        self.message = message


class NotConfiguredError(CollaboratorError):
    """Credentials for a collaborator are missing."""


class InvalidRequestError(DomainfrontError, ValueError):
    """Caller supplied missing or malformed input."""


class ChallengeRejectedError(InvalidRequestError):
    """Search challenge did not verify. Never says which part failed."""

    def __init__(self) -> None:
        super().__init__("Invalid challenge response")


class SignatureError(InvalidRequestError):
    """Webhook signature missing or invalid."""


class NotFoundError(DomainfrontError):
    """A requested registrar record does not exist."""


class DnsLookupError(DomainfrontError):
    """The DNS-over-HTTPS resolver could not answer a lookup."""

    def __init__(self, record_type: str, message: str) -> None:
        super().__init__(message)
        self.record_type = record_type
