"""HTTP clients for external collaborators.

Each client:
- Accepts its endpoint and credentials in __init__
- Exposes an `is_available` property where credentials are required
- Uses httpx.AsyncClient per call
- The DNS client degrades to empty results; the others raise CollaboratorError
"""

from domainfront.clients.doh import DohClient
from domainfront.clients.paystack import PaystackClient
from domainfront.clients.whmcs import WhmcsClient

__all__ = [
    "DohClient",
    "PaystackClient",
    "WhmcsClient",
]
