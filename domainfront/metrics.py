"""Prometheus metric definitions for the storefront backend."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# --- DNS ---

dns_lookups_total = Counter(
    "domainfront_dns_lookups_total",
    "DNS-over-HTTPS lookups by record type and outcome",
    labelnames=["record_type", "outcome"],
)

connection_checks_total = Counter(
    "domainfront_connection_checks_total",
    "Connection-state evaluations by resulting status",
    labelnames=["status"],
)

# --- Search challenge ---

challenge_verifications_total = Counter(
    "domainfront_challenge_verifications_total",
    "Search challenge verifications",
    labelnames=["outcome"],
)

# --- Collaborators ---

collaborator_request_seconds = Histogram(
    "domainfront_collaborator_request_seconds",
    "Time spent in outbound collaborator calls",
    labelnames=["collaborator", "action"],
    buckets=(0.1, 0.25, 0.5, 1, 2, 5, 10, 30),
)

# --- Payments ---

webhook_events_total = Counter(
    "domainfront_webhook_events_total",
    "Payment webhook events received",
    labelnames=["event", "outcome"],
)
