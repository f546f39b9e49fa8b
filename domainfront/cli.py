"""Click CLI entry point for Domainfront."""

from __future__ import annotations

import asyncio
import json
import sys

import click

from domainfront.challenge import ChallengeGate, HmacSigner
from domainfront.clients.doh import DohClient
from domainfront.clients.whmcs import WhmcsClient
from domainfront.config import Settings
from domainfront.connection import ConnectionEvaluator
from domainfront.errors import CollaboratorError
from domainfront.logging import configure_logging
from domainfront.models.connection import ServiceType, VerificationStatus
from domainfront.models.dns import RecordType
from domainfront.poller import VerificationPoller, http_verification_check
from domainfront.registrar import Registrar


def _dns(settings: Settings) -> DohClient:
    return DohClient(base_url=settings.doh_url, timeout=settings.dns_timeout)


def _evaluator(settings: Settings) -> ConnectionEvaluator:
    return ConnectionEvaluator(_dns(settings), settings.platform_target())


def _echo_json(data: object) -> None:
    click.echo(json.dumps(data, indent=2))


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Domainfront: domain registration storefront backend."""
    ctx.ensure_object(dict)
    settings = Settings()
    log_level = "DEBUG" if verbose else settings.log_level
    configure_logging(log_level=log_level, log_format=settings.log_format)
    ctx.obj["settings"] = settings
    ctx.obj["verbose"] = verbose


@cli.command()
@click.pass_context
def challenge(ctx: click.Context) -> None:
    """Issue a search challenge (as GET /domains/search would)."""
    settings = ctx.obj["settings"]
    gate = ChallengeGate(HmacSigner(settings.effective_challenge_secret))
    issued = gate.issue()
    click.echo(issued.prompt)
    _echo_json(issued.model_dump(by_alias=True))


@cli.command()
@click.argument("domain")
@click.option(
    "--service-type",
    type=click.Choice([t.value for t in ServiceType], case_sensitive=False),
    default=ServiceType.HOSTING.value,
    help="Which DNS setup to generate instructions for",
)
@click.pass_context
def connect(ctx: click.Context, domain: str, service_type: str) -> None:
    """Print connection instructions and the current DNS state for DOMAIN."""
    evaluator = _evaluator(ctx.obj["settings"])
    result = asyncio.run(evaluator.evaluate(domain.lower(), ServiceType(service_type)))
    if not result.success:
        click.echo(f"Connection check failed: {result.error}", err=True)
        sys.exit(1)

    for line in result.instructions:
        click.echo(line)
    click.echo(f"\nStatus: {result.verification_status.value}")


@cli.command()
@click.argument("domain")
@click.pass_context
def verify(ctx: click.Context, domain: str) -> None:
    """Check once whether DOMAIN already points at the platform."""
    evaluator = _evaluator(ctx.obj["settings"])
    result = asyncio.run(evaluator.verify(domain.lower()))
    _echo_json(result.model_dump(mode="json", by_alias=True, exclude_none=True))
    if result.status is VerificationStatus.FAILED:
        sys.exit(1)


@cli.command()
@click.argument("domain")
@click.option("--api-url", default=None, help="Base URL of a running API")
@click.option("--interval", default=None, type=float, help="Seconds between checks")
@click.option("--timeout", default=None, type=float, help="Give up after this many seconds")
@click.pass_context
def watch(
    ctx: click.Context,
    domain: str,
    api_url: str | None,
    interval: float | None,
    timeout: float | None,
) -> None:
    """Poll verification for DOMAIN until verified, failed or timed out."""
    settings = ctx.obj["settings"]
    base_url = api_url or f"http://{settings.api_host}:{settings.api_port}"

    def _report(status: VerificationStatus, tick: int) -> None:
        click.echo(f"  check {tick}: {status.value}")

    poller = VerificationPoller(
        http_verification_check(base_url, domain.lower(), timeout=settings.http_timeout),
        interval=interval if interval is not None else settings.verify_poll_interval,
        timeout=timeout if timeout is not None else settings.verify_poll_timeout,
        on_status=_report,
    )
    click.echo(f"Watching {domain} via {base_url} ...")
    outcome = asyncio.run(poller.run())
    if outcome.timed_out:
        click.echo(f"Gave up after {outcome.ticks} checks; still {outcome.status.value}.")
        sys.exit(2)
    click.echo(f"Domain {domain} is {outcome.status.value}.")
    if outcome.status is not VerificationStatus.VERIFIED:
        sys.exit(1)


@cli.command()
@click.argument("domain")
@click.option(
    "--type",
    "record_type",
    type=click.Choice([t.value for t in RecordType], case_sensitive=False),
    default=None,
    help="Only this record type, as name/value pairs",
)
@click.pass_context
def dns(ctx: click.Context, domain: str, record_type: str | None) -> None:
    """List A, CNAME and MX records for DOMAIN."""
    client = _dns(ctx.obj["settings"])
    if record_type is not None:
        plain = asyncio.run(client.resolve(domain.lower(), RecordType(record_type.upper())))
        if not plain:
            click.echo("No records found.")
        for item in plain:
            click.echo(f"  {item.name:30s} {item.value}")
        return

    records = asyncio.run(client.resolve_records(domain.lower()))
    if not records:
        click.echo("No records found.")
        return
    for record in records:
        click.echo(f"  {record.type.value:6s} {record.name:30s} {record.value} (ttl={record.ttl})")


@cli.command()
@click.argument("domain")
@click.pass_context
def search(ctx: click.Context, domain: str) -> None:
    """Operator availability lookup for DOMAIN (no challenge)."""
    settings = ctx.obj["settings"]
    whmcs = WhmcsClient(
        api_url=settings.whmcs_api_url,
        identifier=settings.whmcs_api_identifier,
        secret=settings.whmcs_api_secret,
        access_key=settings.whmcs_api_access_key,
        timeout=settings.http_timeout,
    )
    try:
        result = asyncio.run(Registrar(whmcs).check_availability(domain.lower()))
    except CollaboratorError as exc:
        click.echo(f"Error: {exc.message}", err=True)
        sys.exit(1)

    if result.available:
        click.echo(f"{result.domain} is available: {result.price} {result.currency}/yr")
    else:
        click.echo(f"{result.domain} is taken.")


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Show which collaborators are configured."""
    settings = ctx.obj["settings"]
    services = {
        "whmcs": settings.whmcs_configured,
        "paystack": bool(settings.paystack_secret_key),
        "paystack webhook": bool(settings.paystack_webhook_secret),
        "challenge secret": bool(settings.challenge_secret),
    }
    click.echo("Configured services:")
    for name, ok in services.items():
        status = "OK" if ok else "not configured"
        click.echo(f"  {name:18s} {status}")
    target = settings.platform_target()
    click.echo(f"\nPlatform nameservers: {', '.join(target.nameservers)}")
    click.echo(f"Platform IP: {target.ip_address}")


@cli.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Run the HTTP API."""
    import uvicorn

    settings = ctx.obj["settings"]
    uvicorn.run(
        "domainfront.api.app:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
    )
