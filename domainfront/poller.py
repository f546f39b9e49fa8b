"""Client-side verification polling.

After connection instructions are handed out, the caller re-checks the
domain on a fixed interval until a terminal status (``verified`` or
``failed``) comes back, or a hard ceiling elapses. Nothing is persisted
between ticks.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx
import structlog

from domainfront.models.connection import VerificationStatus

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = structlog.get_logger()


@dataclass(frozen=True)
class PollOutcome:
    status: VerificationStatus
    ticks: int
    timed_out: bool = False
    stopped: bool = False


class VerificationPoller:
    """Repeatedly invoke *check* until a terminal status or the timeout.

    The first tick fires one interval after ``run()`` starts. A tick whose
    check raises is logged and treated as still pending.
    """

    def __init__(
        self,
        check: Callable[[], Awaitable[VerificationStatus]],
        interval: float = 30.0,
        timeout: float = 3600.0,
        on_status: Callable[[VerificationStatus, int], None] | None = None,
    ) -> None:
        if interval < 0 or timeout <= 0:
            raise ValueError("interval must be >= 0 and timeout > 0")
        self.check = check
        self.interval = interval
        self.timeout = timeout
        self.on_status = on_status
        self._stopped = False

    def stop(self) -> None:
        """Stop before the next tick."""
        self._stopped = True

    async def run(self) -> PollOutcome:
        ticks = 0
        last = VerificationStatus.PENDING
        try:
            async with asyncio.timeout(self.timeout):
                while True:
                    await asyncio.sleep(self.interval)
                    if self._stopped:
                        logger.info("Verification polling stopped", ticks=ticks)
                        return PollOutcome(status=last, ticks=ticks, stopped=True)

                    ticks += 1
                    try:
                        status = await self.check()
                    except Exception as exc:
                        logger.warning("Verification poll failed", tick=ticks, error=str(exc))
                        continue

                    last = status
                    if self.on_status is not None:
                        self.on_status(status, ticks)
                    if status.is_terminal:
                        logger.info(
                            "Verification reached terminal status",
                            status=status.value,
                            ticks=ticks,
                        )
                        return PollOutcome(status=status, ticks=ticks)
        except TimeoutError:
            logger.info("Verification polling timed out", ticks=ticks, timeout_s=self.timeout)
            return PollOutcome(status=last, ticks=ticks, timed_out=True)


def http_verification_check(
    base_url: str,
    domain: str,
    timeout: float = 30.0,
) -> Callable[[], Awaitable[VerificationStatus]]:
    """Build a poll check that calls ``GET /verify-domain`` on a running API.

    The ``status`` field is read regardless of HTTP status so a 500 carrying
    ``"failed"`` still ends polling. Transport errors propagate to the poller.
    """
    url = f"{base_url.rstrip('/')}/verify-domain"

    async def _check() -> VerificationStatus:
        async with httpx.AsyncClient(timeout=timeout) as client:
            resp = await client.get(url, params={"domain": domain})
        data = resp.json()
        raw = data.get("status") if isinstance(data, dict) else None
        try:
            return VerificationStatus(raw)
        except ValueError:
            logger.warning(
                "Unexpected verification status", status=raw, http_status=resp.status_code
            )
            return VerificationStatus.PENDING

    return _check
