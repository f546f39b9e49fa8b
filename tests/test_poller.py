"""Tests for the verification poller."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import httpx
import pytest
import respx

from domainfront.models.connection import VerificationStatus
from domainfront.poller import VerificationPoller, http_verification_check

PENDING = VerificationStatus.PENDING
VERIFIED = VerificationStatus.VERIFIED
FAILED = VerificationStatus.FAILED


def _scripted(
    *statuses: VerificationStatus | Exception,
) -> tuple[Callable[[], Awaitable[VerificationStatus]], dict[str, int]]:
    """Check returning *statuses* in order, then pending forever."""
    calls = {"count": 0}

    async def _check() -> VerificationStatus:
        index = calls["count"]
        calls["count"] += 1
        if index < len(statuses):
            item = statuses[index]
            if isinstance(item, Exception):
                raise item
            return item
        return PENDING

    return _check, calls


class TestVerificationPoller:
    def test_stops_on_fourth_tick_when_verified(self) -> None:
        """Polling ends on the tick that returns verified."""
        check, calls = _scripted(PENDING, PENDING, PENDING, VERIFIED)
        outcome = asyncio.run(VerificationPoller(check, interval=0, timeout=5).run())

        assert outcome.status is VERIFIED
        assert outcome.ticks == 4
        assert outcome.timed_out is False
        assert calls["count"] == 4

    def test_failed_is_terminal(self) -> None:
        """failed also ends polling."""
        check, calls = _scripted(PENDING, FAILED, VERIFIED)
        outcome = asyncio.run(VerificationPoller(check, interval=0, timeout=5).run())
        assert outcome.status is FAILED
        assert calls["count"] == 2

    def test_timeout_ceiling(self) -> None:
        """Without a terminal status the timeout ends polling."""
        check, calls = _scripted()
        outcome = asyncio.run(VerificationPoller(check, interval=0.01, timeout=0.1).run())

        assert outcome.timed_out is True
        assert outcome.status is PENDING
        assert outcome.ticks == calls["count"]
        assert calls["count"] >= 1

    def test_check_error_is_not_terminal(self) -> None:
        """A raising check counts as pending."""
        check, calls = _scripted(RuntimeError("network blip"), PENDING, VERIFIED)
        outcome = asyncio.run(VerificationPoller(check, interval=0, timeout=5).run())
        assert outcome.status is VERIFIED
        assert outcome.ticks == 3

    def test_on_status_sees_each_result(self) -> None:
        """The callback receives every status with its tick number."""
        seen: list[tuple[VerificationStatus, int]] = []
        check, _ = _scripted(PENDING, VERIFIED)
        poller = VerificationPoller(
            check, interval=0, timeout=5, on_status=lambda s, t: seen.append((s, t))
        )
        asyncio.run(poller.run())
        assert seen == [(PENDING, 1), (VERIFIED, 2)]

    def test_stop_before_next_tick(self) -> None:
        """stop() takes effect before the next tick."""
        check, calls = _scripted()
        poller: VerificationPoller

        def _stop_after_two(_status: VerificationStatus, tick: int) -> None:
            if tick == 2:
                poller.stop()

        poller = VerificationPoller(check, interval=0, timeout=5, on_status=_stop_after_two)
        outcome = asyncio.run(poller.run())
        assert outcome.stopped is True
        assert outcome.ticks == 2
        assert calls["count"] == 2

    def test_first_tick_waits_one_interval(self) -> None:
        """No check runs before the first interval elapses."""
        check, calls = _scripted(VERIFIED)
        poller = VerificationPoller(check, interval=0.2, timeout=0.1)
        outcome = asyncio.run(poller.run())
        assert outcome.timed_out is True
        assert calls["count"] == 0

    @pytest.mark.parametrize(("interval", "timeout"), [(-1, 10), (1, 0)])
    def test_rejects_bad_bounds(self, interval: float, timeout: float) -> None:
        """Negative intervals and non-positive timeouts are refused."""
        check, _ = _scripted()
        with pytest.raises(ValueError):
            VerificationPoller(check, interval=interval, timeout=timeout)


class TestHttpVerificationCheck:
    @respx.mock
    def test_reads_status(self) -> None:
        """The status field of /verify-domain is returned."""
        route = respx.get("http://api.test/verify-domain").mock(
            return_value=httpx.Response(200, json={"success": True, "status": "verified"})
        )
        check = http_verification_check("http://api.test/", "example.com")
        assert asyncio.run(check()) is VERIFIED
        assert route.calls.last.request.url.params["domain"] == "example.com"

    @respx.mock
    def test_failed_on_server_error_body(self) -> None:
        """A 500 carrying failed still reports failed."""
        respx.get("http://api.test/verify-domain").mock(
            return_value=httpx.Response(500, json={"success": False, "status": "failed"})
        )
        check = http_verification_check("http://api.test", "example.com")
        assert asyncio.run(check()) is FAILED

    @respx.mock
    def test_unknown_status_is_pending(self) -> None:
        """A body without a known status reads as pending."""
        respx.get("http://api.test/verify-domain").mock(
            return_value=httpx.Response(400, json={"success": False, "error": "Domain required"})
        )
        check = http_verification_check("http://api.test", "example.com")
        assert asyncio.run(check()) is PENDING

    @respx.mock
    def test_drives_poller_to_completion(self) -> None:
        """The HTTP check drives the poller to verified."""
        respx.get("http://api.test/verify-domain").mock(
            side_effect=[
                httpx.Response(200, json={"status": "pending"}),
                httpx.Response(200, json={"status": "verified"}),
            ]
        )
        check = http_verification_check("http://api.test", "example.com")
        outcome = asyncio.run(VerificationPoller(check, interval=0, timeout=5).run())
        assert outcome.status is VERIFIED
        assert outcome.ticks == 2
