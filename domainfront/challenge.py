"""Stateless arithmetic challenge guarding the availability search.

``issue()`` hands out two small integers plus an opaque id and a keyed
signature over ``"{a}:{b}:{challenge_id}"``. Nothing is stored; ``verify()``
recovers ``(a, b)`` by re-signing all 81 candidate pairs for the given id and
comparing each against the presented signature in constant time.

A valid ``(challenge_id, sig)`` pair is not marked as consumed and can be
replayed until the client rotates it. This is a scraping deterrent, not an
authentication boundary.
"""

from __future__ import annotations

import hashlib
import hmac
import math
import random
import secrets
from collections.abc import Callable

import structlog

from domainfront.errors import ChallengeRejectedError
from domainfront.metrics import challenge_verifications_total
from domainfront.models.challenge import Challenge
from domainfront.protocols import MacSigner

logger = structlog.get_logger()

OPERAND_MIN = 1
OPERAND_MAX = 9


def _default_challenge_id() -> str:
    return secrets.token_hex(8)


class HmacSigner:
    """Hex-encoded HMAC over UTF-8 text."""

    def __init__(self, secret: str, digest: str = "sha256") -> None:
        if not secret:
            raise ValueError("HMAC secret must not be empty")
        self._key = secret.encode()
        self._digest = getattr(hashlib, digest)

    def sign(self, message: str) -> str:
        return hmac.new(self._key, message.encode(), self._digest).hexdigest()


def challenge_payload(a: int, b: int, challenge_id: str) -> str:
    return f"{a}:{b}:{challenge_id}"


def coerce_answer(answer: object) -> int | None:
    """Whole-number answers as int; None for anything else.

    JSON clients may send ``7.0`` for ``7``. Booleans, strings and
    non-finite or fractional floats are not answers.
    """
    if isinstance(answer, bool):
        return None
    if isinstance(answer, int):
        return answer
    if isinstance(answer, float) and math.isfinite(answer) and answer.is_integer():
        return int(answer)
    return None


class ChallengeGate:
    """Issues and verifies search challenges with a pluggable signer."""

    def __init__(
        self,
        signer: MacSigner,
        rng: random.Random | None = None,
        id_factory: Callable[[], str] = _default_challenge_id,
    ) -> None:
        self._signer = signer
        self._rng = rng or secrets.SystemRandom()
        self._id_factory = id_factory

    def issue(self) -> Challenge:
        a = self._rng.randint(OPERAND_MIN, OPERAND_MAX)
        b = self._rng.randint(OPERAND_MIN, OPERAND_MAX)
        challenge_id = self._id_factory()
        sig = self._signer.sign(challenge_payload(a, b, challenge_id))
        return Challenge(a=a, b=b, challenge_id=challenge_id, sig=sig)

    def verify(self, answer: object, challenge_id: str, sig: str) -> bool:
        """True when *sig* authenticates some ``(x, y)`` for *challenge_id*
        and *answer* equals ``x + y``. Never raises on malformed input."""
        total = coerce_answer(answer)
        if total is None:
            challenge_verifications_total.labels(outcome="rejected").inc()
            return False
        if not challenge_id or not sig or not isinstance(sig, str):
            challenge_verifications_total.labels(outcome="rejected").inc()
            return False

        presented = sig.encode()
        valid = False
        for x in range(OPERAND_MIN, OPERAND_MAX + 1):
            for y in range(OPERAND_MIN, OPERAND_MAX + 1):
                expected = self._signer.sign(challenge_payload(x, y, challenge_id)).encode()
                if hmac.compare_digest(expected, presented) and total == x + y:
                    valid = True

        challenge_verifications_total.labels(outcome="accepted" if valid else "rejected").inc()
        if not valid:
            logger.info("Search challenge rejected", challenge_id=challenge_id)
        return valid

    def require(self, answer: object, challenge_id: str, sig: str) -> None:
        """Raise ChallengeRejectedError unless the challenge verifies."""
        if not self.verify(answer, challenge_id, sig):
            raise ChallengeRejectedError()
