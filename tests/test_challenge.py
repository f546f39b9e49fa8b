"""Tests for the stateless search challenge gate."""

from __future__ import annotations

import hashlib
import hmac
import random

import pytest

from domainfront.challenge import ChallengeGate, HmacSigner, challenge_payload, coerce_answer
from domainfront.errors import ChallengeRejectedError


def _gate(secret: str = "test-challenge-secret", seed: int | None = None) -> ChallengeGate:
    rng = random.Random(seed) if seed is not None else None
    return ChallengeGate(HmacSigner(secret), rng=rng)


def _sign(a: int, b: int, challenge_id: str, secret: str = "test-challenge-secret") -> str:
    return hmac.new(secret.encode(), f"{a}:{b}:{challenge_id}".encode(), hashlib.sha256).hexdigest()


class TestHmacSigner:
    def test_matches_reference_hmac(self) -> None:
        """Output is the hex HMAC-SHA256 of the UTF-8 message."""
        signer = HmacSigner("secret")
        expected = hmac.new(b"secret", b"3:4:abc123", hashlib.sha256).hexdigest()
        assert signer.sign("3:4:abc123") == expected

    def test_alternate_digest(self) -> None:
        """The digest is selectable by hashlib name."""
        signer = HmacSigner("secret", digest="sha512")
        assert len(signer.sign("1:1:x")) == 128

    def test_empty_secret_rejected(self) -> None:
        """An empty key is refused at construction."""
        with pytest.raises(ValueError):
            HmacSigner("")


class TestIssue:
    def test_operands_in_range(self) -> None:
        """Both operands stay within 1..9."""
        gate = _gate(seed=7)
        for _ in range(200):
            challenge = gate.issue()
            assert 1 <= challenge.a <= 9
            assert 1 <= challenge.b <= 9

    def test_challenge_id_is_random_hex(self) -> None:
        """Ids are 16 hex chars and do not repeat."""
        gate = _gate()
        ids = {gate.issue().challenge_id for _ in range(20)}
        assert len(ids) == 20
        for challenge_id in ids:
            assert len(challenge_id) == 16
            int(challenge_id, 16)

    def test_signature_covers_operands_and_id(self) -> None:
        """sig is the HMAC of "a:b:id"."""
        challenge = _gate().issue()
        assert challenge.sig == _sign(challenge.a, challenge.b, challenge.challenge_id)

    def test_wire_form_uses_camel_case(self) -> None:
        """The challenge serializes with challengeId."""
        dumped = _gate().issue().model_dump(by_alias=True)
        assert set(dumped) == {"a", "b", "challengeId", "sig"}

    def test_prompt(self) -> None:
        """The prompt reads "What is a + b?"."""
        challenge = ChallengeGate(HmacSigner("s"), id_factory=lambda: "fixed").issue()
        assert challenge.prompt == f"What is {challenge.a} + {challenge.b}?"
        assert challenge.challenge_id == "fixed"


class TestCoerceAnswer:
    @pytest.mark.parametrize(("answer", "expected"), [(7, 7), (7.0, 7), (-0.0, 0), (18.0, 18)])
    def test_whole_numbers(self, answer: object, expected: int) -> None:
        """Integers and integral floats become ints."""
        assert coerce_answer(answer) == expected

    @pytest.mark.parametrize(
        "answer", [7.5, float("nan"), float("inf"), float("-inf"), True, False, "7", None, [7]]
    )
    def test_everything_else(self, answer: object) -> None:
        """Fractions, non-finite floats, bools and non-numbers are not answers."""
        assert coerce_answer(answer) is None


class TestVerify:
    def test_round_trip_for_every_pair(self) -> None:
        """Each of the 81 operand pairs verifies with its sum only."""
        gate = _gate()
        for a in range(1, 10):
            for b in range(1, 10):
                sig = _sign(a, b, "abc123")
                assert gate.verify(a + b, "abc123", sig) is True
                assert gate.verify(a + b + 1, "abc123", sig) is False

    def test_issued_challenge_verifies(self) -> None:
        """An issued challenge accepts its own sum."""
        gate = _gate()
        challenge = gate.issue()
        assert gate.verify(challenge.a + challenge.b, challenge.challenge_id, challenge.sig)

    def test_integral_float_answer_accepted(self) -> None:
        """7.0 counts as the answer 7."""
        assert _gate().verify(7.0, "abc123", _sign(3, 4, "abc123")) is True

    def test_tampered_signature(self) -> None:
        """Changing one hex digit of sig rejects."""
        gate = _gate()
        sig = _sign(3, 4, "abc123")
        tampered = ("0" if sig[0] != "0" else "1") + sig[1:]
        assert gate.verify(7, "abc123", tampered) is False

    def test_signature_for_other_id(self) -> None:
        """A signature is bound to its challenge id."""
        gate = _gate()
        assert gate.verify(7, "other", _sign(3, 4, "abc123")) is False

    def test_other_secret_rejected(self) -> None:
        """Signatures from another secret do not verify."""
        gate = _gate(secret="a-different-secret")
        assert gate.verify(7, "abc123", _sign(3, 4, "abc123")) is False

    @pytest.mark.parametrize("sig", ["", "abc", "f" * 63, "f" * 65, "é" * 64, "\x00" * 64])
    def test_malformed_signature_never_raises(self, sig: str) -> None:
        """Odd-length and non-hex signatures reject without raising."""
        assert _gate().verify(7, "abc123", sig) is False

    @pytest.mark.parametrize(
        "answer", ["7", 7.5, float("nan"), float("inf"), None, True, [7]]
    )
    def test_non_integer_answer(self, answer: object) -> None:
        """Non-whole-number answers are rejected."""
        assert _gate().verify(answer, "abc123", _sign(3, 4, "abc123")) is False

    def test_missing_challenge_id(self) -> None:
        """An empty challenge id rejects even with a matching sig."""
        assert _gate().verify(7, "", _sign(3, 4, "")) is False

    def test_replay_is_accepted(self) -> None:
        """Challenges are not consumed on use."""
        gate = _gate()
        sig = _sign(3, 4, "abc123")
        assert gate.verify(7, "abc123", sig)
        assert gate.verify(7, "abc123", sig)

    def test_payload_format(self) -> None:
        """The signed payload is colon-joined."""
        assert challenge_payload(3, 4, "abc123") == "3:4:abc123"


class TestRequire:
    def test_passes_silently(self) -> None:
        """A correct answer returns None."""
        _gate().require(7, "abc123", _sign(3, 4, "abc123"))

    def test_raises_generic_message(self) -> None:
        """A wrong answer raises with a generic message."""
        with pytest.raises(ChallengeRejectedError, match="Invalid challenge response"):
            _gate().require(8, "abc123", _sign(3, 4, "abc123"))

    def test_rejection_is_value_error(self) -> None:
        """Rejections map to 400 through the ValueError handler."""
        with pytest.raises(ValueError):
            _gate().require(7, "abc123", "bogus")
