"""Search challenge model."""

from __future__ import annotations

from pydantic import Field

from domainfront.models.base import WireModel


class Challenge(WireModel):
    """A signed "what is a + b?" prompt. Never stored server-side."""

    a: int = Field(ge=1, le=9)
    b: int = Field(ge=1, le=9)
    challenge_id: str
    sig: str

    @property
    def prompt(self) -> str:
        return f"What is {self.a} + {self.b}?"
