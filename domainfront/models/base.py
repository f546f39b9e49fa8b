"""Base model for all wire-facing value objects."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow_iso() -> str:
    return datetime.now(UTC).isoformat()


class WireModel(BaseModel):
    """Immutable value object serialized with camelCase keys.

    Constructed in Python with snake_case names; ``model_dump(by_alias=True)``
    (and FastAPI responses) emit the camelCase form the storefront UI expects.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
