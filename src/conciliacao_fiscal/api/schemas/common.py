"""Shared schema configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

MONEY_PATTERN = r"^-?[0-9]+\.[0-9]{2}$"


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MessageResponse(CamelModel):
    """Plain acknowledgement message."""

    message: str
