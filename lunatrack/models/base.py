"""Shared Pydantic base models and utilities."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class LunaBase(BaseModel):
    """Base model with shared config for all LunaTrack schemas.

    Fields are snake_case in Python and camelCase on the wire; either form is
    accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )
