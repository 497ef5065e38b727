"""Base schema configuration for all Pydantic models.

Usage:
    - APIResponse: outgoing API response bodies (camelCase on the wire)
    - DomainModel: immutable values passed between services and repositories
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIResponse(BaseModel):
    """Base class for outgoing API response schemas.

    Serializes to camelCase, accepts snake_case on construction and
    forbids extra fields - we only return what the schema defines.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
        validate_default=True,
        extra="forbid",
    )


class DomainModel(BaseModel):
    """Base class for internal value objects.

    Frozen: a value read from a store or handed to one is never mutated
    in place.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )
