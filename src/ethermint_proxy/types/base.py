"""Reusable base models for JSON-RPC payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    A base model that converts field names to camel case when serializing.

    For example, the field name `parent_hash` in a Python model will be
    represented as `parentHash` when it is serialized to JSON.

    This matches the field naming of canonical-chain JSON-RPC responses.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        arbitrary_types_allowed=True,
    )


class FrozenModel(CamelModel):
    """An immutable camel-case model. Unknown input fields are ignored."""

    model_config = CamelModel.model_config | {
        "extra": "ignore",
        "frozen": True,
    }
