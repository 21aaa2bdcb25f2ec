"""Shared schema plumbing: camelCase wire names and the response envelope."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """snake_case in Python, camelCase in JSON. Accepts either on input."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class Envelope(BaseModel, Generic[T]):
    """Every response body: {success, message?, data?}."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
