"""
Shared Pydantic building blocks.

camelCase wire format, the success envelope and money types.
"""

from decimal import Decimal
from typing import Annotated, Any, Generic, Optional, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def _none_as_zero(value: Any) -> Any:
    return Decimal("0") if value is None else value


# Decimal inside the process, JSON number on the wire. Absent or null means 0.
Money = Annotated[
    Decimal,
    BeforeValidator(_none_as_zero),
    PlainSerializer(float, return_type=float, when_used="json"),
]

Quantity = Money

# Upper bound for a single client-supplied amount or quantity.
MAX_AMOUNT = Decimal("999999999999.99")


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase in JSON."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope: ``{"success": true, "data": ..., "message": ...}``."""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class MessageResponse(BaseModel):
    """Envelope for operations that return no data."""
    success: bool = True
    message: str
