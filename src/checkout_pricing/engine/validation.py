"""
Request body validation for checkout requests.

A body is either a single line item or a non-empty list of them. Any invalid
element rejects the whole request.
"""
from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .models import LineItemRequest


class LineItemPayload(BaseModel):
    """Wire shape of one line item."""
    model_config = ConfigDict(extra='ignore')

    code: Annotated[str, Field(strict=True, min_length=1)]
    # Strict int: rejects "1", 1.5 and true
    quantity: Annotated[int, Field(strict=True, gt=0)]


CheckoutBody = Union[
    LineItemPayload,
    Annotated[list[LineItemPayload], Field(min_length=1)],
]

_body_adapter = TypeAdapter(CheckoutBody)


def validate_body(body: Any) -> list[LineItemRequest]:
    """
    Validate a decoded JSON body and normalise it to a list of line items.

    Args:
        body: A dict, a list of dicts, or anything else the client sent

    Returns:
        Line items in request order

    Raises:
        ValidationError: if the body or any element is malformed
    """
    try:
        parsed = _body_adapter.validate_python(body)
    except PydanticValidationError as e:
        raise ValidationError(detail=f"{e.error_count()} validation error(s)") from e

    if isinstance(parsed, LineItemPayload):
        parsed = [parsed]
    return [LineItemRequest(code=p.code, quantity=p.quantity) for p in parsed]
