"""
Shared Schema Pieces

CamelModel
==========
Records are stored with camelCase keys (averageRating, bookId, ...) and the
API speaks camelCase too. Python code uses snake_case attributes; the alias
generator maps between the two:

    BookResponse.model_validate({"averageRating": 4.5, ...}).average_rating

FastAPI serializes response models by alias, so clients see camelCase.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MessageResponse(BaseModel):
    """Plain {"message": ...} body, also used for every error response."""

    message: str = Field(..., description="Human-readable message")

