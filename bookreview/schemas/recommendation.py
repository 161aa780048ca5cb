"""
Recommendation Pydantic Schemas
"""

from pydantic import BaseModel, Field

from bookreview.schemas.book import BookResponse


class RecommendationItem(BaseModel):
    book: BookResponse
    score: float = Field(..., ge=0, description="Relative relevance score")
    reasons: list[str] = Field(default_factory=list, description="Why this book was picked")


class RecommendationListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[RecommendationItem]
