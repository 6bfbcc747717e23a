"""
Pydantic schemas for structured data.
"""

from pydantic import BaseModel, Field


class ReviewRatings(BaseModel):
    """Aggregated owner ratings of a model year."""
    average: float = Field(ge=0, le=5)
    total: int = Field(ge=0)
