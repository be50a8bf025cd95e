from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from app.core.constants import REVIEW_COMMENT_MAX_LENGTH
from app.schemas.user import UserSummary


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=REVIEW_COMMENT_MAX_LENGTH)


class Review(ReviewCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    user: UserSummary
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RatingSummary(BaseModel):
    num_of_reviews: int
    ratings: int
