"""
评价相关的输入输出模型
"""

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ratedirl.models.review import RATING_MAX, RATING_MIN, TEXT_MAX_LENGTH, ReviewStatus
from .account import UserSummary


class ReviewCreate(BaseModel):
    target_profile_id: int
    # 严格模式：拒绝 True、"4" 之类的隐式转换
    rating: int = Field(strict=True, ge=RATING_MIN, le=RATING_MAX)
    text: str = Field(min_length=1, max_length=TEXT_MAX_LENGTH)


class ReviewWithReviewer(BaseModel):
    """带评价人摘要的评价；评价人被封禁后 reviewer 为 None"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    reviewer_user_id: int
    target_profile_id: int
    rating: int
    text: str
    status: ReviewStatus
    created_at: Optional[datetime] = None
    reviewer: Optional[UserSummary] = None


class RatingStats(BaseModel):
    """
    评分统计，仅基于 published 评价
    average 不做存储，展示时用 rounded_average
    """
    average: float = 0.0
    count: int = 0
    breakdown: Dict[int, int] = Field(
        default_factory=lambda: {rating: 0 for rating in range(RATING_MIN, RATING_MAX + 1)}
    )

    @property
    def rounded_average(self) -> float:
        return round(self.average, 1)
