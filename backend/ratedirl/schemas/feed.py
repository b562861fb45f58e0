"""
动态流模型

FeedItem 是以 type 为判别字段的联合类型，
合并排序只依赖公共的 id 与 created_at 字段
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from ratedirl.models.profile import ProfileRead
from .account import UserSummary
from .review import ReviewWithReviewer


class FeedFilter(str, Enum):
    """动态流过滤器"""
    ALL = "all"
    REVIEWS = "reviews"
    NEW_PROFILES = "new_profiles"
    TRENDING = "trending"
    FOLLOWING = "following"


class _FeedItemBase(BaseModel):
    id: str
    created_at: datetime
    profile: ProfileRead


class ReviewFeedItem(_FeedItemBase):
    type: Literal["review"] = "review"
    review: ReviewWithReviewer


class ClaimFeedItem(_FeedItemBase):
    type: Literal["profile_claimed"] = "profile_claimed"
    # 所有者被封禁后为 None
    user: Optional[UserSummary] = None


class TrendingFeedItem(_FeedItemBase):
    type: Literal["trending"] = "trending"
    trending_score: int


FeedItem = Annotated[
    Union[ReviewFeedItem, ClaimFeedItem, TrendingFeedItem],
    Field(discriminator="type"),
]


class TrendingProfile(BaseModel):
    profile: ProfileRead
    score: int
