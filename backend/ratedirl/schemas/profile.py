"""
画像相关的输入输出模型
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ratedirl.models.profile import ProfileRead, Visibility
from .review import RatingStats, ReviewWithReviewer


class ProfileCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    location: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    profile_visibility: Visibility = Visibility.PUBLIC
    reviews_visibility: Visibility = Visibility.PUBLIC


class ProfileUpdate(BaseModel):
    """
    画像更新补丁
    禁止额外字段：claimed、owner_user_id 不能从这里修改
    """
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    location: Optional[str] = None
    profile_visibility: Optional[Visibility] = None
    reviews_visibility: Optional[Visibility] = None


class ProfileDetail(BaseModel):
    """画像详情页：画像、评分统计与可见的评价"""
    profile: ProfileRead
    stats: RatingStats
    reviews: List[ReviewWithReviewer]
    is_owner: bool
