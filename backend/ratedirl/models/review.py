"""
评价域模型 - 评价表
评价创建后只读，仅 status 字段可流转
"""

from enum import Enum
from typing import Optional

from sqlmodel import Field

from .base import TimestampModel


class ReviewStatus(str, Enum):
    """
    评价状态枚举

    创建时由目标画像的认领状态决定：已认领 → published，未认领 → pending
    认领画像时 pending 批量转为 published；管理员可在任意状态间切换
    """
    PENDING = "pending"
    PUBLISHED = "published"
    HIDDEN = "hidden"


RATING_MIN = 1
RATING_MAX = 5
TEXT_MAX_LENGTH = 150


class Review(TimestampModel, table=True):
    """评价表"""
    __tablename__ = "reviews"

    id: Optional[int] = Field(default=None, primary_key=True)

    reviewer_user_id: int = Field(foreign_key="users.id", index=True, nullable=False)

    target_profile_id: int = Field(foreign_key="people_profiles.id", index=True, nullable=False)

    rating: int = Field(ge=RATING_MIN, le=RATING_MAX, nullable=False)

    text: str = Field(max_length=TEXT_MAX_LENGTH, nullable=False)

    status: ReviewStatus = Field(default=ReviewStatus.PENDING, index=True, nullable=False)
