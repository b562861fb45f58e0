"""
活动域模型 - 浏览日志与关注关系
"""

from typing import Optional

from sqlmodel import Field
from sqlalchemy import UniqueConstraint

from .base import TimestampModel


class ProfileView(TimestampModel, table=True):
    """
    画像浏览日志
    只追加，不修改；仅用于聚合统计
    """
    __tablename__ = "profile_views"

    id: Optional[int] = Field(default=None, primary_key=True)

    target_profile_id: int = Field(foreign_key="people_profiles.id", index=True, nullable=False)

    # 允许匿名浏览
    viewer_user_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True)


class Follow(TimestampModel, table=True):
    """关注关系表"""
    __tablename__ = "follows"

    # 每个 (关注者, 画像) 组合唯一
    __table_args__ = (UniqueConstraint("follower_user_id", "target_profile_id", name="uix_follower_profile"),)

    id: Optional[int] = Field(default=None, primary_key=True)

    follower_user_id: int = Field(foreign_key="users.id", index=True, nullable=False)

    target_profile_id: int = Field(foreign_key="people_profiles.id", index=True, nullable=False)
