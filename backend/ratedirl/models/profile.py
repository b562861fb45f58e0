"""
画像域模型 - 人物画像表
可被评价的实体，可能已被认领，也可能只是提名占位
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field

from .base import TimestampModel


class Visibility(str, Enum):
    """可见性枚举"""
    PUBLIC = "public"
    PRIVATE = "private"


class PeopleProfile(TimestampModel, table=True):
    """
    人物画像表

    不变量：claimed == True ⇔ owner_user_id 非空 ⇔ claimed_at 非空
    """
    __tablename__ = "people_profiles"

    id: Optional[int] = Field(default=None, primary_key=True)

    # 一个用户最多拥有一个画像
    owner_user_id: Optional[int] = Field(
        default=None,
        foreign_key="users.id",
        unique=True,
        index=True
    )

    first_name: str = Field(nullable=False)
    last_name: str = Field(nullable=False)
    location: Optional[str] = Field(default=None)

    # 仅在认领前用于识别被提名人，从不公开
    contact_email: Optional[str] = Field(default=None)
    contact_phone: Optional[str] = Field(default=None)

    claimed: bool = Field(default=False, nullable=False, index=True)
    claimed_at: Optional[datetime] = Field(default=None, index=True)

    profile_visibility: Visibility = Field(default=Visibility.PUBLIC, nullable=False, index=True)
    reviews_visibility: Visibility = Field(default=Visibility.PUBLIC, nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_public(self) -> bool:
        return self.profile_visibility == Visibility.PUBLIC

    def is_owned_by(self, user_id: Optional[int]) -> bool:
        return user_id is not None and self.owner_user_id == user_id


class ProfileRead(SQLModel):
    """对外输出的画像视图，不含联系方式"""
    id: int
    owner_user_id: Optional[int] = None
    first_name: str
    last_name: str
    location: Optional[str] = None
    claimed: bool = False
    claimed_at: Optional[datetime] = None
    profile_visibility: Visibility = Visibility.PUBLIC
    reviews_visibility: Visibility = Visibility.PUBLIC
    created_at: Optional[datetime] = None
