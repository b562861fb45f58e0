"""
提名域模型 - 提名邀请表
与一个未认领画像同时创建，邀请令牌一次性使用
"""

from typing import Optional

from sqlmodel import Field

from .base import TimestampModel


class Nomination(TimestampModel, table=True):
    """提名邀请表"""
    __tablename__ = "nominations"

    id: Optional[int] = Field(default=None, primary_key=True)

    nominator_user_id: int = Field(foreign_key="users.id", index=True, nullable=False)

    target_first_name: str = Field(nullable=False)
    target_last_name: str = Field(nullable=False)

    # 邮箱或手机号，非正式地标识被提名人
    contact_email_or_phone: str = Field(nullable=False)

    invite_token: str = Field(unique=True, index=True, nullable=False)

    # accepted 一旦为 True，令牌永久失效
    accepted: bool = Field(default=False, nullable=False)
    accepted_by_user_id: Optional[int] = Field(default=None, foreign_key="users.id")

    profile_id: int = Field(foreign_key="people_profiles.id", index=True, nullable=False)
