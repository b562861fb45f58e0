"""
身份域模型 - 用户表
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field

from .base import TimestampModel


class UserRole(str, Enum):
    """用户角色枚举"""
    USER = "user"
    ADMIN = "admin"


class KycStatus(str, Enum):
    """KYC 状态枚举，仅作展示，不参与任何校验"""
    NONE = "none"
    PENDING = "pending"
    VERIFIED = "verified"


class User(TimestampModel, table=True):
    """
    用户表
    注册时创建；通过设置页修改；管理员封禁时物理删除
    """
    __tablename__ = "users"

    # 被封禁用户的 ID 不可复用，否则新用户会继承悬空引用
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)

    # 小写存储，保证大小写不敏感的唯一性
    email: str = Field(unique=True, index=True, nullable=False)

    username: str = Field(unique=True, index=True, nullable=False)

    password_hash: str = Field(nullable=False)

    first_name: str = Field(nullable=False)
    last_name: str = Field(nullable=False)

    photo_url: Optional[str] = Field(default=None)
    bio: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None)
    phone_number: Optional[str] = Field(default=None)

    # 只能通过显式的验证动作置为 True
    phone_verified: bool = Field(default=False, nullable=False)
    phone_verified_at: Optional[datetime] = Field(default=None)

    kyc_status: KycStatus = Field(default=KycStatus.NONE, nullable=False)
    kyc_verified_at: Optional[datetime] = Field(default=None)

    role: UserRole = Field(default=UserRole.USER, nullable=False)

    # 注册时同意服务条款的时间
    terms_accepted_at: Optional[datetime] = Field(default=None)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserPublic(SQLModel):
    """对外输出的用户视图，不含密码哈希"""
    id: int
    email: str
    username: str
    first_name: str
    last_name: str
    photo_url: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    phone_number: Optional[str] = None
    phone_verified: bool = False
    kyc_status: KycStatus = KycStatus.NONE
    role: UserRole = UserRole.USER
    created_at: Optional[datetime] = None
