"""
账户相关的输入输出模型
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class SignupIn(BaseModel):
    """注册请求"""
    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=6)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    location: Optional[str] = None
    bio: Optional[str] = None
    phone_number: Optional[str] = None
    photo_url: Optional[str] = None

    # 同意服务条款是注册的必要条件
    accepted_terms: bool = Field(default=False, validate_default=True)

    # 通过邀请链接注册时携带
    invite_token: Optional[str] = None

    @field_validator("accepted_terms")
    @classmethod
    def terms_must_be_accepted(cls, value: bool) -> bool:
        if not value:
            raise ValueError("terms of service must be accepted")
        return value


class UserSettingsUpdate(BaseModel):
    """
    个人设置更新
    禁止额外字段：phone_verified、role、kyc_status 不能从这里修改
    """
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    bio: Optional[str] = None
    location: Optional[str] = None
    photo_url: Optional[str] = None
    phone_number: Optional[str] = None


class UserSummary(BaseModel):
    """嵌入在评价、动态、工单中的用户摘要"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    phone_verified: bool = False


class UserAnalytics(BaseModel):
    """个人数据面板"""
    profile_views: int
    reviews_received: int
    reviews_given: int
