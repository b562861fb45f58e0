"""
提名邀请相关的输入输出模型
"""

from pydantic import BaseModel, ConfigDict, Field

from ratedirl.models.nomination import Nomination
from ratedirl.models.profile import ProfileRead


class NominationCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    target_first_name: str = Field(min_length=1)
    target_last_name: str = Field(min_length=1)
    contact_email_or_phone: str = Field(min_length=1)


class InviteLanding(BaseModel):
    """邀请落地页所需的上下文"""
    nomination: Nomination
    profile: ProfileRead
