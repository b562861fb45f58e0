"""
审核相关的输入输出模型
"""

from pydantic import BaseModel, ConfigDict, Field

from ratedirl.models.report import Report
from ratedirl.models.review import Review
from .account import UserSummary


class ReportCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    review_id: int
    reason: str = Field(min_length=1)


class OpenReport(BaseModel):
    """待处理工单，附带被举报的评价与举报人"""
    report: Report
    review: Review
    reporter: UserSummary
