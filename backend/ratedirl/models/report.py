"""
审核域模型 - 举报工单表
"""

from enum import Enum
from typing import Optional

from sqlmodel import Field

from .base import TimestampModel


class ReportStatus(str, Enum):
    """举报状态枚举"""
    OPEN = "open"
    CLOSED = "closed"


class Report(TimestampModel, table=True):
    """
    举报工单表
    同一评价可被多次举报，每次都是独立的工单
    """
    __tablename__ = "reports"

    id: Optional[int] = Field(default=None, primary_key=True)

    reporter_user_id: int = Field(foreign_key="users.id", index=True, nullable=False)

    review_id: int = Field(foreign_key="reviews.id", index=True, nullable=False)

    reason: str = Field(nullable=False)

    status: ReportStatus = Field(default=ReportStatus.OPEN, index=True, nullable=False)
