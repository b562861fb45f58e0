"""
举报工单 Repository
"""

from datetime import datetime
from typing import List, Optional

from sqlmodel import Session, select, col

from ratedirl.models.base import utc_now
from ratedirl.models.report import Report, ReportStatus


class ReportRepository:
    """
    举报工单数据访问对象
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    def create(
        self,
        reporter_user_id: int,
        review_id: int,
        reason: str,
        created_at: Optional[datetime] = None
    ) -> Report:
        """
        创建举报工单（不做去重）

        Args:
            reporter_user_id: 举报人用户 ID
            review_id: 被举报的评价 ID
            reason: 举报理由
            created_at: 创建时间（默认当前时间）

        Returns:
            创建的 Report 对象
        """
        report = Report(
            reporter_user_id=reporter_user_id,
            review_id=review_id,
            reason=reason,
            created_at=created_at or utc_now()
        )
        self.session.add(report)
        self.session.flush()
        return report

    def get_by_id(self, report_id: int) -> Optional[Report]:
        return self.session.get(Report, report_id)

    def list_open(self) -> List[Report]:
        """获取所有待处理工单（按创建时间倒序）"""
        statement = select(Report).where(
            Report.status == ReportStatus.OPEN
        ).order_by(col(Report.created_at).desc(), col(Report.id).desc())
        return self.session.exec(statement).all()

    def set_status(self, report: Report, status: ReportStatus) -> Report:
        report.status = status
        self.session.add(report)
        self.session.flush()
        return report
