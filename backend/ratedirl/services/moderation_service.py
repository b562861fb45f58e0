"""
审核服务层

举报、关闭工单、隐藏/恢复评价、封禁用户。
隐藏评价与关闭工单是互相独立的操作，审核界面通常会同时调用两者
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlmodel import Session

from ratedirl.core.errors import Forbidden, NotFound
from ratedirl.core.validation import parse_input
from ratedirl.db.transaction import transaction
from ratedirl.models.base import utc_now
from ratedirl.models.report import Report, ReportStatus
from ratedirl.models.review import Review, ReviewStatus
from ratedirl.models.user import User
from ratedirl.repositories.report_repository import ReportRepository
from ratedirl.repositories.review_repository import ReviewRepository
from ratedirl.repositories.user_repository import UserRepository
from ratedirl.schemas.account import UserSummary
from ratedirl.schemas.moderation import OpenReport, ReportCreate
from .guards import require_admin, require_user
from .review_service import ReviewService

logger = logging.getLogger(__name__)


class ModerationService:
    """
    审核服务类
    除 create_report 外，所有操作都要求管理员角色
    """

    def __init__(self, session: Session, clock: Callable[[], datetime] = utc_now):
        self.session = session
        self.clock = clock
        self.reports = ReportRepository(session)
        self.reviews = ReviewRepository(session)
        self.users = UserRepository(session)
        self.review_service = ReviewService(session, clock=clock)

    def create_report(self, reporter: Optional[User], review_id: int, reason: str) -> Report:
        """
        举报评价

        不做去重，同一用户可重复举报同一评价；也不阻止举报自己的评价

        Raises:
            InvalidInput: 理由为空
            NotFound: 评价不存在
        """
        reporter = require_user(reporter)
        payload = parse_input(ReportCreate, review_id=review_id, reason=reason)
        with transaction(self.session):
            if self.reviews.get_by_id(payload.review_id) is None:
                raise NotFound("Review", payload.review_id)
            report = self.reports.create(
                reporter.id, payload.review_id, payload.reason, created_at=self.clock()
            )
        logger.info("User %s reported review %s (report %s)", reporter.id, review_id, report.id)
        return report

    def get_open_reports(self, caller: Optional[User]) -> List[OpenReport]:
        """
        获取待处理工单

        评价或举报人已不存在（例如举报人被封禁）的工单被静默跳过
        """
        require_admin(caller)
        open_reports = self.reports.list_open()
        reporters = self.users.get_many([report.reporter_user_id for report in open_reports])
        result = []
        for report in open_reports:
            review = self.reviews.get_by_id(report.review_id)
            reporter = reporters.get(report.reporter_user_id)
            if review is None or reporter is None:
                continue
            result.append(OpenReport(report=report, review=review, reporter=UserSummary.model_validate(reporter)))
        return result

    def close_report(self, report_id: int, caller: Optional[User]) -> Report:
        """关闭工单，不影响被举报的评价"""
        admin = require_admin(caller)
        with transaction(self.session):
            report = self.reports.get_by_id(report_id)
            if report is None:
                raise NotFound("Report", report_id)
            self.reports.set_status(report, ReportStatus.CLOSED)
        logger.info("Admin %s closed report %s", admin.id, report_id)
        return report

    def hide_review(self, review_id: int, caller: Optional[User]) -> Review:
        """隐藏评价，可从任意状态进入 hidden；不会自动关闭相关工单"""
        return self.review_service.update_review_status(review_id, ReviewStatus.HIDDEN, caller)

    def publish_review(self, review_id: int, caller: Optional[User]) -> Review:
        return self.review_service.update_review_status(review_id, ReviewStatus.PUBLISHED, caller)

    def ban_user(self, user_id: int, caller: Optional[User]) -> None:
        """
        封禁用户：物理删除用户行

        删除策略：
        - 关注关系随之删除，浏览记录匿名化
        - 评价、举报、提名与其画像保留，引用的用户 ID 悬空
        - 所有联表读取都容忍用户缺失

        Raises:
            Forbidden: 非管理员，或管理员试图封禁自己
            NotFound: 用户不存在
        """
        admin = require_admin(caller)
        if admin.id == user_id:
            raise Forbidden("Admins cannot ban themselves")
        with transaction(self.session):
            user = self.users.get_by_id(user_id)
            if user is None:
                raise NotFound("User", user_id)
            self.users.hard_delete(user)
        logger.warning("Admin %s banned user %s", admin.id, user_id)
