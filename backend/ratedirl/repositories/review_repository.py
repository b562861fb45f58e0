"""
评价 Repository
提供 reviews 的创建、状态流转与统计查询
"""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlmodel import Session, select, col

from ratedirl.models.base import utc_now
from ratedirl.models.review import Review, ReviewStatus


class ReviewRepository:
    """
    评价数据访问对象
    评价内容创建后只读，status 是唯一可写字段
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
        reviewer_user_id: int,
        target_profile_id: int,
        rating: int,
        text: str,
        status: ReviewStatus,
        created_at: Optional[datetime] = None
    ) -> Review:
        """
        创建评价

        Args:
            reviewer_user_id: 评价人用户 ID
            target_profile_id: 目标画像 ID
            rating: 评分 1-5
            text: 评价文本
            status: 初始状态（由目标画像认领状态决定）
            created_at: 创建时间（默认当前时间）

        Returns:
            创建的 Review 对象
        """
        review = Review(
            reviewer_user_id=reviewer_user_id,
            target_profile_id=target_profile_id,
            rating=rating,
            text=text,
            status=status,
            created_at=created_at or utc_now()
        )
        self.session.add(review)
        self.session.flush()
        return review

    def get_by_id(self, review_id: int) -> Optional[Review]:
        return self.session.get(Review, review_id)

    def get_for_profile(self, profile_id: int, include_hidden: bool = False) -> List[Review]:
        """
        获取画像的评价（按创建时间倒序）

        Args:
            profile_id: 画像 ID
            include_hidden: False 时只返回 published；True 时返回全部状态

        Returns:
            Review 对象列表
        """
        statement = select(Review).where(Review.target_profile_id == profile_id)
        if not include_hidden:
            statement = statement.where(Review.status == ReviewStatus.PUBLISHED)
        statement = statement.order_by(col(Review.created_at).desc(), col(Review.id).desc())
        return self.session.exec(statement).all()

    def get_by_reviewer(self, user_id: int) -> List[Review]:
        """获取用户写过的所有评价（按创建时间倒序）"""
        statement = select(Review).where(
            Review.reviewer_user_id == user_id
        ).order_by(col(Review.created_at).desc(), col(Review.id).desc())
        return self.session.exec(statement).all()

    def list_recent_published(self, limit: int) -> List[Review]:
        """获取最新的 published 评价"""
        statement = select(Review).where(
            Review.status == ReviewStatus.PUBLISHED
        ).order_by(col(Review.created_at).desc(), col(Review.id).desc()).limit(limit)
        return self.session.exec(statement).all()

    def set_status(self, review: Review, status: ReviewStatus) -> Review:
        """
        修改评价状态

        Args:
            review: 评价对象
            status: 新状态

        Returns:
            更新后的 Review 对象
        """
        review.status = status
        self.session.add(review)
        self.session.flush()
        return review

    def rating_breakdown(self, profile_id: int) -> Dict[int, int]:
        """
        统计画像 published 评价的评分分布

        Args:
            profile_id: 画像 ID

        Returns:
            评分 -> 数量，只包含出现过的评分
        """
        statement = select(Review.rating, func.count()).where(
            Review.target_profile_id == profile_id,
            Review.status == ReviewStatus.PUBLISHED
        ).group_by(Review.rating)
        return {rating: count for rating, count in self.session.exec(statement).all()}

    def published_counts_since(self, since: datetime, until: Optional[datetime] = None) -> Dict[int, int]:
        """统计 [since, until] 窗口内每个画像新增的 published 评价数"""
        statement = select(Review.target_profile_id, func.count()).where(
            col(Review.created_at) >= since,
            Review.status == ReviewStatus.PUBLISHED
        )
        if until is not None:
            statement = statement.where(col(Review.created_at) <= until)
        statement = statement.group_by(Review.target_profile_id)
        return {profile_id: count for profile_id, count in self.session.exec(statement).all()}
