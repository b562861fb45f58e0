"""
评价服务层

评价状态机：
- 创建时：目标画像已认领 → published，未认领 → pending
- 认领画像时：pending 批量转为 published（见 ProfileService.claim_profile）
- 管理员：可把评价在三种状态间任意切换，包括 pending → hidden
"""

import logging
from typing import Callable, Iterable, List, Optional
from datetime import datetime

from sqlmodel import Session

from ratedirl.core.errors import Forbidden, InvalidInput, NotFound
from ratedirl.core.validation import parse_input
from ratedirl.db.transaction import transaction
from ratedirl.models.base import utc_now
from ratedirl.models.review import RATING_MAX, RATING_MIN, Review, ReviewStatus
from ratedirl.models.user import User
from ratedirl.repositories.profile_repository import ProfileRepository
from ratedirl.repositories.review_repository import ReviewRepository
from ratedirl.repositories.user_repository import UserRepository
from ratedirl.schemas.account import UserSummary
from ratedirl.schemas.review import RatingStats, ReviewCreate, ReviewWithReviewer
from .guards import require_admin, require_user

logger = logging.getLogger(__name__)


class ReviewService:
    """
    评价服务类

    核心职责：
    1. 创建评价并按目标画像认领状态决定初始状态
    2. 管理员状态流转
    3. 评分统计（每次实时计算，不缓存）
    """

    def __init__(self, session: Session, clock: Callable[[], datetime] = utc_now):
        self.session = session
        self.clock = clock
        self.reviews = ReviewRepository(session)
        self.profiles = ProfileRepository(session)
        self.users = UserRepository(session)

    def create_review(
        self,
        reviewer: Optional[User],
        target_profile_id: int,
        rating: int,
        text: str
    ) -> Review:
        """
        创建评价

        校验顺序：目标存在 → 不能评价自己 → 评分与文本合法，
        因此自评无论输入是否合法都返回 Forbidden

        Args:
            reviewer: 评价人
            target_profile_id: 目标画像 ID
            rating: 评分 1-5
            text: 评价文本，1-150 字符

        Returns:
            创建的 Review 对象

        Raises:
            NotFound: 目标画像不存在
            Forbidden: 目标画像属于评价人
            InvalidInput: 评分或文本越界
        """
        reviewer = require_user(reviewer)
        with transaction(self.session):
            profile = self.profiles.get_by_id(target_profile_id)
            if profile is None:
                raise NotFound("Profile", target_profile_id)
            if profile.is_owned_by(reviewer.id):
                raise Forbidden("Cannot review your own profile")

            payload = parse_input(
                ReviewCreate, target_profile_id=target_profile_id, rating=rating, text=text
            )
            # 以本事务读到的认领状态为准，不做事后修正
            status = ReviewStatus.PUBLISHED if profile.claimed else ReviewStatus.PENDING
            review = self.reviews.create(
                reviewer_user_id=reviewer.id,
                target_profile_id=profile.id,
                rating=payload.rating,
                text=payload.text,
                status=status,
                created_at=self.clock()
            )
        logger.info("Review %s created on profile %s with status %s", review.id, profile.id, status.value)
        return review

    def get_review(self, review_id: int) -> Review:
        review = self.reviews.get_by_id(review_id)
        if review is None:
            raise NotFound("Review", review_id)
        return review

    def update_review_status(self, review_id: int, status, caller: Optional[User]) -> Review:
        """
        管理员修改评价状态

        Args:
            review_id: 评价 ID
            status: 目标状态（ReviewStatus 或其字符串值）
            caller: 调用方，必须是管理员

        Returns:
            更新后的 Review 对象
        """
        admin = require_admin(caller)
        try:
            new_status = ReviewStatus(status)
        except ValueError:
            raise InvalidInput(f"Unknown review status: {status}", field="status") from None

        with transaction(self.session):
            review = self.get_review(review_id)
            previous = review.status
            self.reviews.set_status(review, new_status)
        logger.info(
            "Admin %s moved review %s from %s to %s",
            admin.id, review_id, previous.value, new_status.value
        )
        return review

    def get_reviews_for_profile(self, profile_id: int, include_hidden: bool = False) -> List[Review]:
        """
        获取画像的评价

        默认只返回 published；include_hidden=True 返回全部状态，
        是否对调用方展示由调用方决定

        Args:
            profile_id: 画像 ID
            include_hidden: 是否包含非 published 评价

        Returns:
            Review 对象列表（按创建时间倒序）
        """
        return self.reviews.get_for_profile(profile_id, include_hidden=include_hidden)

    def get_reviews_by_user(self, user: Optional[User]) -> List[Review]:
        user = require_user(user)
        return self.reviews.get_by_reviewer(user.id)

    def with_reviewers(self, reviews: Iterable[Review]) -> List[ReviewWithReviewer]:
        """
        为评价附加评价人摘要

        评价人已被封禁删除时 reviewer 为 None
        """
        reviews = list(reviews)
        reviewers = self.users.get_many([review.reviewer_user_id for review in reviews])
        result = []
        for review in reviews:
            reviewer = reviewers.get(review.reviewer_user_id)
            result.append(ReviewWithReviewer(
                **review.model_dump(),
                reviewer=UserSummary.model_validate(reviewer) if reviewer else None
            ))
        return result

    def get_profile_rating_stats(self, profile_id: int) -> RatingStats:
        """
        计算画像的评分统计

        只统计 published 评价；没有评价时 average 为 0，不会除零

        Args:
            profile_id: 画像 ID

        Returns:
            RatingStats：平均分、数量和 1-5 分布
        """
        counts = self.reviews.rating_breakdown(profile_id)
        breakdown = {rating: counts.get(rating, 0) for rating in range(RATING_MIN, RATING_MAX + 1)}
        count = sum(breakdown.values())
        total = sum(rating * n for rating, n in breakdown.items())
        return RatingStats(
            average=total / count if count else 0.0,
            count=count,
            breakdown=breakdown
        )
