"""
动态流与热度服务层

每次请求都从源表重新计算，不做缓存；
50 / 20 / 10 的上限是保护阈值，不是分页
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Union

from sqlmodel import Session

from ratedirl.core.errors import InvalidInput, NotFound
from ratedirl.db.transaction import transaction
from ratedirl.models.activity import Follow, ProfileView
from ratedirl.models.base import ensure_utc, utc_now
from ratedirl.models.profile import PeopleProfile, ProfileRead
from ratedirl.models.user import User
from ratedirl.repositories.activity_repository import ActivityRepository
from ratedirl.repositories.profile_repository import ProfileRepository
from ratedirl.repositories.review_repository import ReviewRepository
from ratedirl.repositories.user_repository import UserRepository
from ratedirl.schemas.account import UserSummary
from ratedirl.schemas.feed import (
    ClaimFeedItem,
    FeedFilter,
    FeedItem,
    ReviewFeedItem,
    TrendingFeedItem,
    TrendingProfile,
)
from .guards import require_user
from .review_service import ReviewService

logger = logging.getLogger(__name__)

FEED_LIMIT = 50
REVIEW_EVENTS_LIMIT = 50
CLAIM_EVENTS_LIMIT = 20
TRENDING_LIMIT = 10
TRENDING_WINDOW = timedelta(days=7)
TRENDING_REVIEW_WEIGHT = 10

# 各过滤器包含的事件流
_REVIEW_FILTERS = {FeedFilter.ALL, FeedFilter.REVIEWS, FeedFilter.FOLLOWING}
_CLAIM_FILTERS = {FeedFilter.ALL, FeedFilter.NEW_PROFILES, FeedFilter.FOLLOWING}
_TRENDING_FILTERS = {FeedFilter.ALL, FeedFilter.TRENDING}


class FeedService:
    """
    动态流服务类

    核心职责：
    1. 浏览记录与关注关系
    2. 热度计算：7 天内浏览数 + 10 × 7 天内 published 评价数
    3. 合并评价、认领、热度三类事件为统一的时间线
    """

    def __init__(self, session: Session, clock: Callable[[], datetime] = utc_now):
        self.session = session
        self.clock = clock
        self.activity = ActivityRepository(session)
        self.profiles = ProfileRepository(session)
        self.reviews = ReviewRepository(session)
        self.users = UserRepository(session)
        self.review_service = ReviewService(session, clock=clock)

    # ==================== 浏览记录 ====================

    def record_profile_view(self, profile_id: int, viewer: Optional[User] = None) -> ProfileView:
        with transaction(self.session):
            view = self.activity.record_view(
                profile_id, viewer.id if viewer else None, created_at=self.clock()
            )
        return view

    def get_profile_view_count(self, profile_id: int) -> int:
        return self.activity.count_views(profile_id)

    # ==================== 关注 ====================

    def _require_profile(self, profile_id: int) -> PeopleProfile:
        profile = self.profiles.get_by_id(profile_id)
        if profile is None:
            raise NotFound("Profile", profile_id)
        return profile

    def follow(self, user: Optional[User], profile_id: int) -> Follow:
        """关注画像；重复关注返回已有记录"""
        user = require_user(user)
        with transaction(self.session):
            self._require_profile(profile_id)
            follow = self.activity.get_follow(user.id, profile_id)
            if follow is None:
                follow = self.activity.create_follow(user.id, profile_id, created_at=self.clock())
        return follow

    def unfollow(self, user: Optional[User], profile_id: int) -> None:
        user = require_user(user)
        with transaction(self.session):
            self._require_profile(profile_id)
            self.activity.delete_follow(user.id, profile_id)

    def is_following(self, user: Optional[User], profile_id: int) -> bool:
        user = require_user(user)
        self._require_profile(profile_id)
        return self.activity.get_follow(user.id, profile_id) is not None

    def get_followed_profile_ids(self, user: Optional[User]) -> List[int]:
        user = require_user(user)
        return self.activity.followed_profile_ids(user.id)

    # ==================== 热度 ====================

    def get_trending_profiles(self) -> List[TrendingProfile]:
        """
        计算热度榜

        score = 窗口内浏览数 + TRENDING_REVIEW_WEIGHT × 窗口内 published 评价数，
        只统计公开画像，同分按画像 ID 升序，取前 TRENDING_LIMIT 个

        Returns:
            TrendingProfile 列表（按 score 倒序）
        """
        now = self.clock()
        since = now - TRENDING_WINDOW
        scores: Dict[int, int] = {}
        for profile_id, views in self.activity.view_counts_since(since, now).items():
            scores[profile_id] = scores.get(profile_id, 0) + views
        for profile_id, reviews in self.reviews.published_counts_since(since, now).items():
            scores[profile_id] = scores.get(profile_id, 0) + reviews * TRENDING_REVIEW_WEIGHT

        profiles = self.profiles.get_many(list(scores))
        ranked = sorted(
            (profile for profile in profiles.values() if profile.is_public),
            key=lambda profile: (-scores[profile.id], profile.id)
        )[:TRENDING_LIMIT]
        return [
            TrendingProfile(profile=ProfileRead.model_validate(profile), score=scores[profile.id])
            for profile in ranked
        ]

    # ==================== 动态流 ====================

    def get_feed(self, user: Optional[User], feed_filter: Union[FeedFilter, str] = FeedFilter.ALL) -> List[FeedItem]:
        """
        获取动态流

        Args:
            user: 调用方（following 过滤器依赖其关注列表）
            feed_filter: all / reviews / new_profiles / trending / following

        Returns:
            按 created_at 倒序的 FeedItem 列表，最多 FEED_LIMIT 条

        Raises:
            InvalidInput: 未知的过滤器
        """
        user = require_user(user)
        try:
            feed_filter = FeedFilter(feed_filter)
        except ValueError:
            raise InvalidInput(f"Invalid filter: {feed_filter}", field="filter") from None

        followed = None
        if feed_filter == FeedFilter.FOLLOWING:
            followed = set(self.activity.followed_profile_ids(user.id))

        items: List[FeedItem] = []
        if feed_filter in _REVIEW_FILTERS:
            items.extend(self._review_events(followed))
        if feed_filter in _CLAIM_FILTERS:
            items.extend(self._claim_events(followed))
        if feed_filter in _TRENDING_FILTERS:
            items.extend(self._trending_events())

        items.sort(key=lambda item: item.created_at, reverse=True)
        return items[:FEED_LIMIT]

    def _review_events(self, followed: Optional[set]) -> List[ReviewFeedItem]:
        reviews = self.reviews.list_recent_published(REVIEW_EVENTS_LIMIT)
        profiles = self.profiles.get_many([review.target_profile_id for review in reviews])
        visible = []
        for review in reviews:
            profile = profiles.get(review.target_profile_id)
            if profile is None or not profile.is_public:
                continue
            if followed is not None and profile.id not in followed:
                continue
            visible.append(review)

        events = []
        for review in self.review_service.with_reviewers(visible):
            events.append(ReviewFeedItem(
                id=f"review-{review.id}",
                created_at=ensure_utc(review.created_at),
                profile=ProfileRead.model_validate(profiles[review.target_profile_id]),
                review=review
            ))
        return events

    def _claim_events(self, followed: Optional[set]) -> List[ClaimFeedItem]:
        profiles = [
            profile for profile in self.profiles.list_recently_claimed_public(CLAIM_EVENTS_LIMIT)
            if profile.claimed_at is not None and (followed is None or profile.id in followed)
        ]
        owners = self.users.get_many([profile.owner_user_id for profile in profiles])
        events = []
        for profile in profiles:
            owner = owners.get(profile.owner_user_id)
            events.append(ClaimFeedItem(
                id=f"claimed-{profile.id}",
                created_at=ensure_utc(profile.claimed_at),
                profile=ProfileRead.model_validate(profile),
                user=UserSummary.model_validate(owner) if owner else None
            ))
        return events

    def _trending_events(self) -> List[TrendingFeedItem]:
        # 热度事件以查询时刻为时间戳，在包含热度的视图里总是排在最前
        now = ensure_utc(self.clock())
        return [
            TrendingFeedItem(
                id=f"trending-{trending.profile.id}",
                created_at=now,
                profile=trending.profile,
                trending_score=trending.score
            )
            for trending in self.get_trending_profiles()
        ]
