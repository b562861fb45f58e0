"""
画像服务层

封装画像注册表的业务逻辑，包括：
1. 创建、查询、搜索与更新画像
2. 可见性读取约定：所有者永远可读；其他人仅在 profile_visibility 为 public 时可读
3. 认领：唯一的认领实现，直接认领和接受邀请都汇入这里
"""

import logging
from datetime import datetime
from typing import Any, Callable, List, Optional

from sqlmodel import Session

from ratedirl.core.errors import Conflict, Forbidden, InvalidInput, NotFound
from ratedirl.core.validation import parse_input
from ratedirl.db.transaction import transaction
from ratedirl.models.base import utc_now
from ratedirl.models.profile import PeopleProfile, ProfileRead, Visibility
from ratedirl.models.user import User
from ratedirl.repositories.activity_repository import ActivityRepository
from ratedirl.repositories.profile_repository import ProfileRepository
from ratedirl.schemas.profile import ProfileCreate, ProfileDetail, ProfileUpdate
from .guards import require_user
from .review_service import ReviewService

logger = logging.getLogger(__name__)

# 补丁中不允许显式置空的字段
_NON_NULLABLE_PATCH_FIELDS = ("first_name", "last_name", "profile_visibility", "reviews_visibility")


class ProfileService:
    """
    画像服务类

    使用示例：
        service = ProfileService(session)
        profile = service.claim_profile(profile_id, user)
    """

    def __init__(self, session: Session, clock: Callable[[], datetime] = utc_now):
        self.session = session
        self.clock = clock
        self.profiles = ProfileRepository(session)
        self.activity = ActivityRepository(session)
        self.review_service = ReviewService(session, clock=clock)

    # ==================== 创建与查询 ====================

    def create_profile(self, owner_user_id: Optional[int] = None, **attrs: Any) -> PeopleProfile:
        """
        创建画像

        默认未认领；传入 owner_user_id 时创建已认领的自有画像

        Args:
            owner_user_id: 所有者用户 ID（可选）
            **attrs: ProfileCreate 字段

        Returns:
            创建的 PeopleProfile 对象
        """
        with transaction(self.session):
            profile = self._create(owner_user_id=owner_user_id, **attrs)
        return profile

    def _create(self, owner_user_id: Optional[int] = None, **attrs: Any) -> PeopleProfile:
        payload = parse_input(ProfileCreate, **attrs)
        if owner_user_id is not None and self.profiles.get_by_owner(owner_user_id) is not None:
            raise Conflict("User already owns a profile", field="owner_user_id")
        now = self.clock()
        return self.profiles.create(
            **payload.model_dump(),
            owner_user_id=owner_user_id,
            claimed_at=now if owner_user_id is not None else None,
            created_at=now
        )

    def get_profile(self, profile_id: int) -> PeopleProfile:
        profile = self.profiles.get_by_id(profile_id)
        if profile is None:
            raise NotFound("Profile", profile_id)
        return profile

    def get_profile_by_owner(self, user_id: int) -> PeopleProfile:
        profile = self.profiles.get_by_owner(user_id)
        if profile is None:
            raise NotFound("Profile", message=f"User {user_id} has no profile")
        return profile

    def get_my_profile(self, user: Optional[User]) -> PeopleProfile:
        user = require_user(user)
        return self.get_profile_by_owner(user.id)

    def get_readable_profile(self, profile_id: int, viewer: Optional[User]) -> PeopleProfile:
        """
        按可见性约定读取画像

        私密画像对非所有者直接拒绝，而不是返回脱敏结果

        Raises:
            NotFound: 画像不存在
            Forbidden: 画像私密且调用方不是所有者
        """
        profile = self.get_profile(profile_id)
        if not profile.is_public and not profile.is_owned_by(viewer.id if viewer else None):
            raise Forbidden("This profile is private")
        return profile

    def view_profile(self, profile_id: int, viewer: Optional[User] = None) -> ProfileDetail:
        """
        画像详情页

        记录一次浏览（允许匿名），返回画像、评分统计与评价；
        评价只包含 published，且仅在 reviews_visibility 为 public 或调用方为所有者时返回

        Args:
            profile_id: 画像 ID
            viewer: 浏览者（匿名为 None）

        Returns:
            ProfileDetail
        """
        with transaction(self.session):
            profile = self.get_readable_profile(profile_id, viewer)
            self.activity.record_view(
                profile.id, viewer.id if viewer else None, created_at=self.clock()
            )

        is_owner = profile.is_owned_by(viewer.id if viewer else None)
        reviews = []
        if profile.reviews_visibility == Visibility.PUBLIC or is_owner:
            reviews = self.review_service.with_reviewers(
                self.review_service.get_reviews_for_profile(profile.id)
            )
        return ProfileDetail(
            profile=ProfileRead.model_validate(profile),
            stats=self.review_service.get_profile_rating_stats(profile.id),
            reviews=reviews,
            is_owner=is_owner
        )

    def search_profiles(self, query: str, location: Optional[str] = None) -> List[PeopleProfile]:
        """
        按姓名搜索公开画像

        空查询返回空列表而不是报错

        Args:
            query: 姓名关键字
            location: 所在地关键字（可选）

        Returns:
            最多 50 个公开画像
        """
        query = (query or "").strip()
        if not query:
            return []
        location = (location or "").strip() or None
        return self.profiles.search_public(query, location)

    # ==================== 修改 ====================

    def update_profile(self, profile_id: int, caller: Optional[User], **patch: Any) -> PeopleProfile:
        """
        所有者修改画像

        可修改姓名、所在地与两个可见性开关；认领相关字段不能经由这里修改

        Raises:
            NotFound: 画像不存在
            Forbidden: 调用方不是所有者
            InvalidInput: 补丁包含不允许的字段或非法值
        """
        caller = require_user(caller)
        with transaction(self.session):
            profile = self.get_profile(profile_id)
            if not profile.is_owned_by(caller.id):
                raise Forbidden("Not your profile")
            data = parse_input(ProfileUpdate, **patch).model_dump(exclude_unset=True)
            for key in _NON_NULLABLE_PATCH_FIELDS:
                if key in data and data[key] is None:
                    raise InvalidInput(f"{key}: may not be null", field=key)
            self.profiles.update(profile, data)
        return profile

    def claim_profile(self, profile_id: int, user: Optional[User]) -> PeopleProfile:
        """
        认领画像

        在一个事务内完成：compare-and-set 设置所有者，
        并把该画像所有 pending 评价转为 published

        Args:
            profile_id: 画像 ID
            user: 认领用户

        Returns:
            认领后的 PeopleProfile 对象

        Raises:
            NotFound: 画像不存在
            Conflict: 画像已被认领，或用户已拥有画像
        """
        user = require_user(user)
        with transaction(self.session):
            profile = self._claim(profile_id, user)
        return profile

    def _claim(self, profile_id: int, user: User) -> PeopleProfile:
        """认领的事务内实现，调用方负责提交"""
        profile = self.get_profile(profile_id)
        if profile.claimed:
            raise Conflict("Profile already claimed")
        if self.profiles.get_by_owner(user.id) is not None:
            raise Conflict("User already owns a profile")

        # 以数据库中的 claimed 为准，会话里的对象可能已过期
        if not self.profiles.mark_claimed(profile_id, user.id, self.clock()):
            logger.info("Claim of profile %s by user %s lost the race", profile_id, user.id)
            raise Conflict("Profile already claimed")

        published = self.profiles.publish_pending_reviews(profile_id, claimant_user_id=user.id)
        self.session.refresh(profile)
        logger.info(
            "Profile %s claimed by user %s, %d pending reviews published",
            profile_id, user.id, published
        )
        return profile
