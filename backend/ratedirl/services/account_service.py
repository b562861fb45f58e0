"""
账户服务层

封装身份与账户逻辑，包括：
1. 注册：校验条款同意、邮箱与用户名唯一，并在同一事务内创建自有画像
   （携带邀请令牌注册时改为认领被提名的画像）
2. 凭证校验：失败时统一返回 AuthenticationFailed，不泄露用户是否存在
3. 个人设置与手机号验证（验证为占位实现）
"""

import logging
from datetime import datetime
from typing import Any, Callable, List, Optional

from sqlmodel import Session

from ratedirl.core.errors import AuthenticationFailed, Conflict, InvalidInput, NotFound
from ratedirl.core.security import hash_password, verify_password
from ratedirl.core.validation import parse_input
from ratedirl.db.transaction import transaction
from ratedirl.models.base import utc_now
from ratedirl.models.user import User
from ratedirl.repositories.activity_repository import ActivityRepository
from ratedirl.repositories.profile_repository import ProfileRepository
from ratedirl.repositories.review_repository import ReviewRepository
from ratedirl.repositories.user_repository import UserRepository
from ratedirl.schemas.account import SignupIn, UserAnalytics, UserSettingsUpdate
from .guards import require_admin, require_user
from .nomination_service import NominationService
from .review_service import ReviewService

logger = logging.getLogger(__name__)


class AccountService:
    """
    账户服务类

    使用示例：
        service = AccountService(session)
        user = service.signup(email="a@x.com", username="a", password="secret1",
                              first_name="A", last_name="B", accepted_terms=True)
    """

    def __init__(self, session: Session, clock: Callable[[], datetime] = utc_now):
        self.session = session
        self.clock = clock
        self.users = UserRepository(session)
        self.profiles = ProfileRepository(session)
        self.activity = ActivityRepository(session)
        self.reviews = ReviewRepository(session)
        self.nomination_service = NominationService(session, clock=clock)
        self.review_service = ReviewService(session, clock=clock)

    def signup(self, **data: Any) -> User:
        """
        注册新用户

        Args:
            **data: SignupIn 字段

        Returns:
            创建的 User 对象

        Raises:
            InvalidInput: 字段缺失、格式错误或未同意条款
            Conflict: 邮箱或用户名已被占用
            NotFound: 携带的邀请令牌无效或已被使用
        """
        payload = parse_input(SignupIn, **data)
        now = self.clock()

        with transaction(self.session):
            if self.users.get_by_email(payload.email) is not None:
                raise Conflict("Email already registered", field="email")
            if self.users.get_by_username(payload.username) is not None:
                raise Conflict("Username already taken", field="username")

            user = self.users.create(
                email=payload.email,
                username=payload.username,
                password_hash=hash_password(payload.password),
                first_name=payload.first_name,
                last_name=payload.last_name,
                location=payload.location,
                bio=payload.bio,
                phone_number=payload.phone_number,
                photo_url=payload.photo_url,
                terms_accepted_at=now,
                created_at=now
            )

            if payload.invite_token:
                self.nomination_service._accept(payload.invite_token, user)
            else:
                self.profiles.create(
                    first_name=user.first_name,
                    last_name=user.last_name,
                    location=user.location,
                    owner_user_id=user.id,
                    claimed_at=now,
                    created_at=now
                )
        logger.info("User %s signed up as '%s'", user.id, payload.username)
        return user

    def validate_credentials(self, email: str, password: str) -> User:
        """
        校验邮箱和密码

        Raises:
            AuthenticationFailed: 用户不存在或密码错误（不区分两者）
        """
        user = self.users.get_by_email(email or "")
        if user is None or not verify_password(password or "", user.password_hash):
            raise AuthenticationFailed()
        return user

    def get_user(self, user_id: int) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFound("User", user_id)
        return user

    def list_users(self, caller: Optional[User]) -> List[User]:
        require_admin(caller)
        return self.users.list_all()

    def update_settings(self, user: Optional[User], **patch: Any) -> User:
        """
        修改个人设置

        修改手机号会清除已验证标记

        Raises:
            InvalidInput: 补丁包含不允许的字段（如 phone_verified、role）
        """
        user = require_user(user)
        data = parse_input(UserSettingsUpdate, **patch).model_dump(exclude_unset=True)
        for key in ("first_name", "last_name"):
            if key in data and data[key] is None:
                raise InvalidInput(f"{key}: may not be null", field=key)

        with transaction(self.session):
            if "phone_number" in data and data["phone_number"] != user.phone_number:
                data["phone_verified"] = False
                data["phone_verified_at"] = None
            self.users.update(user, data)
        return user

    def verify_phone(self, user: Optional[User]) -> User:
        """
        标记手机号已验证

        占位实现：不发送验证码，只要求已填写手机号
        """
        user = require_user(user)
        if not user.phone_number:
            raise InvalidInput("phone_number: required before verification", field="phone_number")
        with transaction(self.session):
            self.users.update(user, {"phone_verified": True, "phone_verified_at": self.clock()})
        logger.info("User %s phone marked as verified", user.id)
        return user

    def get_analytics(self, user: Optional[User]) -> UserAnalytics:
        """
        个人数据面板

        profile_views 与 reviews_received 针对用户自有画像，
        reviews_received 只统计 published 评价
        """
        user = require_user(user)
        profile_views = 0
        reviews_received = 0
        profile = self.profiles.get_by_owner(user.id)
        if profile is not None:
            profile_views = self.activity.count_views(profile.id)
            reviews_received = self.review_service.get_profile_rating_stats(profile.id).count
        return UserAnalytics(
            profile_views=profile_views,
            reviews_received=reviews_received,
            reviews_given=len(self.reviews.get_by_reviewer(user.id))
        )

