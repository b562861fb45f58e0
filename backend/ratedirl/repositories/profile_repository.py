"""
人物画像 Repository
提供 people_profiles 的增删改查与认领操作
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import update
from sqlmodel import Session, select, col

from ratedirl.models.base import utc_now
from ratedirl.models.profile import PeopleProfile, Visibility
from ratedirl.models.review import Review, ReviewStatus

SEARCH_LIMIT = 50


def _contains_pattern(value: str) -> str:
    """子串匹配的 LIKE 模式，转义 %、_ 和反斜杠"""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ProfileRepository:
    """
    人物画像数据访问对象
    封装所有与 people_profiles 表相关的数据库操作
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
        first_name: str,
        last_name: str,
        location: Optional[str] = None,
        contact_email: Optional[str] = None,
        contact_phone: Optional[str] = None,
        owner_user_id: Optional[int] = None,
        claimed_at: Optional[datetime] = None,
        profile_visibility: Visibility = Visibility.PUBLIC,
        reviews_visibility: Visibility = Visibility.PUBLIC,
        created_at: Optional[datetime] = None
    ) -> PeopleProfile:
        """
        创建画像

        传入 owner_user_id 时画像直接处于已认领状态（注册时的自有画像），
        否则为未认领的提名占位

        Args:
            first_name: 名
            last_name: 姓
            location: 所在地（可选）
            contact_email: 认领前的联系邮箱（可选）
            contact_phone: 认领前的联系电话（可选）
            owner_user_id: 所有者用户 ID（可选）
            claimed_at: 认领时间，owner_user_id 非空时必须提供
            profile_visibility: 画像可见性
            reviews_visibility: 评价可见性
            created_at: 创建时间（默认当前时间）

        Returns:
            创建的 PeopleProfile 对象
        """
        claimed = owner_user_id is not None
        profile = PeopleProfile(
            first_name=first_name,
            last_name=last_name,
            location=location,
            contact_email=contact_email,
            contact_phone=contact_phone,
            owner_user_id=owner_user_id,
            claimed=claimed,
            claimed_at=claimed_at if claimed else None,
            profile_visibility=profile_visibility,
            reviews_visibility=reviews_visibility,
            created_at=created_at or utc_now()
        )
        self.session.add(profile)
        self.session.flush()
        return profile

    def get_by_id(self, profile_id: int) -> Optional[PeopleProfile]:
        """
        根据 ID 获取画像

        Args:
            profile_id: 画像 ID

        Returns:
            PeopleProfile 对象，不存在则返回 None
        """
        return self.session.get(PeopleProfile, profile_id)

    def get_by_owner(self, user_id: int) -> Optional[PeopleProfile]:
        """
        获取用户拥有的画像

        Args:
            user_id: 用户 ID

        Returns:
            PeopleProfile 对象，不存在则返回 None
        """
        statement = select(PeopleProfile).where(PeopleProfile.owner_user_id == user_id)
        return self.session.exec(statement).first()

    def get_many(self, profile_ids: List[int]) -> Dict[int, PeopleProfile]:
        """批量获取画像，返回 id -> PeopleProfile 映射"""
        if not profile_ids:
            return {}
        statement = select(PeopleProfile).where(col(PeopleProfile.id).in_(set(profile_ids)))
        return {profile.id: profile for profile in self.session.exec(statement).all()}

    def search_public(self, query: str, location: Optional[str] = None) -> List[PeopleProfile]:
        """
        按姓名搜索公开画像

        名、姓、"名 姓" 三者任一包含关键字即命中（大小写不敏感），
        可选按所在地子串过滤；私密画像永远不会出现在结果中

        Args:
            query: 姓名关键字
            location: 所在地关键字（可选）

        Returns:
            最多 SEARCH_LIMIT 个 PeopleProfile 对象
        """
        term = _contains_pattern(query)
        full_name = col(PeopleProfile.first_name) + " " + col(PeopleProfile.last_name)
        statement = select(PeopleProfile).where(
            (col(PeopleProfile.first_name).ilike(term, escape="\\"))
            | (col(PeopleProfile.last_name).ilike(term, escape="\\"))
            | (full_name.ilike(term, escape="\\")),
            PeopleProfile.profile_visibility == Visibility.PUBLIC
        )
        if location:
            statement = statement.where(
                col(PeopleProfile.location).ilike(_contains_pattern(location), escape="\\")
            )
        statement = statement.order_by(col(PeopleProfile.id)).limit(SEARCH_LIMIT)
        return self.session.exec(statement).all()

    def list_recently_claimed_public(self, limit: int) -> List[PeopleProfile]:
        """获取最近认领的公开画像（按认领时间倒序）"""
        statement = select(PeopleProfile).where(
            PeopleProfile.claimed == True,  # noqa: E712
            PeopleProfile.profile_visibility == Visibility.PUBLIC
        ).order_by(col(PeopleProfile.claimed_at).desc()).limit(limit)
        return self.session.exec(statement).all()

    def update(self, profile: PeopleProfile, data: Dict[str, Any]) -> PeopleProfile:
        """
        更新画像字段

        Args:
            profile: 画像对象
            data: 字段名 -> 新值（不含认领相关字段）

        Returns:
            更新后的 PeopleProfile 对象
        """
        for key, value in data.items():
            setattr(profile, key, value)
        self.session.add(profile)
        self.session.flush()
        return profile

    def mark_claimed(self, profile_id: int, user_id: int, claimed_at: datetime) -> bool:
        """
        认领画像（compare-and-set）

        只有 claimed = false 的行会被更新，并发的第二次认领更新 0 行

        Args:
            profile_id: 画像 ID
            user_id: 认领用户 ID
            claimed_at: 认领时间

        Returns:
            认领成功返回 True，画像已被认领返回 False
        """
        statement = (
            update(PeopleProfile)
            .where(PeopleProfile.id == profile_id, PeopleProfile.claimed == False)  # noqa: E712
            .values(owner_user_id=user_id, claimed=True, claimed_at=claimed_at)
            .execution_options(synchronize_session=False)
        )
        result = self.session.exec(statement)
        return result.rowcount == 1

    def publish_pending_reviews(self, profile_id: int, claimant_user_id: Optional[int] = None) -> int:
        """
        把画像上所有 pending 评价批量转为 published

        hidden 评价保持不变；认领人自己写的 pending 评价保持 pending

        Args:
            profile_id: 画像 ID
            claimant_user_id: 认领人用户 ID（可选）

        Returns:
            被转换的评价数量
        """
        statement = update(Review).where(
            Review.target_profile_id == profile_id,
            Review.status == ReviewStatus.PENDING
        )
        if claimant_user_id is not None:
            statement = statement.where(Review.reviewer_user_id != claimant_user_id)
        statement = statement.values(status=ReviewStatus.PUBLISHED).execution_options(
            synchronize_session=False
        )
        result = self.session.exec(statement)
        return result.rowcount
