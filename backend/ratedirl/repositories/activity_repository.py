"""
活动 Repository
提供浏览日志与关注关系的读写
"""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import delete, func
from sqlmodel import Session, select, col

from ratedirl.models.activity import Follow, ProfileView
from ratedirl.models.base import utc_now


class ActivityRepository:
    """
    浏览日志与关注关系数据访问对象
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    # ==================== ProfileView 操作 ====================

    def record_view(
        self,
        target_profile_id: int,
        viewer_user_id: Optional[int] = None,
        created_at: Optional[datetime] = None
    ) -> ProfileView:
        """
        追加一条浏览记录

        Args:
            target_profile_id: 被浏览的画像 ID
            viewer_user_id: 浏览者用户 ID（匿名浏览为 None）
            created_at: 浏览时间（默认当前时间）

        Returns:
            创建的 ProfileView 对象
        """
        view = ProfileView(
            target_profile_id=target_profile_id,
            viewer_user_id=viewer_user_id,
            created_at=created_at or utc_now()
        )
        self.session.add(view)
        self.session.flush()
        return view

    def count_views(self, profile_id: int) -> int:
        statement = select(func.count()).select_from(ProfileView).where(
            ProfileView.target_profile_id == profile_id
        )
        return self.session.exec(statement).one()

    def view_counts_since(self, since: datetime, until: Optional[datetime] = None) -> Dict[int, int]:
        """统计 [since, until] 窗口内每个画像的浏览次数"""
        statement = select(ProfileView.target_profile_id, func.count()).where(
            col(ProfileView.created_at) >= since
        )
        if until is not None:
            statement = statement.where(col(ProfileView.created_at) <= until)
        statement = statement.group_by(ProfileView.target_profile_id)
        return {profile_id: count for profile_id, count in self.session.exec(statement).all()}

    # ==================== Follow 操作 ====================

    def get_follow(self, follower_user_id: int, target_profile_id: int) -> Optional[Follow]:
        statement = select(Follow).where(
            Follow.follower_user_id == follower_user_id,
            Follow.target_profile_id == target_profile_id
        )
        return self.session.exec(statement).first()

    def create_follow(
        self,
        follower_user_id: int,
        target_profile_id: int,
        created_at: Optional[datetime] = None
    ) -> Follow:
        follow = Follow(
            follower_user_id=follower_user_id,
            target_profile_id=target_profile_id,
            created_at=created_at or utc_now()
        )
        self.session.add(follow)
        self.session.flush()
        return follow

    def delete_follow(self, follower_user_id: int, target_profile_id: int) -> bool:
        """
        取消关注

        Returns:
            删除了关注关系返回 True，原本未关注返回 False
        """
        statement = delete(Follow).where(
            Follow.follower_user_id == follower_user_id,
            Follow.target_profile_id == target_profile_id
        )
        result = self.session.exec(statement)
        return result.rowcount > 0

    def followed_profile_ids(self, user_id: int) -> List[int]:
        statement = select(Follow.target_profile_id).where(Follow.follower_user_id == user_id)
        return list(self.session.exec(statement).all())
