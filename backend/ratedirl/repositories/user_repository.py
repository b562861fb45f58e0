"""
用户管理 Repository
提供 users 表的增删改查操作
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, update
from sqlmodel import Session, select, col

from ratedirl.models.user import User
from ratedirl.models.activity import Follow, ProfileView


class UserRepository:
    """
    用户数据访问对象
    封装所有与 users 表相关的数据库操作；写操作只 flush，由服务层提交
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    def get_by_id(self, user_id: int) -> Optional[User]:
        """
        根据 ID 获取用户

        Args:
            user_id: 用户 ID

        Returns:
            User 对象，不存在则返回 None
        """
        return self.session.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        """
        根据邮箱获取用户（大小写不敏感）

        Args:
            email: 邮箱

        Returns:
            User 对象，不存在则返回 None
        """
        statement = select(User).where(User.email == email.strip().lower())
        return self.session.exec(statement).first()

    def get_by_username(self, username: str) -> Optional[User]:
        """
        根据用户名获取用户（大小写不敏感）

        Args:
            username: 用户名

        Returns:
            User 对象，不存在则返回 None
        """
        statement = select(User).where(func.lower(User.username) == username.strip().lower())
        return self.session.exec(statement).first()

    def get_many(self, user_ids: List[int]) -> Dict[int, User]:
        """批量获取用户，返回 id -> User 映射，缺失的 id 不出现在结果中"""
        if not user_ids:
            return {}
        statement = select(User).where(col(User.id).in_(set(user_ids)))
        return {user.id: user for user in self.session.exec(statement).all()}

    def list_all(self) -> List[User]:
        """获取所有用户（按注册时间倒序）"""
        statement = select(User).order_by(col(User.created_at).desc())
        return self.session.exec(statement).all()

    def create(self, **fields: Any) -> User:
        """
        创建新用户

        Args:
            **fields: User 字段，email 会被转为小写

        Returns:
            创建的 User 对象（已分配 ID）
        """
        fields["email"] = fields["email"].strip().lower()
        user = User(**fields)
        self.session.add(user)
        self.session.flush()
        return user

    def update(self, user: User, data: Dict[str, Any]) -> User:
        """
        更新用户字段

        Args:
            user: 用户对象
            data: 字段名 -> 新值

        Returns:
            更新后的 User 对象
        """
        for key, value in data.items():
            setattr(user, key, value)
        self.session.add(user)
        self.session.flush()
        return user

    def hard_delete(self, user: User) -> None:
        """
        物理删除用户

        同时删除其关注关系、把其浏览记录匿名化；
        评价、举报、提名与画像保留悬空引用，读取方需容忍用户缺失
        """
        self.session.exec(delete(Follow).where(Follow.follower_user_id == user.id))
        self.session.exec(
            update(ProfileView)
            .where(ProfileView.viewer_user_id == user.id)
            .values(viewer_user_id=None)
        )
        self.session.delete(user)
        self.session.flush()
