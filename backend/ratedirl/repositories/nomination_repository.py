"""
提名邀请 Repository
提供 nominations 的创建、查询与令牌消费
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import update
from sqlmodel import Session, select, col

from ratedirl.models.base import utc_now
from ratedirl.models.nomination import Nomination


class NominationRepository:
    """
    提名邀请数据访问对象
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
        nominator_user_id: int,
        target_first_name: str,
        target_last_name: str,
        contact_email_or_phone: str,
        invite_token: str,
        profile_id: int,
        created_at: Optional[datetime] = None
    ) -> Nomination:
        """
        创建提名记录

        Args:
            nominator_user_id: 提名人用户 ID
            target_first_name: 被提名人名
            target_last_name: 被提名人姓
            contact_email_or_phone: 联系方式
            invite_token: 一次性邀请令牌
            profile_id: 同时创建的未认领画像 ID
            created_at: 创建时间（默认当前时间）

        Returns:
            创建的 Nomination 对象
        """
        nomination = Nomination(
            nominator_user_id=nominator_user_id,
            target_first_name=target_first_name,
            target_last_name=target_last_name,
            contact_email_or_phone=contact_email_or_phone,
            invite_token=invite_token,
            profile_id=profile_id,
            created_at=created_at or utc_now()
        )
        self.session.add(nomination)
        self.session.flush()
        return nomination

    def get_by_id(self, nomination_id: int) -> Optional[Nomination]:
        return self.session.get(Nomination, nomination_id)

    def get_by_token(self, token: str) -> Optional[Nomination]:
        statement = select(Nomination).where(Nomination.invite_token == token)
        return self.session.exec(statement).first()

    def get_by_nominator(self, user_id: int) -> List[Nomination]:
        """获取用户发出的所有提名（按创建时间倒序）"""
        statement = select(Nomination).where(
            Nomination.nominator_user_id == user_id
        ).order_by(col(Nomination.created_at).desc(), col(Nomination.id).desc())
        return self.session.exec(statement).all()

    def mark_accepted(self, token: str, user_id: int) -> bool:
        """
        消费邀请令牌（compare-and-set）

        只有 accepted = false 的行会被更新，令牌只能成功消费一次

        Args:
            token: 邀请令牌
            user_id: 接受邀请的用户 ID

        Returns:
            消费成功返回 True，令牌不存在或已使用返回 False
        """
        statement = (
            update(Nomination)
            .where(Nomination.invite_token == token, Nomination.accepted == False)  # noqa: E712
            .values(accepted=True, accepted_by_user_id=user_id)
            .execution_options(synchronize_session=False)
        )
        result = self.session.exec(statement)
        return result.rowcount == 1
