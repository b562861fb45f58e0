"""
提名邀请服务层

提名 = 一个未认领画像 + 一个一次性邀请令牌，二者在同一事务内创建；
接受邀请时先消费令牌，再汇入 ProfileService 的认领逻辑，
认领失败会连同令牌消费一起回滚
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlmodel import Session

from ratedirl.core.errors import NotFound
from ratedirl.core.security import new_invite_token
from ratedirl.core.validation import parse_input
from ratedirl.db.transaction import transaction
from ratedirl.models.base import utc_now
from ratedirl.models.nomination import Nomination
from ratedirl.models.profile import ProfileRead
from ratedirl.models.user import User
from ratedirl.repositories.nomination_repository import NominationRepository
from ratedirl.schemas.nomination import InviteLanding, NominationCreate
from .guards import require_user
from .profile_service import ProfileService

logger = logging.getLogger(__name__)

INVALID_INVITE = "Invalid invite"
USED_INVITE = "Invalid or already used invite"


class NominationService:
    """
    提名邀请服务类
    """

    def __init__(self, session: Session, clock: Callable[[], datetime] = utc_now):
        self.session = session
        self.clock = clock
        self.nominations = NominationRepository(session)
        self.profile_service = ProfileService(session, clock=clock)

    def create_nomination(
        self,
        nominator: Optional[User],
        target_first_name: str,
        target_last_name: str,
        contact_email_or_phone: str
    ) -> Nomination:
        """
        提名一个尚未注册的人

        联系方式包含 "@" 时存为画像的 contact_email，否则存为 contact_phone

        Args:
            nominator: 提名人
            target_first_name: 被提名人名
            target_last_name: 被提名人姓
            contact_email_or_phone: 邮箱或手机号

        Returns:
            创建的 Nomination 对象（profile_id 指向新建的未认领画像）
        """
        nominator = require_user(nominator)
        payload = parse_input(
            NominationCreate,
            target_first_name=target_first_name,
            target_last_name=target_last_name,
            contact_email_or_phone=contact_email_or_phone
        )
        contact = payload.contact_email_or_phone
        is_email = "@" in contact

        with transaction(self.session):
            profile = self.profile_service._create(
                first_name=payload.target_first_name,
                last_name=payload.target_last_name,
                contact_email=contact if is_email else None,
                contact_phone=None if is_email else contact
            )
            nomination = self.nominations.create(
                nominator_user_id=nominator.id,
                target_first_name=payload.target_first_name,
                target_last_name=payload.target_last_name,
                contact_email_or_phone=contact,
                invite_token=new_invite_token(),
                profile_id=profile.id,
                created_at=self.clock()
            )
        logger.info(
            "User %s nominated profile %s (nomination %s)",
            nominator.id, nomination.profile_id, nomination.id
        )
        return nomination

    def get_nomination_by_token(self, token: str) -> InviteLanding:
        """
        公开查询邀请（无需登录）

        Returns:
            InviteLanding：提名记录与画像摘要

        Raises:
            NotFound: 令牌无效
        """
        nomination = self.nominations.get_by_token(token) if token else None
        if nomination is None:
            raise NotFound("Invite", message=INVALID_INVITE)
        profile = self.profile_service.get_profile(nomination.profile_id)
        return InviteLanding(nomination=nomination, profile=ProfileRead.model_validate(profile))

    def accept_nomination(self, token: str, user: Optional[User]) -> Nomination:
        """
        接受邀请并认领对应画像

        令牌消费是 compare-and-set，重复接受返回 NotFound 且不会重复级联

        Raises:
            NotFound: 令牌无效或已被使用
            Conflict: 画像已被他人认领，或用户已拥有画像
        """
        user = require_user(user)
        with transaction(self.session):
            nomination = self._accept(token, user)
        return nomination

    def _accept(self, token: str, user: User) -> Nomination:
        """接受邀请的事务内实现，调用方负责提交"""
        if not token or not self.nominations.mark_accepted(token, user.id):
            raise NotFound("Invite", message=USED_INVITE)
        nomination = self.nominations.get_by_token(token)
        self.session.refresh(nomination)
        self.profile_service._claim(nomination.profile_id, user)
        logger.info("User %s accepted nomination %s", user.id, nomination.id)
        return nomination

    def get_nominations_by_user(self, user: Optional[User]) -> List[Nomination]:
        user = require_user(user)
        return self.nominations.get_by_nominator(user.id)
