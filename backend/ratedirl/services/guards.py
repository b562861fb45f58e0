"""
调用方身份校验
身份总是作为参数显式传入，这里只做判定
"""

from typing import Optional

from ratedirl.core.errors import AuthenticationFailed, Forbidden
from ratedirl.models.user import User


def require_user(caller: Optional[User]) -> User:
    if caller is None:
        raise AuthenticationFailed("Authentication required")
    return caller


def require_admin(caller: Optional[User]) -> User:
    user = require_user(caller)
    if not user.is_admin:
        raise Forbidden("Admin role required")
    return user
