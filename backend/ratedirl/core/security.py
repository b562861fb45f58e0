"""
安全工具
密码哈希与邀请令牌生成
"""

import uuid
from functools import lru_cache

from passlib.context import CryptContext

from .config import get_settings


@lru_cache
def _crypt_context() -> CryptContext:
    return CryptContext(schemes=get_settings().password_schemes, deprecated="auto")


def hash_password(raw: str) -> str:
    return _crypt_context().hash(raw)


def verify_password(raw: str, hashed: str) -> bool:
    return _crypt_context().verify(raw, hashed)


def new_invite_token() -> str:
    """一次性邀请令牌"""
    return str(uuid.uuid4())
