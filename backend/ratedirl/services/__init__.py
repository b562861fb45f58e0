"""
服务层模块
提供业务逻辑的抽象层，每个服务在一个逻辑事务内完成一次调用
"""

from .account_service import AccountService
from .profile_service import ProfileService
from .review_service import ReviewService
from .nomination_service import NominationService
from .moderation_service import ModerationService
from .feed_service import FeedService

__all__ = [
    "AccountService",
    "ProfileService",
    "ReviewService",
    "NominationService",
    "ModerationService",
    "FeedService",
]
