"""
Repository (DAO) 模块
提供数据库操作的抽象层，封装 CRUD 逻辑
"""

from .user_repository import UserRepository
from .profile_repository import ProfileRepository
from .review_repository import ReviewRepository
from .nomination_repository import NominationRepository
from .report_repository import ReportRepository
from .activity_repository import ActivityRepository

__all__ = [
    "UserRepository",
    "ProfileRepository",
    "ReviewRepository",
    "NominationRepository",
    "ReportRepository",
    "ActivityRepository",
]
