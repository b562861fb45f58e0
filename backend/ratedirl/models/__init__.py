"""
数据库模型模块
导出所有表模型和枚举类型
"""

# 身份域
from .user import User, UserPublic, UserRole, KycStatus
# 画像域
from .profile import PeopleProfile, ProfileRead, Visibility
# 评价域
from .review import Review, ReviewStatus
# 提名域
from .nomination import Nomination
# 审核域
from .report import Report, ReportStatus
# 活动域
from .activity import ProfileView, Follow

# 基础模型
from .base import TimestampModel, utc_now, ensure_utc

__all__ = [
    "User", "UserPublic", "UserRole", "KycStatus",
    "PeopleProfile", "ProfileRead", "Visibility",
    "Review", "ReviewStatus",
    "Nomination",
    "Report", "ReportStatus",
    "ProfileView", "Follow",
    "TimestampModel", "utc_now", "ensure_utc",
]
