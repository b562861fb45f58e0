"""
输入输出模型模块
pydantic 模型：请求校验与对外返回结构
"""

from .account import SignupIn, UserSettingsUpdate, UserSummary, UserAnalytics
from .profile import ProfileCreate, ProfileUpdate, ProfileDetail
from .review import ReviewCreate, ReviewWithReviewer, RatingStats
from .nomination import NominationCreate, InviteLanding
from .moderation import ReportCreate, OpenReport
from .feed import FeedFilter, FeedItem, ReviewFeedItem, ClaimFeedItem, TrendingFeedItem, TrendingProfile

__all__ = [
    "SignupIn", "UserSettingsUpdate", "UserSummary", "UserAnalytics",
    "ProfileCreate", "ProfileUpdate", "ProfileDetail",
    "ReviewCreate", "ReviewWithReviewer", "RatingStats",
    "NominationCreate", "InviteLanding",
    "ReportCreate", "OpenReport",
    "FeedFilter", "FeedItem", "ReviewFeedItem", "ClaimFeedItem", "TrendingFeedItem", "TrendingProfile",
]
