"""
数据库模型单元测试
验证表模型的默认值与枚举定义
"""

from datetime import datetime

from ratedirl.models import (
    Follow,
    KycStatus,
    Nomination,
    PeopleProfile,
    ProfileRead,
    ProfileView,
    Report,
    ReportStatus,
    Review,
    ReviewStatus,
    User,
    UserRole,
    Visibility,
    ensure_utc,
)


class TestUserModel:
    """测试用户模型"""

    def test_user_defaults(self):
        """测试最小化创建用户（只有必需字段）"""
        user = User(
            email="kevin@example.com",
            username="kevin",
            password_hash="x",
            first_name="Kevin",
            last_name="Lin"
        )

        assert user.id is None  # 尚未保存到数据库
        assert user.role == UserRole.USER
        assert user.kyc_status == KycStatus.NONE
        assert user.phone_verified is False
        assert user.is_admin is False
        assert user.display_name == "Kevin Lin"
        assert isinstance(user.created_at, datetime)

    def test_admin_role(self):
        user = User(email="a@b.c", username="a", password_hash="x", first_name="A", last_name="B",
                    role=UserRole.ADMIN)
        assert user.is_admin is True


class TestPeopleProfileModel:
    """测试人物画像模型"""

    def test_profile_defaults_unclaimed_and_public(self):
        profile = PeopleProfile(first_name="Jordan", last_name="Lee")

        assert profile.claimed is False
        assert profile.owner_user_id is None
        assert profile.claimed_at is None
        assert profile.profile_visibility == Visibility.PUBLIC
        assert profile.reviews_visibility == Visibility.PUBLIC
        assert profile.full_name == "Jordan Lee"

    def test_is_owned_by(self):
        profile = PeopleProfile(first_name="A", last_name="B", owner_user_id=7)

        assert profile.is_owned_by(7) is True
        assert profile.is_owned_by(8) is False
        assert profile.is_owned_by(None) is False

    def test_profile_read_hides_contact_fields(self):
        profile = PeopleProfile(id=1, first_name="A", last_name="B", contact_email="a@x.com")

        read = ProfileRead.model_validate(profile)

        assert "contact_email" not in read.model_dump()
        assert "contact_phone" not in read.model_dump()


class TestReviewAndReportModels:
    """测试评价与工单模型"""

    def test_review_default_status_is_pending(self):
        review = Review(reviewer_user_id=1, target_profile_id=2, rating=4, text="Nice")
        assert review.status == ReviewStatus.PENDING

    def test_report_default_status_is_open(self):
        report = Report(reporter_user_id=1, review_id=2, reason="spam")
        assert report.status == ReportStatus.OPEN

    def test_enum_values(self):
        assert [s.value for s in ReviewStatus] == ["pending", "published", "hidden"]
        assert [s.value for s in ReportStatus] == ["open", "closed"]
        assert [v.value for v in Visibility] == ["public", "private"]


class TestActivityModels:
    """测试活动模型"""

    def test_nomination_defaults(self):
        nomination = Nomination(
            nominator_user_id=1,
            target_first_name="Jordan",
            target_last_name="Lee",
            contact_email_or_phone="jordan@x.com",
            invite_token="token",
            profile_id=3
        )
        assert nomination.accepted is False
        assert nomination.accepted_by_user_id is None

    def test_anonymous_profile_view(self):
        view = ProfileView(target_profile_id=1)
        assert view.viewer_user_id is None

    def test_follow_creation(self):
        follow = Follow(follower_user_id=1, target_profile_id=2)
        assert follow.follower_user_id == 1


def test_ensure_utc_attaches_timezone():
    naive = datetime(2024, 1, 1, 12, 0)
    aware = ensure_utc(naive)

    assert aware.tzinfo is not None
    assert ensure_utc(aware) is aware
    assert ensure_utc(None) is None
