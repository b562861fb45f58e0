"""
ModerationService 单元测试
"""

import pytest

from ratedirl.core.errors import AuthenticationFailed, Forbidden, InvalidInput, NotFound
from ratedirl.models import ReportStatus, ReviewStatus


@pytest.fixture
def bob_review(review_service, profile_service, test_user, other_user):
    """Alice 对 Bob 的一条已发布评价"""
    profile = profile_service.get_my_profile(other_user)
    return review_service.create_review(test_user, profile.id, 1, "Never returns borrowed tools")


class TestReports:
    """测试举报"""

    def test_create_report(self, moderation_service, other_user, bob_review):
        report = moderation_service.create_report(other_user, bob_review.id, "  Not true  ")

        assert report.status == ReportStatus.OPEN
        assert report.reason == "Not true"
        assert report.reporter_user_id == other_user.id

    def test_reason_required(self, moderation_service, other_user, bob_review):
        with pytest.raises(InvalidInput):
            moderation_service.create_report(other_user, bob_review.id, "   ")

    def test_missing_review(self, moderation_service, other_user):
        with pytest.raises(NotFound):
            moderation_service.create_report(other_user, 999, "spam")

    def test_requires_login(self, moderation_service, bob_review):
        with pytest.raises(AuthenticationFailed):
            moderation_service.create_report(None, bob_review.id, "spam")

    def test_duplicate_and_self_reports_allowed(self, moderation_service, test_user, other_user,
                                                admin_user, bob_review):
        moderation_service.create_report(other_user, bob_review.id, "spam")
        moderation_service.create_report(other_user, bob_review.id, "spam again")
        moderation_service.create_report(test_user, bob_review.id, "I regret this")

        assert len(moderation_service.get_open_reports(admin_user)) == 3

    def test_open_reports_admin_only(self, moderation_service, other_user):
        with pytest.raises(Forbidden):
            moderation_service.get_open_reports(other_user)
        with pytest.raises(AuthenticationFailed):
            moderation_service.get_open_reports(None)

    def test_close_report_keeps_review(self, moderation_service, review_service, other_user,
                                       admin_user, bob_review):
        report = moderation_service.create_report(other_user, bob_review.id, "spam")

        closed = moderation_service.close_report(report.id, admin_user)

        assert closed.status == ReportStatus.CLOSED
        assert moderation_service.get_open_reports(admin_user) == []
        assert review_service.get_review(bob_review.id).status == ReviewStatus.PUBLISHED

    def test_close_missing_report(self, moderation_service, admin_user):
        with pytest.raises(NotFound):
            moderation_service.close_report(42, admin_user)


class TestModerationScenario:
    """举报 → 隐藏 → 关闭工单"""

    def test_report_hide_close(self, moderation_service, review_service, profile_service,
                               test_user, other_user, admin_user, bob_review):
        profile = profile_service.get_my_profile(other_user)
        report = moderation_service.create_report(other_user, bob_review.id, "Not true")

        open_reports = moderation_service.get_open_reports(admin_user)
        assert [item.report.id for item in open_reports] == [report.id]
        assert open_reports[0].review.id == bob_review.id
        assert open_reports[0].reporter.id == other_user.id

        moderation_service.hide_review(bob_review.id, admin_user)
        moderation_service.close_report(report.id, admin_user)

        assert moderation_service.get_open_reports(admin_user) == []
        assert review_service.get_reviews_for_profile(profile.id) == []
        assert profile_service.view_profile(profile.id, test_user).reviews == []
        hidden = review_service.get_reviews_for_profile(profile.id, include_hidden=True)
        assert [r.status for r in hidden] == [ReviewStatus.HIDDEN]

    def test_publish_hidden_review_again(self, moderation_service, review_service, admin_user, bob_review):
        moderation_service.hide_review(bob_review.id, admin_user)
        review = moderation_service.publish_review(bob_review.id, admin_user)

        assert review.status == ReviewStatus.PUBLISHED

    def test_hide_requires_admin(self, moderation_service, other_user, bob_review):
        with pytest.raises(Forbidden):
            moderation_service.hide_review(bob_review.id, other_user)


class TestBan:
    """测试封禁"""

    def test_ban_removes_user_and_keeps_reviews(self, moderation_service, account_service, review_service,
                                                profile_service, test_user, other_user, admin_user, bob_review):
        banned_id = test_user.id
        review_id = bob_review.id
        profile = profile_service.get_my_profile(other_user)

        moderation_service.ban_user(banned_id, admin_user)

        with pytest.raises(NotFound):
            account_service.get_user(banned_id)
        assert review_service.get_review(review_id).reviewer_user_id == banned_id
        detail = profile_service.view_profile(profile.id, other_user)
        assert [r.id for r in detail.reviews] == [review_id]
        assert detail.reviews[0].reviewer is None

    def test_banned_user_cannot_log_in(self, moderation_service, account_service, test_user, admin_user):
        moderation_service.ban_user(test_user.id, admin_user)

        with pytest.raises(AuthenticationFailed):
            account_service.validate_credentials("alice@example.com", "password123")

    def test_open_reports_skip_banned_reporter(self, moderation_service, make_user, admin_user, bob_review):
        carol = make_user("carol")
        moderation_service.create_report(carol, bob_review.id, "spam")

        moderation_service.ban_user(carol.id, admin_user)

        assert moderation_service.get_open_reports(admin_user) == []

    def test_admin_cannot_ban_self(self, moderation_service, admin_user):
        with pytest.raises(Forbidden):
            moderation_service.ban_user(admin_user.id, admin_user)

    def test_ban_requires_admin(self, moderation_service, test_user, other_user):
        with pytest.raises(Forbidden):
            moderation_service.ban_user(test_user.id, other_user)

    def test_ban_missing_user(self, moderation_service, admin_user):
        with pytest.raises(NotFound):
            moderation_service.ban_user(999, admin_user)

    def test_banned_id_is_not_reused(self, moderation_service, make_user, admin_user):
        carol = make_user("carol")
        carol_id = carol.id
        moderation_service.ban_user(carol_id, admin_user)

        dave = make_user("dave")

        assert dave.id > carol_id
