"""
AccountService 单元测试
"""

import pytest

from ratedirl.core.errors import AuthenticationFailed, Conflict, Forbidden, InvalidInput, NotFound
from ratedirl.models import UserRole


class TestSignup:
    """测试注册流程"""

    def test_signup_creates_claimed_self_profile(self, account_service, profile_service, test_user):
        profile = profile_service.get_profile_by_owner(test_user.id)

        assert test_user.email == "alice@example.com"
        assert test_user.role == UserRole.USER
        assert test_user.terms_accepted_at is not None
        assert test_user.password_hash != "password123"
        assert profile.claimed is True
        assert profile.claimed_at is not None
        assert profile.location == "San Francisco, CA"

    def test_signup_requires_terms(self, make_user):
        with pytest.raises(InvalidInput) as exc:
            make_user("carol", accepted_terms=False)
        assert exc.value.field == "accepted_terms"

    def test_signup_without_terms_flag(self, account_service):
        with pytest.raises(InvalidInput):
            account_service.signup(email="carol@example.com", username="carol", password="password123",
                                   first_name="Carol", last_name="Tester")

    def test_signup_rejects_short_password(self, make_user):
        with pytest.raises(InvalidInput) as exc:
            make_user("carol", password="123")
        assert exc.value.field == "password"

    def test_duplicate_email_is_case_insensitive(self, make_user, test_user):
        with pytest.raises(Conflict) as exc:
            make_user("alice2", email="ALICE@example.com")
        assert exc.value.field == "email"

    def test_duplicate_username(self, make_user, test_user):
        with pytest.raises(Conflict) as exc:
            make_user("alice", email="other@example.com")
        assert exc.value.field == "username"

    def test_signup_with_invite_claims_nominated_profile(
        self, make_user, profile_service, unclaimed_profile
    ):
        nomination, profile = unclaimed_profile

        jordan = make_user("jordan", first_name="Jordan", last_name="Lee",
                           invite_token=nomination.invite_token)

        owned = profile_service.get_profile_by_owner(jordan.id)
        assert owned.id == profile.id
        assert owned.claimed is True


class TestCredentials:
    """测试凭证校验"""

    def test_valid_credentials(self, account_service, test_user):
        user = account_service.validate_credentials("Alice@Example.com", "password123")
        assert user.id == test_user.id

    def test_wrong_password_and_unknown_user_fail_identically(self, account_service, test_user):
        with pytest.raises(AuthenticationFailed) as wrong_password:
            account_service.validate_credentials("alice@example.com", "nope")
        with pytest.raises(AuthenticationFailed) as unknown_user:
            account_service.validate_credentials("ghost@example.com", "nope")

        assert wrong_password.value.message == unknown_user.value.message


class TestSettings:
    """测试个人设置与手机验证"""

    def test_update_settings(self, account_service, test_user):
        user = account_service.update_settings(test_user, bio="Hello", location="Oakland")

        assert user.bio == "Hello"
        assert user.location == "Oakland"

    def test_cannot_set_verification_flags(self, account_service, test_user):
        with pytest.raises(InvalidInput):
            account_service.update_settings(test_user, phone_verified=True)
        with pytest.raises(InvalidInput):
            account_service.update_settings(test_user, role="admin")

    def test_verify_phone_requires_number(self, account_service, test_user):
        with pytest.raises(InvalidInput):
            account_service.verify_phone(test_user)

    def test_verify_phone_and_reset_on_change(self, account_service, test_user):
        account_service.update_settings(test_user, phone_number="+15550001")
        user = account_service.verify_phone(test_user)
        assert user.phone_verified is True
        assert user.phone_verified_at is not None

        user = account_service.update_settings(test_user, phone_number="+15550002")
        assert user.phone_verified is False


class TestAnalytics:
    """测试个人数据面板"""

    def test_analytics_counts(self, account_service, review_service, feed_service,
                              profile_service, test_user, other_user):
        bob_profile = profile_service.get_profile_by_owner(other_user.id)
        review_service.create_review(test_user, bob_profile.id, 5, "Great")
        feed_service.record_profile_view(bob_profile.id)
        feed_service.record_profile_view(bob_profile.id, test_user)

        bob_stats = account_service.get_analytics(other_user)
        alice_stats = account_service.get_analytics(test_user)

        assert bob_stats.profile_views == 2
        assert bob_stats.reviews_received == 1
        assert bob_stats.reviews_given == 0
        assert alice_stats.reviews_given == 1


class TestUserLookup:
    """测试用户查询"""

    def test_get_user(self, account_service, test_user):
        assert account_service.get_user(test_user.id).username == "alice"
        with pytest.raises(NotFound):
            account_service.get_user(999)

    def test_list_users_admin_only(self, account_service, test_user, admin_user):
        usernames = {user.username for user in account_service.list_users(admin_user)}
        assert usernames == {"alice", "admin"}

        with pytest.raises(Forbidden):
            account_service.list_users(test_user)
