"""
Pytest 测试配置
提供测试数据库、测试用户与各服务实例
"""

import sys
from pathlib import Path
from typing import Callable, Generator

import pytest
from sqlmodel import Session, create_engine

# 添加 backend 目录到 sys.path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ratedirl.core.security import hash_password
from ratedirl.db.init_db import create_tables
from ratedirl.models import User, UserRole
from ratedirl.repositories import UserRepository
from ratedirl.services import (
    AccountService,
    FeedService,
    ModerationService,
    NominationService,
    ProfileService,
    ReviewService,
)


# ==================== 数据库 Fixtures ====================

@pytest.fixture(scope="function")
def test_db_engine():
    """
    创建测试用的内存数据库引擎
    每个测试函数都会获得一个全新的数据库
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False}
    )
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine) -> Generator[Session, None, None]:
    """
    创建测试用的数据库会话
    """
    with Session(test_db_engine) as session:
        yield session


# ==================== 服务 Fixtures ====================

@pytest.fixture(scope="function")
def account_service(test_db_session: Session) -> AccountService:
    return AccountService(test_db_session)


@pytest.fixture(scope="function")
def profile_service(test_db_session: Session) -> ProfileService:
    return ProfileService(test_db_session)


@pytest.fixture(scope="function")
def review_service(test_db_session: Session) -> ReviewService:
    return ReviewService(test_db_session)


@pytest.fixture(scope="function")
def nomination_service(test_db_session: Session) -> NominationService:
    return NominationService(test_db_session)


@pytest.fixture(scope="function")
def moderation_service(test_db_session: Session) -> ModerationService:
    return ModerationService(test_db_session)


@pytest.fixture(scope="function")
def feed_service(test_db_session: Session) -> FeedService:
    return FeedService(test_db_session)


# ==================== 测试数据 Fixtures ====================

@pytest.fixture(scope="function")
def make_user(account_service: AccountService) -> Callable[..., User]:
    """
    用户工厂：走完整注册流程，因此每个用户都带一个已认领的自有画像
    """
    def _make_user(username: str, **overrides) -> User:
        data = {
            "email": f"{username}@example.com",
            "username": username,
            "password": "password123",
            "first_name": username.capitalize(),
            "last_name": "Tester",
            "accepted_terms": True,
        }
        data.update(overrides)
        return account_service.signup(**data)

    return _make_user


@pytest.fixture(scope="function")
def test_user(make_user) -> User:
    """评价人 / 普通用户"""
    return make_user("alice", first_name="Alice", last_name="Johnson", location="San Francisco, CA")


@pytest.fixture(scope="function")
def other_user(make_user) -> User:
    return make_user("bob", first_name="Bob", last_name="Smith", location="New York, NY")


@pytest.fixture(scope="function")
def admin_user(make_user, test_db_session: Session) -> User:
    admin = make_user("admin", first_name="Ada", last_name="Admin")
    admin.role = UserRole.ADMIN
    test_db_session.add(admin)
    test_db_session.commit()
    test_db_session.refresh(admin)
    return admin


@pytest.fixture(scope="function")
def bare_user(test_db_session: Session) -> User:
    """
    没有自有画像的用户（直接写库，绕过注册流程）
    """
    user = UserRepository(test_db_session).create(
        email="dana@example.com",
        username="dana",
        password_hash=hash_password("password123"),
        first_name="Dana",
        last_name="Doe"
    )
    test_db_session.commit()
    test_db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def unclaimed_profile(nomination_service: NominationService, test_user: User):
    """
    通过提名创建的未认领画像
    返回 (nomination, profile)
    """
    nomination = nomination_service.create_nomination(test_user, "Jordan", "Lee", "jordan@x.com")
    profile = nomination_service.profile_service.get_profile(nomination.profile_id)
    return nomination, profile


# ==================== Pytest 配置 ====================

def pytest_configure(config):
    """
    Pytest 初始化配置
    """
    config.addinivalue_line(
        "markers", "unit: Unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests"
    )
