"""
数据库初始化脚本
负责创建数据库表结构和演示数据
"""

import logging
from datetime import timedelta
from typing import Dict, Optional

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, create_engine, select

from ratedirl.core.config import configure_logging, get_settings
from ratedirl.core.security import hash_password
from ratedirl.models.base import utc_now
from ratedirl.models.user import User, KycStatus, UserRole
from ratedirl.models.profile import PeopleProfile
from ratedirl.models.review import Review, ReviewStatus
from ratedirl.models.nomination import Nomination  # noqa: F401  注册到 metadata
from ratedirl.models.report import Report  # noqa: F401
from ratedirl.models.activity import ProfileView, Follow

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    {
        "email": "alice@example.com",
        "username": "alice_johnson",
        "first_name": "Alice",
        "last_name": "Johnson",
        "location": "San Francisco, CA",
        "kyc_status": KycStatus.VERIFIED,
        "phone_verified": True,
    },
    {
        "email": "bob@example.com",
        "username": "bob_smith",
        "first_name": "Bob",
        "last_name": "Smith",
        "location": "New York, NY",
        "kyc_status": KycStatus.VERIFIED,
        "phone_verified": True,
    },
    {
        "email": "charlie@example.com",
        "username": "charlie_brown",
        "first_name": "Charlie",
        "last_name": "Brown",
        "location": "Austin, TX",
        "kyc_status": KycStatus.NONE,
        "phone_verified": False,
    },
]


def get_database_url() -> str:
    """获取数据库连接 URL"""
    return get_settings().resolved_database_url()


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    创建并返回数据库引擎
    """
    url = database_url or get_database_url()
    connect_args = {}
    if url.startswith("sqlite"):
        # SQLite 特有配置
        connect_args["check_same_thread"] = False
    return create_engine(url, echo=get_settings().sql_echo, connect_args=connect_args)


def create_tables(engine: Engine) -> None:
    """
    创建所有数据库表
    SQLModel 会自动根据模型创建表结构
    """
    SQLModel.metadata.create_all(engine)
    logger.info("Database tables created at %s", engine.url.render_as_string(hide_password=True))


def create_demo_users(session: Session) -> Dict[str, User]:
    """
    创建演示用户及其自有画像
    已存在的用户直接复用
    """
    password_hash = hash_password(DEMO_PASSWORD)
    claimed_at = utc_now() - timedelta(days=7)
    users = {}
    for data in DEMO_USERS:
        user = session.exec(select(User).where(User.email == data["email"])).first()
        if user is None:
            user = User(password_hash=password_hash, role=UserRole.USER, **data)
            session.add(user)
            session.flush()
            session.add(PeopleProfile(
                first_name=user.first_name,
                last_name=user.last_name,
                location=user.location,
                owner_user_id=user.id,
                claimed=True,
                claimed_at=claimed_at,
            ))
            logger.info("Created demo user '%s' (ID: %s)", user.username, user.id)
        users[user.username] = user
    session.commit()
    return users


def create_demo_activity(session: Session, users: Dict[str, User]) -> None:
    """
    创建演示评价、浏览和关注
    只要已有任意评价就跳过
    """
    if session.exec(select(Review)).first() is not None:
        logger.info("Demo activity already exists, skipping")
        return

    alice, bob, charlie = users["alice_johnson"], users["bob_smith"], users["charlie_brown"]
    profiles = {
        profile.owner_user_id: profile
        for profile in session.exec(select(PeopleProfile).where(PeopleProfile.claimed == True)).all()  # noqa: E712
    }
    alice_profile, bob_profile = profiles[alice.id], profiles[bob.id]

    session.add_all([
        Review(reviewer_user_id=bob.id, target_profile_id=alice_profile.id, rating=5,
               text="Alice is an incredible mentor.", status=ReviewStatus.PUBLISHED),
        Review(reviewer_user_id=charlie.id, target_profile_id=alice_profile.id, rating=4,
               text="Reliable and thoughtful teammate.", status=ReviewStatus.PUBLISHED),
        Review(reviewer_user_id=alice.id, target_profile_id=bob_profile.id, rating=4,
               text="Bob always delivers on time.", status=ReviewStatus.PUBLISHED),
    ])
    session.add_all([
        ProfileView(target_profile_id=alice_profile.id, viewer_user_id=bob.id),
        ProfileView(target_profile_id=alice_profile.id, viewer_user_id=charlie.id),
        ProfileView(target_profile_id=bob_profile.id),
    ])
    session.add(Follow(follower_user_id=charlie.id, target_profile_id=alice_profile.id))
    session.commit()
    logger.info("Created demo reviews, views and follows")


def create_default_data(session: Session) -> None:
    """创建所有演示数据"""
    users = create_demo_users(session)
    create_demo_activity(session, users)


def init_db() -> None:
    """
    完整的数据库初始化流程
    1. 创建数据库引擎
    2. 创建所有表结构
    3. 创建演示数据
    """
    engine = get_engine()
    create_tables(engine)
    with Session(engine) as session:
        create_default_data(session)
    logger.info("Database initialization completed")


if __name__ == "__main__":
    configure_logging()
    init_db()
