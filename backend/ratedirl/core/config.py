"""
应用配置模块
从环境变量与 .env 文件读取配置
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# backend/ 目录
BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """
    运行时配置
    字段名即环境变量名（大小写不敏感），如 DATABASE_PATH、LOG_LEVEL
    """

    # SQLite 文件路径，相对路径按 backend/ 解析
    database_path: str = "database.db"

    # 完整连接串，设置后优先于 database_path
    database_url: Optional[str] = None

    # 设置为 True 可查看 SQL 语句
    sql_echo: bool = False

    log_level: str = "INFO"

    # passlib CryptContext 使用的哈希方案，第一个为默认方案
    password_schemes: List[str] = ["pbkdf2_sha256"]

    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def resolved_database_url(self) -> str:
        """
        获取数据库连接 URL
        优先使用 database_url，否则使用 SQLite 文件
        """
        if self.database_url:
            return self.database_url
        db_path = Path(self.database_path)
        if not db_path.is_absolute():
            db_path = BASE_DIR / db_path
        return f"sqlite:///{db_path}"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """根据配置初始化根 logger"""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
