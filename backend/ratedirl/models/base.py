"""
基础模型模块
提供所有模型共用的时间戳基类与时钟函数
"""

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field


def utc_now() -> datetime:
    """默认时钟，返回 timezone-aware 的 UTC 时间"""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    SQLite 读回的 datetime 不带时区，统一补齐为 UTC
    仅用于 Python 侧比较与排序
    """
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


# 全局基础模型，只包含创建时间
class TimestampModel(SQLModel):
    """时间戳基类，为所有表提供 created_at 字段"""
    created_at: Optional[datetime] = Field(
        default_factory=utc_now,
        nullable=False,
        index=True
    )
