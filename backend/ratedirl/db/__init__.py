"""
数据库模块
提供数据库连接、初始化、事务管理功能
"""

from .init_db import init_db, get_engine, create_tables, create_default_data
from .transaction import transaction

__all__ = [
    "init_db",
    "get_engine",
    "create_tables",
    "create_default_data",
    "transaction",
]
