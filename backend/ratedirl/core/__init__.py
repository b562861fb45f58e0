"""
核心基础设施模块
配置、日志、异常体系与安全工具
"""

from .config import Settings, get_settings, configure_logging
from .errors import (
    RatedIRLError,
    InvalidInput,
    NotFound,
    Conflict,
    Forbidden,
    AuthenticationFailed,
    PersistenceError,
)

__all__ = [
    "Settings", "get_settings", "configure_logging",
    "RatedIRLError", "InvalidInput", "NotFound", "Conflict",
    "Forbidden", "AuthenticationFailed", "PersistenceError",
]
