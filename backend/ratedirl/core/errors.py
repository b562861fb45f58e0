"""
领域异常体系

validation / not-found / conflict / forbidden / internal 五类错误，
调用方（HTTP 边界）负责把它们映射为状态码
"""

from typing import Any, Optional


class RatedIRLError(Exception):
    """所有领域异常的基类"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class InvalidInput(RatedIRLError):
    """输入格式错误或越界（评分、文本长度、缺失字段）"""


class NotFound(RatedIRLError):
    """引用的实体不存在"""

    def __init__(self, entity: str, entity_id: Any = None, message: Optional[str] = None):
        if message is None:
            message = f"{entity} not found" if entity_id is None else f"{entity} {entity_id} not found"
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class Conflict(RatedIRLError):
    """状态冲突：画像已被认领、用户已拥有画像、邮箱或用户名重复"""


class Forbidden(RatedIRLError):
    """可见性、归属或角色校验失败"""


class AuthenticationFailed(RatedIRLError):
    """未认证或凭证校验失败；凭证错误时消息固定，不泄露用户是否存在"""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class PersistenceError(RatedIRLError):
    """持久层失败，按请求传播，不终止进程"""
