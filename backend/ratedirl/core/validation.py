"""
输入校验辅助
把 pydantic 的 ValidationError 转换为领域异常 InvalidInput
"""

from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import InvalidInput

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def parse_input(schema: Type[SchemaT], **data: Any) -> SchemaT:
    """
    按 schema 校验输入

    Args:
        schema: pydantic 输入模型
        **data: 原始输入

    Returns:
        校验后的模型实例

    Raises:
        InvalidInput: 校验失败，field 为第一个出错的字段
    """
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise InvalidInput(f"{field}: {first['msg']}" if field else first["msg"], field=field) from exc
