"""
事务边界
服务层在一个逻辑事务内完成多步写入，成功提交，失败回滚
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ratedirl.core.errors import PersistenceError

logger = logging.getLogger(__name__)


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """
    在 with 块结束时提交；任何异常都会回滚

    持久层异常被包装为 PersistenceError，领域异常原样抛出
    """
    try:
        yield session
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Transaction rolled back after persistence failure")
        raise PersistenceError("persistence failure") from exc
    except Exception:
        session.rollback()
        raise
