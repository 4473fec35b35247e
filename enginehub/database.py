"""
数据库连接与会话管理
"""

from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from enginehub.config import config
from enginehub.core.logger import logger
from enginehub.models.database import Base

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def create_db_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    创建 SQLAlchemy Engine

    SQLite 内存库使用 StaticPool，保证多线程（如 TestClient）共享同一连接
    """
    url = database_url or config.database_url
    kwargs = {"echo": config.db_echo if echo is None else echo, "future": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url == "sqlite://":
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(url, **kwargs)


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def get_session_factory() -> sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)
    return _session_factory


def init_db(engine: Optional[Engine] = None) -> None:
    """创建所有表（开发与测试使用，生产环境走 Alembic 迁移）"""
    target = engine or get_engine()
    Base.metadata.create_all(bind=target)
    logger.info("Database tables ensured")


def get_db() -> Generator[Session, None, None]:
    """FastAPI 依赖：每个请求一个会话"""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
