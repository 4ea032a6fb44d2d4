"""
数据库配置
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import CatalogSettings, load_settings
from .data_source import SqlAlchemyDataSource

logger = logging.getLogger(__name__)

# 创建基础模型类
Base = declarative_base()

# 数据库引擎和会话
engine: Optional[Engine] = None
SessionLocal = None


def _is_memory_url(database_url: str) -> bool:
    return database_url in ("sqlite://", "sqlite:///:memory:")


def create_catalog_engine(settings: CatalogSettings) -> Engine:
    """根据配置创建引擎"""
    if _is_memory_url(settings.database_url):
        # 内存库需要在所有连接间共享同一个连接
        return create_engine(
            settings.database_url,
            echo=settings.sql_echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(settings.database_url, echo=settings.sql_echo)


def init_database(settings: Optional[CatalogSettings] = None) -> Engine:
    """初始化数据库"""
    global engine, SessionLocal
    settings = settings or load_settings()
    engine = create_catalog_engine(settings)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    # 注册模型后再建表
    from .models import book, reference_data  # noqa: F401
    Base.metadata.create_all(bind=engine)
    logger.info(f"数据库初始化完成: {settings.database_url}")
    return engine


@contextmanager
def open_data_source() -> Iterator[SqlAlchemyDataSource]:
    """打开一个工作单元的数据源，退出时未提交的变更被丢弃"""
    if SessionLocal is None:
        init_database()
    session = SessionLocal()
    data_source = SqlAlchemyDataSource(session)
    try:
        yield data_source
    finally:
        if data_source.has_pending_changes:
            logger.warning(f"丢弃 {data_source.pending_count} 个未提交的变更")
        data_source.discard()
        session.close()
