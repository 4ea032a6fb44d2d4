"""
pytest配置文件，定义全局fixtures和测试配置
"""
import itertools
from decimal import Decimal
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from catalog.data_source import SqlAlchemyDataSource
from catalog.database import Base
from catalog.models.book import Book
from catalog.models.reference_data import ReferenceDataItem
from tests.fixtures.sample_data import BOOK_REFERENCE_FIELDS, SAMPLE_BOOKS, SAMPLE_REFERENCE_DATA


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """创建内存数据库引擎"""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session(engine) -> Generator[Session, None, None]:
    """创建数据库会话"""
    TestSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db_session = TestSession()
    yield db_session
    db_session.close()


@pytest.fixture
def data_source(session) -> SqlAlchemyDataSource:
    """创建数据源"""
    return SqlAlchemyDataSource(session)


@pytest.fixture
def reference_data(session):
    """写入样本参考数据，返回 key -> id"""
    items = {}
    for key, (data_type, text) in SAMPLE_REFERENCE_DATA.items():
        item = ReferenceDataItem(data_type=data_type, text=text)
        session.add(item)
        items[key] = item
    session.commit()
    return {key: item.id for key, item in items.items()}


@pytest.fixture
def books(session, reference_data):
    """写入样本书籍，返回按写入顺序的 id 列表"""
    created = []
    for sample in SAMPLE_BOOKS:
        data = dict(sample)
        for field in BOOK_REFERENCE_FIELDS:
            data[f"{field}_id"] = reference_data[data.pop(field)]
        book = Book(**data)
        session.add(book)
        created.append(book)
    session.commit()
    ids = [book.id for book in created]
    # 清空会话，避免后续查询直接命中已加载的对象
    session.expunge_all()
    return ids


@pytest.fixture
def make_book():
    """书籍工厂，每次生成不同的 ISBN"""
    counter = itertools.count(1)

    def factory(**overrides) -> Book:
        number = next(counter)
        data = {
            "name": f"Book {number:03d}",
            "author": "Test Author",
            "isbn": f"979000000{number:04d}",
            "price": Decimal("10.00"),
            "quantity": 10,
        }
        data.update(overrides)
        return Book(**data)

    return factory


def pytest_configure(config):
    """配置pytest标记"""
    config.addinivalue_line(
        "markers", "unit: 单元测试"
    )
    config.addinivalue_line(
        "markers", "integration: 集成测试"
    )
