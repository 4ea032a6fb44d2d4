"""
数据源抽象

仓库层只依赖 DataSource / Queryable 接口：
- query(kind)        返回可组合、惰性求值的查询句柄
- find_by_id(kind)   按主键查找，不存在返回 None
- stage(...)         把新增/修改放入工作单元缓冲区
- commit()           原子地持久化所有暂存变更

SqlAlchemyDataSource 是基于 SQLAlchemy Session 的实现。
"""
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, Optional, Tuple

from sqlalchemy import func, inspect, select
from sqlalchemy.engine import Row
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.exc import StaleDataError

from .exceptions import ConflictError, DataSourceError, ValidationError

logger = logging.getLogger(__name__)


class StagedOperation(str, Enum):
    """暂存操作类型"""
    ADD = "add"
    UPDATE = "update"


@dataclass
class StagedChange:
    """一条暂存变更"""
    entity_kind: type
    entity: Any
    operation: StagedOperation


class UnitOfWork:
    """暂存变更缓冲区，生命周期在 commit() 或 discard() 时结束"""

    def __init__(self):
        self._changes: List[StagedChange] = []

    def stage(self, entity_kind: type, entity: Any, operation: StagedOperation) -> StagedChange:
        change = StagedChange(entity_kind, entity, StagedOperation(operation))
        self._changes.append(change)
        return change

    @property
    def changes(self) -> Tuple[StagedChange, ...]:
        return tuple(self._changes)

    def __len__(self) -> int:
        return len(self._changes)

    def clear(self) -> None:
        self._changes.clear()


def is_unique_violation(error: IntegrityError) -> bool:
    """唯一约束冲突（SQLSTATE 23505 或驱动消息中的 unique/duplicate）"""
    orig = error.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code == "23505"
    message = str(orig).lower()
    return "unique" in message or "duplicate" in message


@contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """把 SQLAlchemy 执行错误转换为 DataSourceError"""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"数据源{action}失败: {e}")
        raise DataSourceError(f"数据源{action}失败: {e}") from e


class Queryable:
    """可组合的查询句柄，每次调用返回新实例，直到 count/slice/all 才访问数据源"""

    def __init__(self, session: Session, entity_kind: type,
                 criteria: tuple = (), ordering: tuple = (), relations: tuple = ()):
        self._session = session
        self.entity_kind = entity_kind
        self._criteria = criteria
        self._ordering = ordering
        self._relations = relations

    def _copy(self, **changes) -> "Queryable":
        params = dict(criteria=self._criteria, ordering=self._ordering, relations=self._relations)
        params.update(changes)
        return Queryable(self._session, self.entity_kind, **params)

    def where(self, *criteria) -> "Queryable":
        return self._copy(criteria=self._criteria + tuple(criteria))

    def order_by(self, *keys) -> "Queryable":
        """替换排序（只保留最后一次指定的排序）"""
        return self._copy(ordering=tuple(keys))

    def include(self, *relation_names: str) -> "Queryable":
        """预加载关联实体"""
        known = inspect(self.entity_kind).relationships.keys()
        for name in relation_names:
            if name not in known:
                raise ValidationError(f"{self.entity_kind.__name__} 没有关联 {name}")
        merged = self._relations + tuple(n for n in relation_names if n not in self._relations)
        return self._copy(relations=merged)

    @property
    def relations(self) -> Tuple[str, ...]:
        return self._relations

    def _filtered(self):
        return select(self.entity_kind).where(*self._criteria)

    def _statement(self):
        statement = self._filtered().order_by(*self._ordering)
        if self._relations:
            statement = statement.options(
                *(selectinload(getattr(self.entity_kind, name)) for name in self._relations)
            )
        return statement

    def count(self) -> int:
        statement = select(func.count()).select_from(self._filtered().subquery())
        with translate_errors("计数"):
            return self._session.scalar(statement) or 0

    def slice(self, skip: int, take: int) -> list:
        statement = self._statement().offset(max(0, skip)).limit(max(0, take))
        with translate_errors("查询"):
            return list(self._session.scalars(statement).all())

    def all(self) -> list:
        with translate_errors("查询"):
            return list(self._session.scalars(self._statement()).all())

    def first(self) -> Optional[Any]:
        with translate_errors("查询"):
            return self._session.scalars(self._statement().limit(1)).first()

    def aggregate(self, *columns) -> Optional[Row]:
        """在当前过滤条件上执行一次聚合查询"""
        statement = select(*columns).select_from(self.entity_kind).where(*self._criteria)
        with translate_errors("聚合"):
            return self._session.execute(statement).one_or_none()


class DataSource(ABC):
    """抽象数据源"""

    @abstractmethod
    def query(self, entity_kind: type) -> Queryable:
        pass

    @abstractmethod
    def find_by_id(self, entity_kind: type, entity_id: Any, relations: tuple = ()) -> Optional[Any]:
        pass

    @abstractmethod
    def stage(self, entity_kind: type, entity: Any, operation: StagedOperation) -> None:
        pass

    @abstractmethod
    def commit(self) -> None:
        pass

    @abstractmethod
    def discard(self) -> None:
        pass


class SqlAlchemyDataSource(DataSource):
    """基于 SQLAlchemy Session 的数据源，一个实例对应一个工作单元"""

    def __init__(self, session: Session):
        self.session = session
        self.unit_of_work = UnitOfWork()

    def query(self, entity_kind: type) -> Queryable:
        return Queryable(self.session, entity_kind)

    def find_by_id(self, entity_kind: type, entity_id: Any, relations: tuple = ()) -> Optional[Any]:
        if entity_id is None:
            return None
        options = [selectinload(getattr(entity_kind, name)) for name in relations]
        with translate_errors("查询"):
            return self.session.get(entity_kind, entity_id, options=options)

    def stage(self, entity_kind: type, entity: Any, operation: StagedOperation) -> None:
        change = self.unit_of_work.stage(entity_kind, entity, operation)
        logger.debug(f"暂存变更: {change.operation.value} {entity_kind.__name__}")

    @property
    def has_pending_changes(self) -> bool:
        return len(self.unit_of_work) > 0

    @property
    def pending_count(self) -> int:
        return len(self.unit_of_work)

    def _expire_unstaged(self) -> None:
        """撤销会话中未暂存对象上的修改，只有暂存的变更会被写入"""
        staged = {id(change.entity) for change in self.unit_of_work.changes}
        for entity in list(self.session.dirty):
            if id(entity) not in staged:
                logger.debug(f"忽略未暂存的修改: {entity!r}")
                self.session.expire(entity)

    def _reset(self) -> None:
        self.session.rollback()
        self.unit_of_work.clear()

    def commit(self) -> None:
        """提交所有暂存变更，失败时全部回滚"""
        pending = len(self.unit_of_work)
        try:
            self._expire_unstaged()
            for change in self.unit_of_work.changes:
                self.session.add(change.entity)
            self.session.commit()
        except StaleDataError as e:
            self._reset()
            logger.warning(f"提交被数据源拒绝，已回滚 {pending} 个变更: {e}")
            raise ConflictError(f"提交冲突: {e}") from e
        except IntegrityError as e:
            self._reset()
            if not is_unique_violation(e):
                logger.warning(f"数据不满足约束，已回滚 {pending} 个变更: {e}")
                raise ValidationError(f"数据不满足约束: {e.orig}") from e
            logger.warning(f"提交被数据源拒绝，已回滚 {pending} 个变更: {e}")
            raise ConflictError(f"提交冲突: {e}") from e
        except SQLAlchemyError as e:
            self._reset()
            logger.error(f"提交失败，已回滚 {pending} 个变更: {e}")
            raise DataSourceError(f"提交失败: {e}") from e
        self.unit_of_work.clear()
        logger.info(f"已提交 {pending} 个变更")

    def discard(self) -> None:
        """放弃所有暂存变更"""
        self.unit_of_work.clear()
        self.session.rollback()
