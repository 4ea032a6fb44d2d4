"""
筛选条件组合

每个非空字段对应一个条件，条件之间为 AND。只构建查询，不访问数据源。
"""
import logging

from ..data_source import Queryable
from ..models.book import LOW_STOCK_THRESHOLD, Book
from ..models.filters import BookFilters, ReferenceDataFilters
from ..models.reference_data import ReferenceDataItem

logger = logging.getLogger(__name__)


def apply_book_filters(query: Queryable, filters: BookFilters,
                       threshold: int = LOW_STOCK_THRESHOLD) -> Queryable:
    """按 BookFilters 缩小书籍查询范围"""
    clauses = []

    if filters.name:
        clauses.append(Book.name.icontains(filters.name, autoescape=True))

    if filters.author:
        clauses.append(Book.author.icontains(filters.author, autoescape=True))

    if filters.condition_id is not None:
        clauses.append(Book.condition_id == filters.condition_id)

    if filters.book_type_id is not None:
        clauses.append(Book.book_type_id == filters.book_type_id)

    if filters.genre_id is not None:
        clauses.append(Book.genre_id == filters.genre_id)

    if filters.publisher_id is not None:
        clauses.append(Book.publisher_id == filters.publisher_id)

    # 包含阈值本身，和统计中的严格小于不同
    if filters.low_stock:
        clauses.append(Book.quantity <= threshold)

    logger.debug(f"书籍筛选条件数: {len(clauses)}")
    return query.where(*clauses) if clauses else query


def apply_reference_data_filters(query: Queryable, filters: ReferenceDataFilters) -> Queryable:
    """参考数据只按类型过滤"""
    if filters.reference_data_type is not None:
        return query.where(ReferenceDataItem.data_type == filters.reference_data_type)
    return query
