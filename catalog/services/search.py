"""
关键字搜索和排序
"""
import logging
from typing import Any, Optional

from sqlalchemy import or_

from ..data_source import Queryable
from ..models.book import Book
from ..models.filters import SortKey
from ..models.reference_data import ReferenceDataItem

logger = logging.getLogger(__name__)


def _text_contains(search: str):
    return ReferenceDataItem.text.icontains(search, autoescape=True)


def build_search_predicate(search: Optional[str]):
    """关键字匹配书名、体裁、装帧类型、ISBN、出版社中任意一项；空关键字返回 None"""
    if search is None or not search.strip():
        return None
    return or_(
        Book.name.icontains(search, autoescape=True),
        Book.genre.has(_text_contains(search)),
        Book.book_type.has(_text_contains(search)),
        Book.isbn.icontains(search, autoescape=True),
        Book.publisher.has(_text_contains(search)),
    )


def apply_search(query: Queryable, search: Optional[str]) -> Queryable:
    predicate = build_search_predicate(search)
    if predicate is None:
        return query
    logger.debug(f"按关键字搜索: {search}")
    return query.where(predicate)


def apply_sort(query: Queryable, sort_by: Any = SortKey.NAME) -> Queryable:
    """按排序方式排序，id 作为次要排序保证分页稳定"""
    sort_key = SortKey.parse(sort_by)
    if sort_key is SortKey.PRICE_ASC:
        return query.order_by(Book.price.asc(), Book.id)
    if sort_key is SortKey.PRICE_DESC:
        return query.order_by(Book.price.desc(), Book.id)
    return query.order_by(Book.name.asc(), Book.id)
