"""
书籍数据访问层
"""
import logging
from typing import Any, Mapping, Optional, Union

from ..config import CatalogSettings
from ..data_source import DataSource, StagedOperation
from ..exceptions import BookNotFoundError, ValidationError
from ..models.book import BOOK_ASSOCIATIONS, LOW_STOCK_THRESHOLD, Book
from ..models.filters import BookFilters, SearchSortRequest, SortKey
from ..models.statistics import BookStatistics
from ..services.filtering import apply_book_filters
from ..services.merge import PartialUpdateMerger
from ..services.pagination import DEFAULT_PAGE_SIZE, Page, WindowPolicy
from ..services.search import apply_search, apply_sort
from ..services.statistics import StatisticsAggregator

logger = logging.getLogger(__name__)

# 编辑时未重新上传封面则保留原封面
BOOK_KEEP_IF_BLANK = ("cover_image_url",)


class BookRepository:
    """书籍仓库类"""

    def __init__(self, data_source: DataSource, threshold: int = LOW_STOCK_THRESHOLD,
                 page_size: int = DEFAULT_PAGE_SIZE):
        self.data_source = data_source
        self.threshold = threshold
        self.page_size = page_size
        self.merger = PartialUpdateMerger.for_entity(Book, keep_if_blank=BOOK_KEEP_IF_BLANK)
        self.aggregator = StatisticsAggregator(threshold)

    @classmethod
    def from_settings(cls, data_source: DataSource, settings: CatalogSettings) -> "BookRepository":
        return cls(data_source, page_size=settings.default_page_size)

    def get(self, book_id: int, include=BOOK_ASSOCIATIONS) -> Book:
        """根据ID获取书籍（含关联数据）"""
        book = self.data_source.find_by_id(Book, book_id, relations=tuple(include))
        if book is None:
            raise BookNotFoundError(f"Book with id {book_id} not found")
        return book

    def list(self, filters: Union[BookFilters, Mapping[str, Any], None],
             page_index: int, page_size: Optional[int] = None,
             include=BOOK_ASSOCIATIONS) -> Page[Book]:
        """按筛选条件分页获取书籍，未指定 page_size 时使用仓库默认值"""
        filters = BookFilters.coerce(filters)
        query = self.data_source.query(Book).include(*include)
        query = apply_book_filters(query, filters, self.threshold).order_by(Book.id)
        if page_size is None:
            page_size = self.page_size
        return Page.create(query, page_index, page_size, policy=WindowPolicy.TOTAL)

    def search(self, search: Optional[str], sort_by: Union[SortKey, str, None],
               page_index: int, page_size: Optional[int] = None,
               include=BOOK_ASSOCIATIONS) -> Page[Book]:
        """关键字搜索、排序后分页"""
        request = SearchSortRequest.coerce({"search": search, "sort_by": sort_by})
        query = self.data_source.query(Book).include(*include)
        query = apply_sort(apply_search(query, request.search), request.sort_by)
        if page_size is None:
            page_size = self.page_size
        return Page.create(query, page_index, page_size, policy=WindowPolicy.TOTAL)

    def add(self, book: Book) -> None:
        """暂存新书籍，需调用 commit() 才会持久化"""
        self.data_source.stage(Book, book, StagedOperation.ADD)

    def update(self, book: Book) -> Book:
        """把候选记录合并到已存储记录并暂存"""
        if book.id is None:
            raise ValidationError("更新书籍时必须提供 id")
        existing = self.data_source.find_by_id(Book, book.id)
        if existing is None:
            raise BookNotFoundError(f"Book with id {book.id} not found")

        changed = self.merger.apply(existing, book)
        logger.info(f"更新书籍 {book.id}, 变更字段: {sorted(changed)}")
        self.data_source.stage(Book, existing, StagedOperation.UPDATE)
        return existing

    def commit(self) -> None:
        self.data_source.commit()

    def get_statistics(self) -> BookStatistics:
        """低库存、缺货和总数统计"""
        return self.aggregator.compute(self.data_source.query(Book))
