"""
参考数据访问层
"""
import logging
from typing import Any, List, Mapping, Optional, Union

from ..config import CatalogSettings
from ..data_source import DataSource, StagedOperation
from ..exceptions import ReferenceDataNotFoundError
from ..models.filters import ReferenceDataFilters
from ..models.reference_data import DataType, ReferenceDataItem
from ..services.filtering import apply_reference_data_filters
from ..services.pagination import DEFAULT_PAGE_SIZE, DEFAULT_WINDOW_SIZE, Page, WindowPolicy

logger = logging.getLogger(__name__)


class ReferenceDataRepository:
    """参考数据仓库类"""

    def __init__(self, data_source: DataSource, window_size: int = DEFAULT_WINDOW_SIZE,
                 page_size: int = DEFAULT_PAGE_SIZE):
        self.data_source = data_source
        self.window_size = window_size
        self.page_size = page_size

    @classmethod
    def from_settings(cls, data_source: DataSource, settings: CatalogSettings) -> "ReferenceDataRepository":
        return cls(data_source, window_size=settings.page_window_size, page_size=settings.default_page_size)

    def add(self, item: ReferenceDataItem) -> None:
        self.data_source.stage(ReferenceDataItem, item, StagedOperation.ADD)

    def get(self, item_id: int) -> ReferenceDataItem:
        item = self.data_source.find_by_id(ReferenceDataItem, item_id)
        if item is None:
            raise ReferenceDataNotFoundError(f"Reference data with id {item_id} not found")
        return item

    def list_all(self) -> List[ReferenceDataItem]:
        """获取全部参考数据（不过滤）"""
        return self.data_source.query(ReferenceDataItem).order_by(ReferenceDataItem.id).all()

    def list_by_type(self, data_type: DataType) -> List[ReferenceDataItem]:
        """获取某一类型的全部参考数据，按显示文本排序（用于下拉框）"""
        return (
            self.data_source.query(ReferenceDataItem)
            .where(ReferenceDataItem.data_type == DataType(data_type))
            .order_by(ReferenceDataItem.text, ReferenceDataItem.id)
            .all()
        )

    def list(self, filters: Union[ReferenceDataFilters, Mapping[str, Any], None],
             page_index: int, page_size: Optional[int] = None) -> Page[ReferenceDataItem]:
        """按类型过滤后分页，页码使用滑动窗口"""
        if page_size is None:
            page_size = self.page_size
        filters = ReferenceDataFilters.coerce(filters)
        query = self.data_source.query(ReferenceDataItem).order_by(ReferenceDataItem.id)
        query = apply_reference_data_filters(query, filters)
        return Page.create(
            query, page_index, page_size,
            policy=WindowPolicy.SLIDING, window_size=self.window_size,
        )

    def commit(self) -> None:
        self.data_source.commit()
