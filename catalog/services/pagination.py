"""
分页

Page 把一页结果和分页元数据放在一起，页码导航有两种策略：
- TOTAL   列出全部页码 1..total_pages，适合数据量小的列表
- SLIDING 以当前页为中心的固定宽度窗口
"""
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Iterator, List, Optional, TypeVar

from ..data_source import Queryable
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
DEFAULT_WINDOW_SIZE = 5


class WindowPolicy(str, Enum):
    """页码窗口策略"""
    TOTAL = "total"
    SLIDING = "sliding"


def count_pages(total_count: int, page_size: int) -> int:
    """总页数，无数据时为0"""
    if page_size < 1:
        raise ValidationError(f"每页数量必须大于0: {page_size}")
    return math.ceil(total_count / page_size)


@dataclass
class Page(Generic[T]):
    """一页查询结果"""
    items: List[T]
    page_index: int
    page_size: int
    total_count: int
    policy: WindowPolicy = WindowPolicy.TOTAL
    window_size: int = DEFAULT_WINDOW_SIZE
    total_pages: int = field(init=False)

    def __post_init__(self):
        self.total_pages = count_pages(self.total_count, self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page_index > 1

    @property
    def has_next(self) -> bool:
        return self.page_index < self.total_pages

    def get_page_numbers(self, size: Optional[int] = None) -> List[int]:
        """导航页码

        TOTAL 策略下 size 是计算页数用的每页数量（默认本页的 page_size）；
        SLIDING 策略下 size 是窗口宽度（默认 window_size）。
        """
        if self.policy is WindowPolicy.TOTAL:
            page_count = count_pages(self.total_count, self.page_size if size is None else size)
            return list(range(1, page_count + 1))

        window = self.window_size if size is None else size
        if window < 1:
            raise ValidationError(f"窗口宽度必须大于0: {window}")
        start = max(1, self.page_index - window // 2)
        end = min(self.total_pages, start + window - 1)
        return list(range(start, end + 1))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __getitem__(self, index):
        return self.items[index]

    @classmethod
    def create(cls, query: Queryable, page_index: int, page_size: int,
               policy: WindowPolicy = WindowPolicy.TOTAL,
               window_size: int = DEFAULT_WINDOW_SIZE) -> "Page":
        """执行计数和切片两次查询，结果全部加载到内存"""
        if page_size < 1:
            raise ValidationError(f"每页数量必须大于0: {page_size}")
        total_count = query.count()
        if page_index < 1:
            items = []
        else:
            items = query.slice((page_index - 1) * page_size, page_size)
        logger.debug(
            f"分页 {query.entity_kind.__name__}: 第{page_index}页/每页{page_size}条, "
            f"共{total_count}条, 本页{len(items)}条"
        )
        return cls(
            items=items,
            page_index=page_index,
            page_size=page_size,
            total_count=total_count,
            policy=WindowPolicy(policy),
            window_size=window_size,
        )
