"""
查询条件模型
"""
from enum import Enum
from typing import Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError
from .reference_data import DataType

M = TypeVar("M", bound="QueryModel")


class SortKey(str, Enum):
    """排序方式"""
    NAME = "Name"
    PRICE_ASC = "PriceAsc"
    PRICE_DESC = "PriceDesc"

    @classmethod
    def parse(cls, value: Any) -> "SortKey":
        """未指定或无法识别时回退为按名称排序"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.NAME


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class QueryModel(BaseModel):
    """查询条件基类"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def coerce(cls: Type[M], value: Union[M, Mapping[str, Any], None]) -> M:
        """接受模型实例、字典或 None，非法输入转换为 ValidationError"""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        try:
            return cls.model_validate(value)
        except PydanticValidationError as e:
            raise ValidationError(f"{cls.__name__} 参数不合法: {e}") from e


class BookFilters(QueryModel):
    """书籍筛选条件，未提供的字段不参与过滤"""
    name: Optional[str] = None
    author: Optional[str] = None
    condition_id: Optional[int] = None
    book_type_id: Optional[int] = None
    genre_id: Optional[int] = None
    publisher_id: Optional[int] = None
    low_stock: bool = False

    @field_validator("name", "author", mode="before")
    @classmethod
    def strip_blank(cls, value):
        return _blank_to_none(value)


class ReferenceDataFilters(QueryModel):
    """参考数据筛选条件"""
    reference_data_type: Optional[DataType] = None


class SearchSortRequest(QueryModel):
    """搜索和排序请求"""
    search: Optional[str] = None
    sort_by: SortKey = SortKey.NAME

    @field_validator("search", mode="before")
    @classmethod
    def strip_blank(cls, value):
        return _blank_to_none(value)

    @field_validator("sort_by", mode="before")
    @classmethod
    def fallback_sort(cls, value):
        return SortKey.parse(value)
