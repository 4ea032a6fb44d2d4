"""
部分更新合并

候选记录的字段覆盖已存储记录，但 keep_if_blank 中的字段在候选值为空时保留原值。
例如编辑书籍时没有重新上传封面，不能把已有封面清掉。
"""
import logging
from typing import Any, Dict, Iterable

from sqlalchemy import inspect

logger = logging.getLogger(__name__)


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


class PartialUpdateMerger:
    """部分更新合并器"""

    def __init__(self, fields: Iterable[str], keep_if_blank: Iterable[str] = ()):
        self.fields = tuple(fields)
        self.keep_if_blank = frozenset(keep_if_blank)
        unknown = self.keep_if_blank.difference(self.fields)
        if unknown:
            raise ValueError(f"keep_if_blank 包含未知字段: {sorted(unknown)}")

    @classmethod
    def for_entity(cls, entity_kind: type, keep_if_blank: Iterable[str] = ()) -> "PartialUpdateMerger":
        """使用实体除主键外的所有列作为合并字段"""
        mapper = inspect(entity_kind)
        primary_keys = {column.key for column in mapper.primary_key}
        fields = [attr.key for attr in mapper.column_attrs if attr.key not in primary_keys]
        return cls(fields, keep_if_blank)

    def merge(self, stored: Any, candidate: Any) -> Dict[str, Any]:
        """计算需要写入的字段值，只返回和已存储值不同的字段"""
        values = {}
        for name in self.fields:
            value = getattr(candidate, name)
            if name in self.keep_if_blank and is_blank(value):
                logger.debug(f"候选值为空，保留原值: {name}")
                continue
            if getattr(stored, name) != value:
                values[name] = value
        return values

    def apply(self, stored: Any, candidate: Any) -> Dict[str, Any]:
        """把合并结果写入已存储记录，返回写入的字段

        任一字段写入失败（例如模型校验不通过）时恢复已写入的字段，已存储记录保持原样。
        """
        values = self.merge(stored, candidate)
        previous = {}
        try:
            for name, value in values.items():
                previous[name] = getattr(stored, name)
                setattr(stored, name, value)
        except Exception:
            for name, value in previous.items():
                setattr(stored, name, value)
            raise
        return values
