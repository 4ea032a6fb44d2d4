"""
库存统计模型
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class BookStatistics:
    """库存统计，每次查询时实时计算，不持久化"""
    low_stock: int = 0
    out_of_stock: int = 0
    stock_total: int = 0
