"""
库存统计
"""
import logging

from sqlalchemy import and_, case, func

from ..data_source import Queryable
from ..models.book import LOW_STOCK_THRESHOLD, Book
from ..models.statistics import BookStatistics

logger = logging.getLogger(__name__)


class StatisticsAggregator:
    """一次聚合查询计算低库存、缺货和总数"""

    def __init__(self, threshold: int = LOW_STOCK_THRESHOLD):
        self.threshold = threshold

    def compute(self, query: Queryable) -> BookStatistics:
        # 严格小于阈值，和低库存筛选的 <= 不同
        low_stock = func.count(case((and_(Book.quantity > 0, Book.quantity < self.threshold), 1)))
        out_of_stock = func.count(case((Book.quantity == 0, 1)))
        stock_total = func.count(Book.id)

        row = query.aggregate(low_stock, out_of_stock, stock_total)
        if row is None:
            return BookStatistics()

        statistics = BookStatistics(
            low_stock=row[0] or 0,
            out_of_stock=row[1] or 0,
            stock_total=row[2] or 0,
        )
        logger.debug(f"库存统计: {statistics}")
        return statistics
