"""
业务异常定义
"""

class CatalogException(Exception):
    """基础异常类"""
    pass

class NotFoundError(CatalogException):
    """记录未找到异常"""
    pass

class BookNotFoundError(NotFoundError):
    """书籍未找到异常"""
    pass

class ReferenceDataNotFoundError(NotFoundError):
    """参考数据未找到异常"""
    pass

class ValidationError(CatalogException):
    """查询参数或字段值不合法"""
    pass

class ConflictError(CatalogException):
    """提交时数据源拒绝事务（唯一约束、并发修改等）"""
    pass

class DataSourceError(CatalogException):
    """底层存储连接/执行失败"""
    pass
