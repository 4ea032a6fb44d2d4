"""
书店目录数据访问层
"""
__version__ = "1.0.0"
