"""
测试fixtures包
"""
from .sample_data import (
    SAMPLE_REFERENCE_DATA,
    SAMPLE_BOOKS,
    BOOK_REFERENCE_FIELDS
)

__all__ = [
    "SAMPLE_REFERENCE_DATA",
    "SAMPLE_BOOKS",
    "BOOK_REFERENCE_FIELDS"
]
