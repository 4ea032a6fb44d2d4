"""
参考数据模型

体裁、出版社、装帧类型、品相共用一张表，用 data_type 区分。
"""
from enum import Enum as PyEnum

from sqlalchemy import Column, Enum, Integer, String

from ..database import Base


class DataType(str, PyEnum):
    """参考数据类型"""
    BOOK_TYPE = "BookType"
    CONDITION = "Condition"
    GENRE = "Genre"
    PUBLISHER = "Publisher"


class ReferenceDataItem(Base):
    """参考数据项"""
    __tablename__ = "reference_data"

    id = Column(Integer, primary_key=True, autoincrement=True)
    data_type = Column(Enum(DataType, native_enum=False, length=20), nullable=False, index=True)
    text = Column(String(200), nullable=False)

    def __repr__(self):
        return f"ReferenceDataItem(id={self.id}, data_type='{self.data_type}', text='{self.text}')"
