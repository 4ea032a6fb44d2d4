"""
书籍模型
"""
from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship, validates

from ..database import Base
from ..exceptions import ValidationError
from .reference_data import ReferenceDataItem

# 低库存阈值：0 < quantity < LOW_STOCK_THRESHOLD 为低库存
LOW_STOCK_THRESHOLD = 5

# 书籍可预加载的关联
BOOK_ASSOCIATIONS = ("genre", "publisher", "book_type", "condition")


class Book(Base):
    """书籍模型"""
    __tablename__ = "book"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_book_quantity_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, index=True)
    author = Column(String(200))
    isbn = Column(String(20), nullable=False, unique=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=0)
    cover_image_url = Column(String(500))

    genre_id = Column(Integer, ForeignKey("reference_data.id"))
    publisher_id = Column(Integer, ForeignKey("reference_data.id"))
    book_type_id = Column(Integer, ForeignKey("reference_data.id"))
    condition_id = Column(Integer, ForeignKey("reference_data.id"))

    genre = relationship(ReferenceDataItem, foreign_keys=[genre_id])
    publisher = relationship(ReferenceDataItem, foreign_keys=[publisher_id])
    book_type = relationship(ReferenceDataItem, foreign_keys=[book_type_id])
    condition = relationship(ReferenceDataItem, foreign_keys=[condition_id])

    @validates("quantity")
    def validate_quantity(self, key, value):
        if value is not None and value < 0:
            raise ValidationError(f"库存数量不能为负数: {value}")
        return value

    @property
    def is_low_stock(self) -> bool:
        return self.quantity is not None and 0 < self.quantity < LOW_STOCK_THRESHOLD

    @property
    def is_out_of_stock(self) -> bool:
        return self.quantity == 0

    def __repr__(self):
        return f"Book(isbn='{self.isbn}', name='{self.name}')"
