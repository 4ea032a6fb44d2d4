"""
测试用的样本数据
"""
from decimal import Decimal

from catalog.models.reference_data import DataType

# 样本参考数据: key -> (类型, 显示文本)
SAMPLE_REFERENCE_DATA = {
    "fiction": (DataType.GENRE, "Fiction"),
    "science": (DataType.GENRE, "Science"),
    "penguin": (DataType.PUBLISHER, "Penguin Books"),
    "oreilly": (DataType.PUBLISHER, "O'Reilly Media"),
    "hardcover": (DataType.BOOK_TYPE, "Hardcover"),
    "paperback": (DataType.BOOK_TYPE, "Paperback"),
    "new": (DataType.CONDITION, "New"),
    "used": (DataType.CONDITION, "Used"),
}

# 样本书籍数据，库存数量为 [10, 3, 0, 5, 0]
SAMPLE_BOOKS = [
    {
        "name": "Dune",
        "author": "Frank Herbert",
        "isbn": "9780441172719",
        "price": Decimal("9.99"),
        "quantity": 10,
        "cover_image_url": "covers/dune.jpg",
        "genre": "fiction",
        "publisher": "penguin",
        "book_type": "paperback",
        "condition": "used",
    },
    {
        "name": "A Brief History of Time",
        "author": "Stephen Hawking",
        "isbn": "9780553380163",
        "price": Decimal("18.00"),
        "quantity": 3,
        "cover_image_url": None,
        "genre": "science",
        "publisher": "penguin",
        "book_type": "hardcover",
        "condition": "new",
    },
    {
        "name": "Fluent Python",
        "author": "Luciano Ramalho",
        "isbn": "9781492056355",
        "price": Decimal("59.99"),
        "quantity": 0,
        "cover_image_url": "covers/fluent-python.png",
        "genre": "science",
        "publisher": "oreilly",
        "book_type": "paperback",
        "condition": "new",
    },
    {
        "name": "The Left Hand of Darkness",
        "author": "Ursula K. Le Guin",
        "isbn": "9780441478125",
        "price": Decimal("12.50"),
        "quantity": 5,
        "cover_image_url": None,
        "genre": "fiction",
        "publisher": "penguin",
        "book_type": "paperback",
        "condition": "used",
    },
    {
        "name": "Learning SQL",
        "author": "Alan Beaulieu",
        "isbn": "9780596520830",
        "price": Decimal("35.00"),
        "quantity": 0,
        "cover_image_url": "covers/learning-sql.png",
        "genre": "science",
        "publisher": "oreilly",
        "book_type": "paperback",
        "condition": "new",
    },
]

# 书籍关联字段
BOOK_REFERENCE_FIELDS = ("genre", "publisher", "book_type", "condition")
