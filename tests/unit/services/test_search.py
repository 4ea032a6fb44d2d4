"""
关键字搜索和排序单元测试
"""
import pytest

from catalog.models.book import Book
from catalog.models.filters import SortKey
from catalog.services.search import apply_search, apply_sort, build_search_predicate


class TestBuildSearchPredicate:
    """搜索条件构建测试类"""

    @pytest.mark.parametrize("search", [None, "", "   ", "\t\n"])
    def test_blank_search_has_no_predicate(self, search):
        """测试空关键字不生成条件"""
        assert build_search_predicate(search) is None

    def test_predicate_for_keyword(self):
        """测试非空关键字生成条件"""
        assert build_search_predicate("dune") is not None


class TestApplySearch:
    """关键字搜索测试类"""

    def search_names(self, data_source, search):
        return sorted(book.name for book in apply_search(data_source.query(Book), search).all())

    def test_blank_search_returns_everything(self, data_source, books):
        """测试空关键字返回全部"""
        query = data_source.query(Book)

        assert apply_search(query, "  ") is query
        assert query.count() == 5

    def test_match_name(self, data_source, books):
        """测试匹配书名"""
        assert self.search_names(data_source, "python") == ["Fluent Python"]

    def test_match_genre_text(self, data_source, books):
        """测试匹配体裁"""
        assert self.search_names(data_source, "fiction") == ["Dune", "The Left Hand of Darkness"]

    def test_match_book_type_text(self, data_source, books):
        """测试匹配装帧类型"""
        assert self.search_names(data_source, "hardcover") == ["A Brief History of Time"]

    def test_match_isbn(self, data_source, books):
        """测试匹配ISBN"""
        assert self.search_names(data_source, "978044") == ["Dune", "The Left Hand of Darkness"]

    def test_match_publisher_text(self, data_source, books):
        """测试匹配出版社"""
        assert self.search_names(data_source, "o'reilly") == ["Fluent Python", "Learning SQL"]

    def test_author_is_not_searched(self, data_source, books):
        """测试作者不在搜索范围内"""
        assert self.search_names(data_source, "Hawking") == []

    def test_book_without_references_still_matches_by_name(self, data_source, session, make_book):
        """测试没有关联数据的书籍仍可按书名匹配"""
        session.add(make_book(name="Orphan Title"))
        session.commit()

        assert self.search_names(data_source, "orphan") == ["Orphan Title"]


class TestApplySort:
    """排序测试类"""

    def sorted_names(self, data_source, sort_by):
        return [book.name for book in apply_sort(data_source.query(Book), sort_by).all()]

    def test_sort_by_name(self, data_source, books):
        """测试按名称升序"""
        assert self.sorted_names(data_source, SortKey.NAME) == [
            "A Brief History of Time",
            "Dune",
            "Fluent Python",
            "Learning SQL",
            "The Left Hand of Darkness",
        ]

    def test_sort_by_price_ascending(self, data_source, books):
        """测试按价格升序"""
        assert self.sorted_names(data_source, "PriceAsc") == [
            "Dune",
            "The Left Hand of Darkness",
            "A Brief History of Time",
            "Learning SQL",
            "Fluent Python",
        ]

    def test_sort_by_price_descending(self, data_source, books):
        """测试按价格降序"""
        assert self.sorted_names(data_source, SortKey.PRICE_DESC) == [
            "Fluent Python",
            "Learning SQL",
            "A Brief History of Time",
            "The Left Hand of Darkness",
            "Dune",
        ]

    @pytest.mark.parametrize("sort_by", [None, "", "Rating", "name"])
    def test_unrecognized_sort_falls_back_to_name(self, data_source, books, sort_by):
        """测试无法识别的排序方式按名称排序"""
        assert self.sorted_names(data_source, sort_by) == self.sorted_names(data_source, SortKey.NAME)

    def test_search_then_sort(self, data_source, books):
        """测试先搜索再排序"""
        query = apply_sort(apply_search(data_source.query(Book), "penguin"), SortKey.PRICE_DESC)

        assert [book.name for book in query.all()] == [
            "A Brief History of Time",
            "The Left Hand of Darkness",
            "Dune",
        ]
