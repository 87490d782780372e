# tests/test_article_domain/test_infrastructure/test_mysql_article_repository.py

from decimal import Decimal
from unittest.mock import Mock

import pytest
from mysql.connector import Error, errorcode

from src.article_domain.infrastructure.persistence.mysql_article_repository import MySQLArticleRepository
from src.common.dtos.article_dtos import ArticleDTO
from src.common.exceptions.custom_exceptions import DatabaseError, ValidationError


@pytest.fixture
def mock_cursor() -> Mock:
    return Mock()


def test_create_tables(mock_cursor) -> None:
    MySQLArticleRepository().create_tables(mock_cursor)

    mock_cursor.execute.assert_called_once()
    assert "CREATE TABLE IF NOT EXISTS articles" in mock_cursor.execute.call_args[0][0]


def test_lock_article_stock_uses_row_lock(mock_cursor) -> None:
    mock_cursor.fetchone.return_value = {"kg": Decimal("12.500")}

    result = MySQLArticleRepository().lock_article_stock(mock_cursor, 3)

    assert result == 12.5
    query, params = mock_cursor.execute.call_args[0]
    assert query.strip().endswith("FOR UPDATE")
    assert params == (3,)


def test_lock_article_stock_missing_row(mock_cursor) -> None:
    mock_cursor.fetchone.return_value = None
    assert MySQLArticleRepository().lock_article_stock(mock_cursor, 3) is None


def test_adjust_article_stock_returns_rowcount(mock_cursor) -> None:
    mock_cursor.rowcount = 1

    affected = MySQLArticleRepository().adjust_article_stock(mock_cursor, 3, -2.5)

    assert affected == 1
    assert mock_cursor.execute.call_args[0][1] == (-2.5, 3)


def test_bulk_insert_articles_uses_executemany(mock_cursor) -> None:
    articles = [ArticleDTO(id=1, code="A", kg=1.0, income_kg=1.0), ArticleDTO(id=2, code="B", kg=2.0, income_kg=2.0)]

    inserted = MySQLArticleRepository().bulk_insert_articles(mock_cursor, articles)

    assert inserted == 2
    mock_cursor.executemany.assert_called_once()
    assert len(mock_cursor.executemany.call_args[0][1]) == 2


def test_bulk_insert_empty_batch(mock_cursor) -> None:
    assert MySQLArticleRepository().bulk_insert_articles(mock_cursor, []) == 0
    mock_cursor.executemany.assert_not_called()


def test_delete_referenced_article_raises_validation_error(mock_cursor) -> None:
    mock_cursor.execute.side_effect = Error(msg="Cannot delete", errno=errorcode.ER_ROW_IS_REFERENCED_2)

    with pytest.raises(ValidationError):
        MySQLArticleRepository().delete_article(mock_cursor, 3)


def test_driver_error_is_wrapped(mock_cursor) -> None:
    mock_cursor.execute.side_effect = Error("Lost connection")

    with pytest.raises(DatabaseError):
        MySQLArticleRepository().get_all_articles(mock_cursor)


def test_get_article_maps_row(mock_cursor) -> None:
    mock_cursor.fetchone.return_value = {
        "service_id": 3,
        "id": 101,
        "no": 1,
        "code": "JNS",
        "description": "Jeans",
        "euro": Decimal("2.50"),
        "colli": Decimal("3.00"),
        "kg": Decimal("90.000"),
        "income_kg": Decimal("100.000"),
        "value": Decimal("250.00"),
    }

    article = MySQLArticleRepository().get_article(mock_cursor, 3)

    assert article.service_id == 3
    assert article.kg == 90.0
    assert article.income_kg == 100.0


def test_update_article_leaves_received_weight_alone(mock_cursor) -> None:
    mock_cursor.rowcount = 1
    article = ArticleDTO(id=101, code="JNS", kg=80.0, income_kg=80.0)

    assert MySQLArticleRepository().update_article(mock_cursor, 1, article) == 1
    query, params = mock_cursor.execute.call_args[0]
    assert "income_kg" not in query
    assert params == (101, 0, "JNS", "", 0.0, 0.0, 80.0, 0.0, 1)
