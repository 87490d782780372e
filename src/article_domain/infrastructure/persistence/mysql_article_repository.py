# article_domain/infrastructure/persistence/mysql_article_repository.py
"""MySQL implementation of Article repository."""
import logging
from typing import Optional

from mysql.connector import Error, errorcode
from mysql.connector.cursor import MySQLCursorDict

from src.article_domain.domain.repositories.article_repository import IArticleRepository
from src.common.dtos.article_dtos import ArticleDTO
from src.common.exceptions.custom_exceptions import DatabaseError, ValidationError

logger = logging.getLogger(__name__)

_ARTICLE_COLUMNS = "service_id, id, `no`, code, description, euro, colli, kg, income_kg, `value`"


class MySQLArticleRepository(IArticleRepository):
    def create_tables(self, tx: MySQLCursorDict) -> None:
        """Creates the articles table."""
        create_articles_table_query = """
        CREATE TABLE IF NOT EXISTS articles (
            service_id BIGINT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
            id INT UNSIGNED NOT NULL,
            `no` INT,
            code VARCHAR(100) NOT NULL DEFAULT '',
            description TEXT,
            euro DECIMAL(12, 2) DEFAULT 0,
            colli DECIMAL(12, 2) DEFAULT 0,
            kg DECIMAL(12, 3) NOT NULL DEFAULT 0,
            income_kg DECIMAL(12, 3) NOT NULL DEFAULT 0,
            `value` DECIMAL(14, 2) DEFAULT 0,
            INDEX idx_articles_id (id),
            INDEX idx_articles_code (code)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        try:
            tx.execute(create_articles_table_query)
            logger.info("Articles table checked/created.")
        except Error as e:
            raise DatabaseError(f"Error creating articles table: {e}", original_exception=e)

    def lock_article_stock(self, tx: MySQLCursorDict, service_id: int) -> Optional[float]:
        try:
            tx.execute("SELECT kg FROM articles WHERE service_id = %s FOR UPDATE", (service_id,))
            row = tx.fetchone()
        except Error as e:
            raise DatabaseError(f"Error locking article {service_id}: {e}", original_exception=e)
        if row is None:
            return None
        return float(row["kg"] or 0)

    def adjust_article_stock(self, tx: MySQLCursorDict, service_id: int, delta: float) -> int:
        try:
            tx.execute(
                "UPDATE articles SET kg = COALESCE(kg, 0) + %s WHERE service_id = %s",
                (delta, service_id),
            )
            return tx.rowcount
        except Error as e:
            raise DatabaseError(f"Error adjusting stock of article {service_id}: {e}", original_exception=e)

    def insert_article(self, tx: MySQLCursorDict, article: ArticleDTO) -> int:
        insert_query = """
        INSERT INTO articles (id, `no`, code, description, euro, colli, kg, income_kg, `value`)
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
        """
        try:
            tx.execute(insert_query, self._article_params(article))
            return tx.lastrowid
        except Error as e:
            raise DatabaseError(f"Error saving article id={article.id}, code={article.code}: {e}", original_exception=e)

    def bulk_insert_articles(self, tx: MySQLCursorDict, articles: list[ArticleDTO]) -> int:
        """Uses executemany, the import path can carry thousands of rows."""
        if not articles:
            return 0

        insert_query = """
        INSERT INTO articles (id, `no`, code, description, euro, colli, kg, income_kg, `value`)
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
        """
        params_list = [self._article_params(article) for article in articles]
        try:
            tx.executemany(insert_query, params_list)
            logger.info(f"Bulk inserted {len(articles)} articles")
            return len(articles)
        except Error as e:
            raise DatabaseError(f"Error bulk inserting articles: {e}", original_exception=e)

    def update_article(self, tx: MySQLCursorDict, service_id: int, article: ArticleDTO) -> int:
        # income_kg is the received weight and is only written on insert
        update_query = """
        UPDATE articles
        SET id = %s, `no` = %s, code = %s, description = %s, euro = %s, colli = %s, kg = %s, `value` = %s
        WHERE service_id = %s
        """
        params = (
            article.id,
            article.no,
            article.code,
            article.description,
            article.euro,
            article.colli,
            article.kg,
            article.value,
            service_id,
        )
        try:
            tx.execute(update_query, params)
            return tx.rowcount
        except Error as e:
            raise DatabaseError(f"Error updating article {service_id}: {e}", original_exception=e)

    def delete_article(self, tx: MySQLCursorDict, service_id: int) -> int:
        try:
            tx.execute("DELETE FROM articles WHERE service_id = %s", (service_id,))
            return tx.rowcount
        except Error as e:
            if e.errno == errorcode.ER_ROW_IS_REFERENCED_2:
                raise ValidationError(f"Article {service_id} is allocated to products and cannot be deleted")
            raise DatabaseError(f"Error deleting article {service_id}: {e}", original_exception=e)

    def delete_all_articles(self, tx: MySQLCursorDict) -> int:
        try:
            tx.execute("DELETE FROM articles")
            return tx.rowcount
        except Error as e:
            if e.errno == errorcode.ER_ROW_IS_REFERENCED_2:
                raise ValidationError("Articles are allocated to products and cannot be truncated")
            raise DatabaseError(f"Error truncating articles: {e}", original_exception=e)

    def get_article(self, tx: MySQLCursorDict, service_id: int) -> Optional[ArticleDTO]:
        try:
            tx.execute(f"SELECT {_ARTICLE_COLUMNS} FROM articles WHERE service_id = %s", (service_id,))
            row = tx.fetchone()
        except Error as e:
            raise DatabaseError(f"Error fetching article {service_id}: {e}", original_exception=e)
        return ArticleDTO.from_db_row(row) if row else None

    def get_all_articles(self, tx: MySQLCursorDict) -> list[ArticleDTO]:
        try:
            tx.execute(f"SELECT {_ARTICLE_COLUMNS} FROM articles ORDER BY service_id")
            rows = tx.fetchall()
        except Error as e:
            raise DatabaseError(f"Error fetching articles: {e}", original_exception=e)
        return [ArticleDTO.from_db_row(row) for row in rows]

    @staticmethod
    def _article_params(article: ArticleDTO) -> tuple:
        return (
            article.id,
            article.no,
            article.code,
            article.description,
            article.euro,
            article.colli,
            article.kg,
            article.income_kg,
            article.value,
        )
