# src/balance_domain/infrastructure/persistence/mysql_balance_repository.py
"""MySQL implementation of Balance repository."""

import logging
from typing import Any

from mysql.connector import Error
from mysql.connector.cursor import MySQLCursorDict

from src.balance_domain.domain.repositories.balance_repository import IBalanceRepository
from src.common.dtos.product_dtos import ProductStatus
from src.common.exceptions.custom_exceptions import DatabaseError

logger = logging.getLogger(__name__)


class MySQLBalanceRepository(IBalanceRepository):

    def get_article_movements(self, tx: MySQLCursorDict) -> list[dict[str, Any]]:
        query = """
        SELECT a.service_id, a.id, a.code, a.description, a.income_kg,
               COALESCE(SUM(CASE WHEN p.status = %s THEN aip.weight ELSE 0 END), 0) AS sent_kg,
               COALESCE(SUM(CASE WHEN p.status = %s THEN aip.weight ELSE 0 END), 0) AS reserved_kg
        FROM articles a
        LEFT JOIN article_in_product aip ON aip.article = a.service_id
        LEFT JOIN products p ON p.id = aip.product_id
        GROUP BY a.service_id, a.id, a.code, a.description, a.income_kg
        ORDER BY a.service_id
        """
        try:
            tx.execute(query, (int(ProductStatus.SOLD), int(ProductStatus.RESERVED)))
            return tx.fetchall()
        except Error as e:
            raise DatabaseError(f"Error fetching article balance: {e}", original_exception=e)
