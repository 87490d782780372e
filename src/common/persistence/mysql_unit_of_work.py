# src/common/persistence/mysql_unit_of_work.py
"""Pooled MySQL connections and the single-transaction boundary shared by all domains."""

import logging
from contextlib import contextmanager
from typing import Iterator

from mysql.connector import Error, pooling
from mysql.connector.constants import ClientFlag
from mysql.connector.cursor import MySQLCursorDict

from src.common.config.settings import settings
from src.common.exceptions.custom_exceptions import DatabaseError

logger = logging.getLogger(__name__)


class MySQLUnitOfWork:
    """Hands out one connection per transaction from a lazily created pool.

    Every mutating service call runs inside exactly one ``transaction()``
    block: the block commits when it exits normally and rolls back on any
    exception, so stock, links, payments and debt change together or not at all.
    """

    def __init__(self) -> None:
        self._pool = None

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        if self._pool is None:
            try:
                self._pool = pooling.MySQLConnectionPool(
                    pool_name=settings.DB_POOL_NAME,
                    pool_size=settings.DB_POOL_SIZE,
                    host=settings.DB_HOST,
                    port=settings.DB_PORT,
                    database=settings.DB_DATABASE,
                    user=settings.DB_USER,
                    password=settings.DB_PASSWORD,
                    autocommit=False,
                    charset="utf8mb4",
                    use_unicode=True,
                    # rowcount reports matched rows, so a no-op UPDATE is not mistaken for a missing row
                    client_flags=[ClientFlag.FOUND_ROWS],
                )
            except Error as e:
                raise DatabaseError(f"Failed to create MySQL connection pool: {e}", original_exception=e)
        return self._pool

    def _get_connection(self):
        try:
            return self._get_pool().get_connection()
        except Error as e:
            raise DatabaseError(f"Failed to connect to MySQL: {e}", original_exception=e)

    @contextmanager
    def transaction(self) -> Iterator[MySQLCursorDict]:
        """Yields a dictionary cursor bound to a fresh transaction."""
        conn = self._get_connection()
        cursor = conn.cursor(dictionary=True)
        try:
            yield cursor
            conn.commit()
        except Error as e:
            conn.rollback()
            logger.error(f"Transaction rolled back after driver error: {e}")
            raise DatabaseError(f"Transaction failed: {e}", original_exception=e)
        except Exception as e:
            conn.rollback()
            logger.warning(f"Transaction rolled back: {e}")
            raise
        finally:
            cursor.close()
            conn.close()  # returns the connection to the pool
