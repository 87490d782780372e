# src/order_domain/infrastructure/persistence/mysql_payment_repository.py
"""MySQL implementation of Payment repository."""

import logging
from typing import Optional

from mysql.connector import Error
from mysql.connector.cursor import MySQLCursorDict

from src.common.dtos.order_dtos import PaymentDTO
from src.common.exceptions.custom_exceptions import DatabaseError
from src.order_domain.domain.repositories.payment_repository import IPaymentRepository

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_METHODS = [
    "пч",
    "п ип",
    "ма",
    "аня",
    "над",
    "саша",
    "дима",
    "альфа",
    "втб",
    "сянь",
    "амин",
    "ачжу",
    "нал",
]

_PAYMENT_COLUMNS = "pm.id, pm.date, pm.method, pm.order_id, pm.amount, pm.comment"


class MySQLPaymentRepository(IPaymentRepository):
    """MySQL implementation of the Payment Repository."""

    def create_tables(self, tx: MySQLCursorDict) -> None:
        """Creates the payment method registry and payments_monitoring (orders must already exist)."""
        create_methods_table_query = """
        CREATE TABLE IF NOT EXISTS payment_methods (
            id BIGINT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
            method VARCHAR(64) NOT NULL,
            UNIQUE KEY uq_payment_methods_method (method)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        create_payments_table_query = """
        CREATE TABLE IF NOT EXISTS payments_monitoring (
            id BIGINT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
            date DATETIME NOT NULL,
            method VARCHAR(64) NOT NULL,
            order_id BIGINT UNSIGNED NULL,
            amount DECIMAL(14, 2) NOT NULL DEFAULT 0,
            comment TEXT,
            INDEX idx_payments_monitoring_date (date),
            INDEX idx_payments_monitoring_method (method),
            INDEX idx_payments_monitoring_order (order_id),
            CONSTRAINT fk_payments_monitoring_order_id FOREIGN KEY (order_id)
                REFERENCES orders(id) ON DELETE SET NULL
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        try:
            tx.execute(create_methods_table_query)
            tx.execute(create_payments_table_query)
            logger.info("Payment_methods and payments_monitoring tables checked/created.")
        except Error as e:
            raise DatabaseError(f"Error creating payment tables: {e}", original_exception=e)

    def seed_payment_methods(self, tx: MySQLCursorDict, methods: list[str]) -> int:
        if not methods:
            return 0
        try:
            tx.executemany(
                "INSERT IGNORE INTO payment_methods (method) VALUES (%s)",
                [(method,) for method in methods],
            )
            added = tx.rowcount
        except Error as e:
            raise DatabaseError(f"Error seeding payment methods: {e}", original_exception=e)
        logger.info(f"Payment methods seeded ({added} new)")
        return added

    def get_payment_methods(self, tx: MySQLCursorDict) -> list[str]:
        try:
            tx.execute("SELECT method FROM payment_methods ORDER BY method")
            rows = tx.fetchall()
        except Error as e:
            raise DatabaseError(f"Error fetching payment methods: {e}", original_exception=e)
        return [row["method"] for row in rows]

    def insert_payment(self, tx: MySQLCursorDict, payment: PaymentDTO) -> int:
        insert_query = """
        INSERT INTO payments_monitoring (date, method, order_id, amount, comment)
        VALUES (%s, %s, %s, %s, %s)
        """
        try:
            tx.execute(
                insert_query,
                (payment.date, payment.method, payment.order_id, payment.amount, payment.comment),
            )
            return tx.lastrowid
        except Error as e:
            raise DatabaseError(f"Error inserting payment: {e}", original_exception=e)

    def update_payment(
        self, tx: MySQLCursorDict, payment_id: int, payment: PaymentDTO, owner_order_id: Optional[int] = None
    ) -> int:
        if owner_order_id is not None:
            query = """
            UPDATE payments_monitoring SET method = %s, amount = %s, comment = %s
            WHERE id = %s AND order_id = %s
            """
            params = (payment.method, payment.amount, payment.comment, payment_id, owner_order_id)
        else:
            query = """
            UPDATE payments_monitoring SET date = %s, method = %s, order_id = %s, amount = %s, comment = %s
            WHERE id = %s
            """
            params = (payment.date, payment.method, payment.order_id, payment.amount, payment.comment, payment_id)
        try:
            tx.execute(query, params)
            return tx.rowcount
        except Error as e:
            raise DatabaseError(f"Error updating payment {payment_id}: {e}", original_exception=e)

    def delete_payment(self, tx: MySQLCursorDict, payment_id: int, owner_order_id: Optional[int] = None) -> int:
        query = "DELETE FROM payments_monitoring WHERE id = %s"
        params: tuple = (payment_id,)
        if owner_order_id is not None:
            query += " AND order_id = %s"
            params += (owner_order_id,)
        try:
            tx.execute(query, params)
            return tx.rowcount
        except Error as e:
            raise DatabaseError(f"Error deleting payment {payment_id}: {e}", original_exception=e)

    def get_payment(self, tx: MySQLCursorDict, payment_id: int) -> Optional[PaymentDTO]:
        try:
            tx.execute(f"SELECT {_PAYMENT_COLUMNS} FROM payments_monitoring pm WHERE pm.id = %s", (payment_id,))
            row = tx.fetchone()
        except Error as e:
            raise DatabaseError(f"Error fetching payment {payment_id}: {e}", original_exception=e)
        return PaymentDTO.from_db_row(row) if row else None

    def get_payments_for_order(self, tx: MySQLCursorDict, order_id: int) -> list[PaymentDTO]:
        try:
            tx.execute(
                f"SELECT {_PAYMENT_COLUMNS} FROM payments_monitoring pm WHERE pm.order_id = %s ORDER BY pm.id",
                (order_id,),
            )
            rows = tx.fetchall()
        except Error as e:
            raise DatabaseError(f"Error fetching payments of order {order_id}: {e}", original_exception=e)
        return [PaymentDTO.from_db_row(row) for row in rows]

    def sum_payments_for_order(self, tx: MySQLCursorDict, order_id: int) -> float:
        try:
            tx.execute(
                "SELECT COALESCE(SUM(amount), 0) AS paid FROM payments_monitoring WHERE order_id = %s",
                (order_id,),
            )
            row = tx.fetchone()
        except Error as e:
            raise DatabaseError(f"Error summing payments of order {order_id}: {e}", original_exception=e)
        return float(row["paid"]) if row else 0.0

    def find_payments(
        self,
        tx: MySQLCursorDict,
        method: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> list[PaymentDTO]:
        query = f"""
        SELECT {_PAYMENT_COLUMNS}
        FROM payments_monitoring pm
        JOIN payment_methods pp ON pp.method = pm.method
        """
        conditions = []
        params = []
        if method:
            conditions.append("pp.method = %s")
            params.append(method)
        if date_from:
            conditions.append("pm.date >= %s")
            params.append(date_from)
        if date_to:
            conditions.append("pm.date <= %s")
            params.append(date_to)
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY pm.date, pm.id"

        try:
            tx.execute(query, tuple(params))
            rows = tx.fetchall()
        except Error as e:
            raise DatabaseError(f"Error querying payments monitoring: {e}", original_exception=e)
        return [PaymentDTO.from_db_row(row) for row in rows]
