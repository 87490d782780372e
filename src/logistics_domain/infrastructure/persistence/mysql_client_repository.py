# src/logistics_domain/infrastructure/persistence/mysql_client_repository.py
"""MySQL implementation of Client repository."""

import logging
from typing import Optional

from mysql.connector import Error
from mysql.connector.cursor import MySQLCursorDict

from src.common.dtos.logistics_dtos import ClientDTO
from src.common.exceptions.custom_exceptions import DatabaseError
from src.logistics_domain.domain.repositories.client_repository import IClientRepository

logger = logging.getLogger(__name__)

_CLIENT_COLUMNS = "id, city, full_name, phone, passport_number, tk, comment"


class MySQLClientRepository(IClientRepository):
    """MySQL implementation of the Client Repository."""

    def create_tables(self, tx: MySQLCursorDict) -> None:
        create_table_query = """
        CREATE TABLE IF NOT EXISTS clients (
            id BIGINT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
            city VARCHAR(128) NOT NULL DEFAULT '',
            full_name VARCHAR(255) NOT NULL,
            phone VARCHAR(64) NOT NULL DEFAULT '',
            passport_number VARCHAR(64) NOT NULL DEFAULT '',
            tk VARCHAR(128) NOT NULL DEFAULT '',
            comment TEXT,
            INDEX idx_clients_full_name (full_name),
            INDEX idx_clients_city (city)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        try:
            tx.execute(create_table_query)
            logger.info("Clients table checked/created.")
        except Error as e:
            raise DatabaseError(f"Error creating clients table: {e}", original_exception=e)

    def insert_client(self, tx: MySQLCursorDict, client: ClientDTO) -> int:
        insert_query = """
        INSERT INTO clients (city, full_name, phone, passport_number, tk, comment)
        VALUES (%s, %s, %s, %s, %s, %s)
        """
        try:
            tx.execute(
                insert_query,
                (client.city, client.full_name, client.phone, client.passport_number, client.tk, client.comment),
            )
            return tx.lastrowid
        except Error as e:
            raise DatabaseError(f"Error inserting client: {e}", original_exception=e)

    def update_client(self, tx: MySQLCursorDict, client_id: int, client: ClientDTO) -> int:
        update_query = """
        UPDATE clients
        SET city = %s, full_name = %s, phone = %s, passport_number = %s, tk = %s, comment = %s
        WHERE id = %s
        """
        try:
            tx.execute(
                update_query,
                (
                    client.city,
                    client.full_name,
                    client.phone,
                    client.passport_number,
                    client.tk,
                    client.comment,
                    client_id,
                ),
            )
            return tx.rowcount
        except Error as e:
            raise DatabaseError(f"Error updating client {client_id}: {e}", original_exception=e)

    def delete_client(self, tx: MySQLCursorDict, client_id: int) -> int:
        try:
            tx.execute("DELETE FROM clients WHERE id = %s", (client_id,))
            return tx.rowcount
        except Error as e:
            raise DatabaseError(f"Error deleting client {client_id}: {e}", original_exception=e)

    def get_client(self, tx: MySQLCursorDict, client_id: int) -> Optional[ClientDTO]:
        try:
            tx.execute(f"SELECT {_CLIENT_COLUMNS} FROM clients WHERE id = %s", (client_id,))
            row = tx.fetchone()
        except Error as e:
            raise DatabaseError(f"Error fetching client {client_id}: {e}", original_exception=e)
        return ClientDTO.from_db_row(row) if row else None

    def get_all_clients(self, tx: MySQLCursorDict) -> list[ClientDTO]:
        try:
            tx.execute(f"SELECT {_CLIENT_COLUMNS} FROM clients ORDER BY id DESC")
            rows = tx.fetchall()
        except Error as e:
            raise DatabaseError(f"Error fetching clients: {e}", original_exception=e)
        return [ClientDTO.from_db_row(row) for row in rows]
