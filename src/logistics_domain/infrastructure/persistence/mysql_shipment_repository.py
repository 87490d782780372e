# src/logistics_domain/infrastructure/persistence/mysql_shipment_repository.py
"""MySQL implementation of the shipping register."""

import logging
from typing import Optional

from mysql.connector import Error
from mysql.connector.cursor import MySQLCursorDict

from src.common.dtos.logistics_dtos import ShipmentDTO, ShipmentNoteDTO
from src.common.exceptions.custom_exceptions import DatabaseError
from src.logistics_domain.domain.repositories.shipment_repository import IShipmentRepository

logger = logging.getLogger(__name__)

_SHIPMENT_COLUMNS = "id, ship_date, city, full_name, phone, passport_inn, tk, places, price, weight"
_NOTE_COLUMNS = "id, ship_date, note, created_at"


def _by_day(query: str, ship_date: Optional[str]) -> tuple[str, tuple]:
    if ship_date:
        return query + " WHERE ship_date = %s ORDER BY ship_date DESC, id DESC", (ship_date,)
    return query + " ORDER BY ship_date DESC, id DESC", ()


class MySQLShipmentRepository(IShipmentRepository):
    """MySQL implementation of the Shipment Repository."""

    def create_tables(self, tx: MySQLCursorDict) -> None:
        create_shipments_table_query = """
        CREATE TABLE IF NOT EXISTS shipments (
            id BIGINT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
            ship_date DATE NOT NULL,
            city VARCHAR(128) NOT NULL DEFAULT '',
            full_name VARCHAR(255) NOT NULL,
            phone VARCHAR(64) NOT NULL DEFAULT '',
            passport_inn VARCHAR(64) NOT NULL DEFAULT '',
            tk VARCHAR(128) NOT NULL DEFAULT '',
            places INT NOT NULL DEFAULT 0,
            price DECIMAL(14, 2) NOT NULL DEFAULT 0,
            weight DECIMAL(12, 3) NOT NULL DEFAULT 0,
            INDEX idx_shipments_ship_date (ship_date),
            INDEX idx_shipments_city (city),
            INDEX idx_shipments_full_name (full_name)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        create_notes_table_query = """
        CREATE TABLE IF NOT EXISTS shipment_notes (
            id BIGINT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
            ship_date DATE NOT NULL,
            note TEXT NOT NULL,
            created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
            INDEX idx_shipment_notes_ship_date (ship_date)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        try:
            tx.execute(create_shipments_table_query)
            tx.execute(create_notes_table_query)
            logger.info("Shipments and shipment_notes tables checked/created.")
        except Error as e:
            raise DatabaseError(f"Error creating shipping tables: {e}", original_exception=e)

    def insert_shipment(self, tx: MySQLCursorDict, shipment: ShipmentDTO) -> int:
        insert_query = """
        INSERT INTO shipments (ship_date, city, full_name, phone, passport_inn, tk, places, price, weight)
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
        """
        try:
            tx.execute(insert_query, self._shipment_params(shipment))
            return tx.lastrowid
        except Error as e:
            raise DatabaseError(f"Error inserting shipment: {e}", original_exception=e)

    def update_shipment(self, tx: MySQLCursorDict, shipment_id: int, shipment: ShipmentDTO) -> int:
        update_query = """
        UPDATE shipments
        SET ship_date = %s, city = %s, full_name = %s, phone = %s, passport_inn = %s,
            tk = %s, places = %s, price = %s, weight = %s
        WHERE id = %s
        """
        try:
            tx.execute(update_query, self._shipment_params(shipment) + (shipment_id,))
            return tx.rowcount
        except Error as e:
            raise DatabaseError(f"Error updating shipment {shipment_id}: {e}", original_exception=e)

    @staticmethod
    def _shipment_params(shipment: ShipmentDTO) -> tuple:
        return (
            shipment.ship_date,
            shipment.city,
            shipment.full_name,
            shipment.phone,
            shipment.passport_inn,
            shipment.tk,
            shipment.places,
            shipment.price,
            shipment.weight,
        )

    def delete_shipment(self, tx: MySQLCursorDict, shipment_id: int) -> int:
        try:
            tx.execute("DELETE FROM shipments WHERE id = %s", (shipment_id,))
            return tx.rowcount
        except Error as e:
            raise DatabaseError(f"Error deleting shipment {shipment_id}: {e}", original_exception=e)

    def find_shipments(self, tx: MySQLCursorDict, ship_date: Optional[str] = None) -> list[ShipmentDTO]:
        query, params = _by_day(f"SELECT {_SHIPMENT_COLUMNS} FROM shipments", ship_date)
        try:
            tx.execute(query, params)
            rows = tx.fetchall()
        except Error as e:
            raise DatabaseError(f"Error fetching shipments: {e}", original_exception=e)
        return [ShipmentDTO.from_db_row(row) for row in rows]

    def insert_note(self, tx: MySQLCursorDict, note: ShipmentNoteDTO) -> int:
        try:
            tx.execute("INSERT INTO shipment_notes (ship_date, note) VALUES (%s, %s)", (note.ship_date, note.note))
            return tx.lastrowid
        except Error as e:
            raise DatabaseError(f"Error inserting shipment note: {e}", original_exception=e)

    def update_note(self, tx: MySQLCursorDict, note_id: int, note: ShipmentNoteDTO) -> int:
        try:
            tx.execute(
                "UPDATE shipment_notes SET ship_date = %s, note = %s WHERE id = %s",
                (note.ship_date, note.note, note_id),
            )
            return tx.rowcount
        except Error as e:
            raise DatabaseError(f"Error updating shipment note {note_id}: {e}", original_exception=e)

    def delete_note(self, tx: MySQLCursorDict, note_id: int) -> int:
        try:
            tx.execute("DELETE FROM shipment_notes WHERE id = %s", (note_id,))
            return tx.rowcount
        except Error as e:
            raise DatabaseError(f"Error deleting shipment note {note_id}: {e}", original_exception=e)

    def find_notes(self, tx: MySQLCursorDict, ship_date: Optional[str] = None) -> list[ShipmentNoteDTO]:
        query, params = _by_day(f"SELECT {_NOTE_COLUMNS} FROM shipment_notes", ship_date)
        try:
            tx.execute(query, params)
            rows = tx.fetchall()
        except Error as e:
            raise DatabaseError(f"Error fetching shipment notes: {e}", original_exception=e)
        return [ShipmentNoteDTO.from_db_row(row) for row in rows]
