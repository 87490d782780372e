# logistics_domain/application/shipment_service.py
"""Application services for the shipping register: dispatched parcels and day notes."""

import logging
from typing import Optional

from src.common.dtos.logistics_dtos import ShipmentDTO, ShipmentNoteDTO
from src.common.exceptions.custom_exceptions import NotFoundError, ValidationError
from src.common.persistence.mysql_unit_of_work import MySQLUnitOfWork
from src.common.utils.date_utils import normalize_ship_date
from src.logistics_domain.domain.repositories.shipment_repository import IShipmentRepository

logger = logging.getLogger(__name__)


def _ship_date(raw: Optional[str]) -> str:
    try:
        return normalize_ship_date(raw)
    except ValueError as e:
        raise ValidationError(f"Invalid ship date: {e}")


def validate_shipment(shipment: ShipmentDTO) -> None:
    """Normalizes the dispatch day in place and rejects incomplete or negative entries."""
    shipment.ship_date = _ship_date(shipment.ship_date)
    shipment.full_name = shipment.full_name.strip()
    if not shipment.full_name:
        raise ValidationError("Recipient full name is required")
    if shipment.places < 0 or shipment.price < 0 or shipment.weight < 0:
        raise ValidationError("Places, price and weight cannot be negative")


def validate_note(note: ShipmentNoteDTO) -> None:
    note.ship_date = _ship_date(note.ship_date)
    note.note = note.note.strip()
    if not note.note:
        raise ValidationError("Note text is required")


class ShipmentApplicationService:

    def __init__(self, uow: MySQLUnitOfWork, shipment_repo: IShipmentRepository) -> None:
        self.uow = uow
        self.shipment_repo = shipment_repo

    @staticmethod
    def _day_filter(ship_date: Optional[str]) -> Optional[str]:
        return _ship_date(ship_date) if ship_date and ship_date.strip() else None

    def list_shipments(self, ship_date: Optional[str] = None) -> list[ShipmentDTO]:
        """Shipments latest day first; a blank ``ship_date`` lists every day."""
        day = self._day_filter(ship_date)
        with self.uow.transaction() as tx:
            return self.shipment_repo.find_shipments(tx, day)

    def create_shipment(self, shipment: ShipmentDTO) -> ShipmentDTO:
        validate_shipment(shipment)
        with self.uow.transaction() as tx:
            shipment.id = self.shipment_repo.insert_shipment(tx, shipment)

        logger.info(f"Shipment {shipment.id} registered for {shipment.ship_date} ({shipment.tk or 'no carrier'})")
        return shipment

    def update_shipment(self, shipment_id: int, shipment: ShipmentDTO) -> ShipmentDTO:
        validate_shipment(shipment)
        with self.uow.transaction() as tx:
            if self.shipment_repo.update_shipment(tx, shipment_id, shipment) == 0:
                raise NotFoundError("Shipment", shipment_id)

        shipment.id = shipment_id
        logger.info(f"Shipment {shipment_id} updated")
        return shipment

    def delete_shipment(self, shipment_id: int) -> None:
        with self.uow.transaction() as tx:
            if self.shipment_repo.delete_shipment(tx, shipment_id) == 0:
                raise NotFoundError("Shipment", shipment_id)

        logger.info(f"Shipment {shipment_id} deleted")

    def list_notes(self, ship_date: Optional[str] = None) -> list[ShipmentNoteDTO]:
        day = self._day_filter(ship_date)
        with self.uow.transaction() as tx:
            return self.shipment_repo.find_notes(tx, day)

    def create_note(self, note: ShipmentNoteDTO) -> ShipmentNoteDTO:
        validate_note(note)
        with self.uow.transaction() as tx:
            note.id = self.shipment_repo.insert_note(tx, note)

        logger.info(f"Shipment note {note.id} added for {note.ship_date}")
        return note

    def update_note(self, note_id: int, note: ShipmentNoteDTO) -> ShipmentNoteDTO:
        validate_note(note)
        with self.uow.transaction() as tx:
            if self.shipment_repo.update_note(tx, note_id, note) == 0:
                raise NotFoundError("Shipment note", note_id)

        note.id = note_id
        logger.info(f"Shipment note {note_id} updated")
        return note

    def delete_note(self, note_id: int) -> None:
        with self.uow.transaction() as tx:
            if self.shipment_repo.delete_note(tx, note_id) == 0:
                raise NotFoundError("Shipment note", note_id)

        logger.info(f"Shipment note {note_id} deleted")
