# src/logistics_domain/domain/repositories/shipment_repository.py
"""Shipping register repository interface."""
from abc import ABC, abstractmethod
from typing import Any, Optional

from src.common.dtos.logistics_dtos import ShipmentDTO, ShipmentNoteDTO


class IShipmentRepository(ABC):

    @abstractmethod
    def create_tables(self, tx: Any) -> None:
        """Creates the shipments and shipment_notes tables."""
        pass

    @abstractmethod
    def insert_shipment(self, tx: Any, shipment: ShipmentDTO) -> int:
        pass

    @abstractmethod
    def update_shipment(self, tx: Any, shipment_id: int, shipment: ShipmentDTO) -> int:
        pass

    @abstractmethod
    def delete_shipment(self, tx: Any, shipment_id: int) -> int:
        pass

    @abstractmethod
    def find_shipments(self, tx: Any, ship_date: Optional[str] = None) -> list[ShipmentDTO]:
        """Returns shipments latest day first, optionally limited to one day."""
        pass

    @abstractmethod
    def insert_note(self, tx: Any, note: ShipmentNoteDTO) -> int:
        pass

    @abstractmethod
    def update_note(self, tx: Any, note_id: int, note: ShipmentNoteDTO) -> int:
        pass

    @abstractmethod
    def delete_note(self, tx: Any, note_id: int) -> int:
        pass

    @abstractmethod
    def find_notes(self, tx: Any, ship_date: Optional[str] = None) -> list[ShipmentNoteDTO]:
        pass
