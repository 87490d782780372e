# src/logistics_domain/domain/repositories/client_repository.py
"""Client repository interface."""
from abc import ABC, abstractmethod
from typing import Any, Optional

from src.common.dtos.logistics_dtos import ClientDTO


class IClientRepository(ABC):

    @abstractmethod
    def create_tables(self, tx: Any) -> None:
        pass

    @abstractmethod
    def insert_client(self, tx: Any, client: ClientDTO) -> int:
        pass

    @abstractmethod
    def update_client(self, tx: Any, client_id: int, client: ClientDTO) -> int:
        """Overwrites a client and returns the number of matched rows."""
        pass

    @abstractmethod
    def delete_client(self, tx: Any, client_id: int) -> int:
        pass

    @abstractmethod
    def get_client(self, tx: Any, client_id: int) -> Optional[ClientDTO]:
        pass

    @abstractmethod
    def get_all_clients(self, tx: Any) -> list[ClientDTO]:
        """Returns clients newest first."""
        pass
