# logistics_domain/application/client_service.py
"""Application services for the client registry."""

import logging

from src.common.dtos.logistics_dtos import ClientDTO
from src.common.exceptions.custom_exceptions import NotFoundError, ValidationError
from src.common.persistence.mysql_unit_of_work import MySQLUnitOfWork
from src.logistics_domain.domain.repositories.client_repository import IClientRepository

logger = logging.getLogger(__name__)


def validate_client(client: ClientDTO) -> None:
    client.full_name = client.full_name.strip()
    if not client.full_name:
        raise ValidationError("Client full name is required")


class ClientApplicationService:

    def __init__(self, uow: MySQLUnitOfWork, client_repo: IClientRepository) -> None:
        self.uow = uow
        self.client_repo = client_repo

    def create_client(self, client: ClientDTO) -> ClientDTO:
        validate_client(client)
        with self.uow.transaction() as tx:
            client.id = self.client_repo.insert_client(tx, client)

        logger.info(f"Client {client.id} created ({client.full_name})")
        return client

    def update_client(self, client_id: int, client: ClientDTO) -> ClientDTO:
        validate_client(client)
        with self.uow.transaction() as tx:
            if self.client_repo.update_client(tx, client_id, client) == 0:
                raise NotFoundError("Client", client_id)

        client.id = client_id
        logger.info(f"Client {client_id} updated")
        return client

    def delete_client(self, client_id: int) -> None:
        with self.uow.transaction() as tx:
            if self.client_repo.delete_client(tx, client_id) == 0:
                raise NotFoundError("Client", client_id)

        logger.info(f"Client {client_id} deleted")

    def get_client(self, client_id: int) -> ClientDTO:
        with self.uow.transaction() as tx:
            client = self.client_repo.get_client(tx, client_id)
        if client is None:
            raise NotFoundError("Client", client_id)
        return client

    def list_clients(self) -> list[ClientDTO]:
        with self.uow.transaction() as tx:
            return self.client_repo.get_all_clients(tx)
