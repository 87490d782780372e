# balance_domain/application/balance_service.py
"""Read-only stock balance report."""

import logging
from typing import Any

from src.balance_domain.domain.repositories.balance_repository import IBalanceRepository
from src.common.dtos.balance_dtos import BalanceRowDTO
from src.common.persistence.mysql_unit_of_work import MySQLUnitOfWork

logger = logging.getLogger(__name__)


def build_balance_row(row: dict[str, Any]) -> BalanceRowDTO:
    """income - sent is what is still in the warehouse; minus reserved is what can still be sold."""
    income = float(row.get("income_kg") or 0)
    sent = float(row.get("sent_kg") or 0)
    reserved = float(row.get("reserved_kg") or 0)
    balance = income - sent
    return BalanceRowDTO(
        service_id=row["service_id"],
        article_id=row["id"],
        code=row.get("code") or "",
        description=row.get("description") or "",
        income_kg=round(income, 2),
        sent_kg=round(sent, 2),
        balance_kg=round(balance, 2),
        reserved_kg=round(reserved, 2),
        free_kg=round(balance - reserved, 2),
    )


class BalanceApplicationService:

    def __init__(self, uow: MySQLUnitOfWork, balance_repo: IBalanceRepository) -> None:
        self.uow = uow
        self.balance_repo = balance_repo

    def get_balance(self) -> list[BalanceRowDTO]:
        with self.uow.transaction() as tx:
            rows = self.balance_repo.get_article_movements(tx)
        logger.debug(f"Balance report built for {len(rows)} articles")
        return [build_balance_row(row) for row in rows]
