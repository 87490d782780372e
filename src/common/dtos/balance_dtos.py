"""Data Transfer Objects for the stock balance report."""

from dataclasses import dataclass


@dataclass
class BalanceRowDTO:
    """Per-article stock snapshot, all weights in kg rounded to 2 places."""

    service_id: int
    article_id: int
    code: str
    description: str
    income_kg: float = 0.0
    sent_kg: float = 0.0
    balance_kg: float = 0.0
    reserved_kg: float = 0.0
    free_kg: float = 0.0
