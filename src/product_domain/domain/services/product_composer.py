# src/product_domain/domain/services/product_composer.py
"""Validation and derived-field computation for products."""

import random
from collections import defaultdict
from typing import Optional

from src.common.dtos.product_dtos import ArticleAllocationDTO, ProductDTO, ProductStatus
from src.common.exceptions.custom_exceptions import ValidationError
from src.common.utils.numeric_utils import format_money, parse_numeric_input, round_weight

LOT_CODE_LETTERS = "абвгдежзийклмнопрстуфхцчшщэюя"


def validate_product(product: ProductDTO) -> None:
    """Rounds allocation weights to stored precision, then checks status and allocations."""
    if product.status not in {status.value for status in ProductStatus}:
        raise ValidationError(f"Invalid product status {product.status}")

    for allocation in product.allocations:
        allocation.weight = round_weight(allocation.weight)
        if allocation.article <= 0:
            raise ValidationError("Article id must be positive")
        if allocation.weight <= 0:
            raise ValidationError(f"Weight for article {allocation.article} must be positive")


def compute_allocation_fields(allocation: ArticleAllocationDTO) -> None:
    sum_euro = allocation.price_euro * allocation.weight
    allocation.sum_euro = format_money(sum_euro)
    allocation.sum_rub = format_money(sum_euro * allocation.curs_euro)


def compute_product_fields(product: ProductDTO) -> None:
    """Recomputes weight and prices of ``product`` from its allocations.

    Allocation sums are refreshed first, so calling this twice yields the
    same result as calling it once.
    """
    total_rub = 0.0
    total_weight = 0.0
    for allocation in product.allocations:
        compute_allocation_fields(allocation)
        total_rub += parse_numeric_input(allocation.sum_rub)
        total_weight += allocation.weight

    discount = min(max(product.discount, 0.0), 100.0)
    discounted = total_rub * (1 - discount / 100)

    product.weight = format_money(total_weight)
    product.discounted_price = format_money(discounted)
    product.unit_price = format_money(discounted / total_weight if total_weight > 0 else 0.0)


def collect_requested_quantities(allocations: list[ArticleAllocationDTO]) -> dict[int, float]:
    """Sums allocation weights per article, so the same article listed twice is reserved once."""
    requested: dict[int, float] = defaultdict(float)
    for allocation in allocations:
        requested[allocation.article] += round_weight(allocation.weight)
    return {article: round_weight(total) for article, total in requested.items()}


def generate_lot_code(rng: Optional[random.Random] = None) -> str:
    """Random lot code: one cyrillic letter followed by four digits, e.g. ``к0427``."""
    rng = rng or random
    return f"{rng.choice(LOT_CODE_LETTERS)}{rng.randint(0, 9999):04d}"
