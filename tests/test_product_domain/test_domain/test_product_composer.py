"""Tests for product validation and derived fields."""

import random
import re

import pytest

from src.common.dtos.product_dtos import ArticleAllocationDTO, ProductDTO
from src.common.exceptions.custom_exceptions import ValidationError
from src.product_domain.domain.services.product_composer import (
    collect_requested_quantities,
    compute_allocation_fields,
    compute_product_fields,
    generate_lot_code,
    validate_product,
)


def make_product(discount: float = 10.0) -> ProductDTO:
    return ProductDTO(
        status=1,
        name="к0427",
        discount=discount,
        allocations=[
            ArticleAllocationDTO(article=1, curs_euro=100.0, price_euro=2.5, weight=10.0),
            ArticleAllocationDTO(article=2, curs_euro=100.0, price_euro=4.0, weight=5.0),
        ],
    )


def test_compute_allocation_fields() -> None:
    allocation = ArticleAllocationDTO(article=1, curs_euro=98.5, price_euro=2.5, weight=10.25)

    compute_allocation_fields(allocation)

    assert allocation.sum_euro == "25.62"
    assert allocation.sum_rub == "2524.06"


def test_compute_product_fields() -> None:
    product = make_product()

    compute_product_fields(product)

    # 10 kg * 2.5 € * 100 + 5 kg * 4 € * 100 = 4500 ₽, minus 10 %
    assert product.weight == "15.00"
    assert product.discounted_price == "4050.00"
    assert product.unit_price == "270.00"


def test_compute_product_fields_is_idempotent() -> None:
    product = make_product(discount=7.5)

    compute_product_fields(product)
    first = (product.weight, product.discounted_price, product.unit_price, [a.sum_rub for a in product.allocations])
    compute_product_fields(product)
    second = (product.weight, product.discounted_price, product.unit_price, [a.sum_rub for a in product.allocations])

    assert first == second


@pytest.mark.parametrize("discount, expected", [(-20, "4500.00"), (150, "0.00"), (100, "0.00")])
def test_discount_is_clamped(discount, expected) -> None:
    product = make_product(discount=discount)
    compute_product_fields(product)
    assert product.discounted_price == expected


def test_unit_price_without_weight() -> None:
    product = ProductDTO(status=1, name="empty")
    compute_product_fields(product)
    assert product.unit_price == "0.00"
    assert product.discounted_price == "0.00"


def test_collect_requested_quantities_merges_articles() -> None:
    allocations = [
        ArticleAllocationDTO(article=1, weight=2.5),
        ArticleAllocationDTO(article=2, weight=1.0),
        ArticleAllocationDTO(article=1, weight=0.5),
    ]
    assert collect_requested_quantities(allocations) == {1: 3.0, 2: 1.0}


def test_collect_requested_quantities_rounds_to_stored_precision() -> None:
    allocations = [ArticleAllocationDTO(article=1, weight=1.2345), ArticleAllocationDTO(article=1, weight=0.0005)]
    assert collect_requested_quantities(allocations) == {1: 1.236}


def test_validate_product_rounds_weights() -> None:
    product = ProductDTO(status=1, name="x", allocations=[ArticleAllocationDTO(article=1, weight=1.2345)])

    validate_product(product)

    assert product.allocations[0].weight == 1.235


@pytest.mark.parametrize(
    "product, message",
    [
        (ProductDTO(status=4, name="x"), "status"),
        (ProductDTO(status=0, name="x"), "status"),
        (ProductDTO(status=1, name="x", allocations=[ArticleAllocationDTO(article=0, weight=1)]), "Article id"),
        (ProductDTO(status=1, name="x", allocations=[ArticleAllocationDTO(article=1, weight=0)]), "Weight"),
        (ProductDTO(status=1, name="x", allocations=[ArticleAllocationDTO(article=1, weight=0.0004)]), "Weight"),
    ],
)
def test_validate_product_rejects(product, message) -> None:
    with pytest.raises(ValidationError, match=message):
        validate_product(product)


def test_generate_lot_code_format() -> None:
    code = generate_lot_code(random.Random(42))
    assert re.fullmatch(r"[а-я]\d{4}", code)
