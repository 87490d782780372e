# article_domain/infrastructure/importers/csv_article_reader.py
"""Reader for the delimited goods-receipt file (id, no, code, description, euro, colli, kg, value)."""

import csv
import logging
from typing import Iterator, Optional

from src.common.dtos.article_dtos import ArticleDTO
from src.common.utils.numeric_utils import normalize_numeric_string

logger = logging.getLogger(__name__)

EXPECTED_FIELDS = 8


def _parse_csv_float(raw: str) -> float:
    normalized = normalize_numeric_string(raw)
    if not normalized:
        return 0.0
    return float(normalized)


def _parse_csv_int(raw: str) -> int:
    return int(_parse_csv_float(raw))


def parse_article_record(record: list[str]) -> Optional[ArticleDTO]:
    """Converts one CSV record into an ArticleDTO, or None when the row must be skipped."""
    if len(record) < EXPECTED_FIELDS:
        return None

    id_raw = record[0].strip()
    if not id_raw:
        return None

    try:
        article_id = _parse_csv_int(id_raw)
    except ValueError as e:
        logger.warning(f"Skip line with invalid ID {id_raw!r}: {e}")
        return None
    if article_id <= 0:
        logger.warning(f"Skip line with non-positive ID {id_raw!r}")
        return None

    try:
        no = _parse_csv_int(record[1])
    except ValueError:
        no = 0

    numeric_values = {}
    for name, raw in (("euro", record[4]), ("colli", record[5]), ("kg", record[6]), ("value", record[7])):
        try:
            numeric_values[name] = _parse_csv_float(raw)
        except ValueError as e:
            logger.warning(f"Skip ID {article_id} due to invalid {name.upper()} {raw!r}: {e}")
            return None

    return ArticleDTO(
        id=article_id,
        no=no,
        code=record[2].strip(),
        description=record[3].strip(),
        euro=numeric_values["euro"],
        colli=numeric_values["colli"],
        kg=numeric_values["kg"],
        income_kg=numeric_values["kg"],
        value=numeric_values["value"],
    )


class CsvArticleReader:
    """Streams ArticleDTOs out of a goods-receipt file, counting rows it had to skip."""

    def __init__(self, delimiter: str = ",", encoding: str = "utf-8-sig") -> None:
        self.delimiter = delimiter
        self.encoding = encoding
        self.skipped = 0

    def read(self, path: str) -> Iterator[ArticleDTO]:
        self.skipped = 0
        with open(path, "r", encoding=self.encoding, newline="") as f:
            reader = csv.reader(f, delimiter=self.delimiter)
            for line_no, record in enumerate(reader, 1):
                article = parse_article_record(record)
                if article is None:
                    self.skipped += 1
                    logger.debug(f"Skipped line {line_no}")
                    continue
                yield article
