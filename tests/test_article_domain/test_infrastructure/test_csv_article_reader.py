"""Tests for the goods-receipt CSV reader."""

from src.article_domain.infrastructure.importers.csv_article_reader import CsvArticleReader, parse_article_record


def test_parse_article_record_full_row() -> None:
    article = parse_article_record(["101", "7", " JNS ", " Jeans mix ", "2,50", "3", "1.120,5", "301.25"])

    assert article.id == 101
    assert article.no == 7
    assert article.code == "JNS"
    assert article.description == "Jeans mix"
    assert article.euro == 2.5
    assert article.kg == 1120.5
    assert article.income_kg == 1120.5
    assert article.value == 301.25


def test_parse_article_record_invalid_no_defaults_to_zero() -> None:
    article = parse_article_record(["101", "1-2", "JNS", "Jeans", "1", "1", "1", "1"])
    assert article.no == 0


def test_parse_article_record_skips_malformed_rows() -> None:
    assert parse_article_record(["101", "1", "JNS"]) is None
    assert parse_article_record(["", "1", "JNS", "d", "1", "1", "1", "1"]) is None
    assert parse_article_record(["-5", "1", "JNS", "d", "1", "1", "1", "1"]) is None
    assert parse_article_record(["1-1", "1", "JNS", "d", "1", "1", "1", "1"]) is None
    assert parse_article_record(["101", "1", "JNS", "d", "1", "1", "1..-", "1"]) is None


def test_reader_counts_skipped_lines(tmp_path) -> None:
    receipt = tmp_path / "prihod.csv"
    receipt.write_text(
        "101;1;JNS;Jeans;2,5;1;10;25\n" "bad;line\n" "102;2;JKT;Jackets;4;1;5;20\n",
        encoding="utf-8-sig",
    )

    reader = CsvArticleReader(delimiter=";")
    articles = list(reader.read(str(receipt)))

    assert [a.id for a in articles] == [101, 102]
    assert reader.skipped == 1
