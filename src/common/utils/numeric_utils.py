"""Locale-tolerant parsing and formatting of numeric values.

Amounts reach the system typed by hand ("1 234,56"), copied from spreadsheets
("1.234,5") or with stray currency symbols ("€ 12,5"). Everything here turns
such text into canonical floats. Malformed input in ``parse_numeric_input``
degrades to ``0.0`` on purpose; callers that must notice garbage use
``parse_amount`` or the ``parse_flexible_*`` helpers instead.
"""

from decimal import ROUND_HALF_UP, Decimal

_ALLOWED_CHARS = set("0123456789,.-+")

# kg and weight columns are DECIMAL(12, 3)
_WEIGHT_QUANTUM = Decimal("0.001")


def normalize_numeric_string(raw: str | None) -> str:
    """Returns a float()-parsable representation of ``raw`` or an empty string."""
    if raw is None:
        return ""
    value = raw.strip()
    if not value:
        return ""

    value = "".join(ch for ch in value if ch in _ALLOWED_CHARS)
    if not value:
        return ""

    last_comma = value.rfind(",")
    last_dot = value.rfind(".")

    if last_comma >= 0 and last_dot >= 0:
        # Rightmost separator is the decimal point, the other one groups thousands
        if last_comma > last_dot:
            value = value.replace(".", "").replace(",", ".")
        else:
            value = value.replace(",", "")
    elif last_comma >= 0:
        value = value.replace(",", ".")

    if value.count(".") > 1:
        last = value.rfind(".")
        int_part = value[:last].replace(".", "")
        frac_part = value[last + 1 :].replace(".", "")
        value = f"{int_part}.{frac_part}"

    return value


def parse_numeric_input(raw: str | float | int | Decimal | None) -> float:
    """Parses a user-entered number, returning 0.0 for blank or malformed input."""
    if raw is None:
        return 0.0
    if isinstance(raw, (int, float, Decimal)):
        return float(raw)

    normalized = normalize_numeric_string(raw)
    if not normalized:
        return 0.0
    try:
        return float(normalized)
    except ValueError:
        return 0.0


def parse_amount(raw: str | float | int | Decimal | None) -> float:
    """Parses a stored monetary amount, raising ValueError when it is not a number."""
    if raw is None:
        return 0.0
    if isinstance(raw, (int, float, Decimal)):
        return float(raw)

    value = raw.strip()
    if not value:
        return 0.0

    # Support numbers with spaces and comma decimal separators from UI.
    value = value.replace(" ", "").replace(",", ".")
    return float(value)


def parse_flexible_float(value: object) -> float:
    """Decodes a JSON value sent either as a number or as a numeric string."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValueError(f"unsupported value type {type(value).__name__}")
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if isinstance(value, str):
        if not value.strip():
            return 0.0
        normalized = normalize_numeric_string(value)
        if not normalized:
            raise ValueError(f"empty numeric value in {value!r}")
        return float(normalized)
    raise ValueError(f"unsupported value type {type(value).__name__}")


def parse_flexible_int(value: object) -> int:
    """Same as parse_flexible_float, truncated towards zero."""
    return int(parse_flexible_float(value))


def format_money(value: float) -> str:
    """Renders a value with exactly two decimal digits."""
    formatted = f"{value:.2f}"
    if formatted == "-0.00":
        return "0.00"
    return formatted


def round_weight(value: float) -> float:
    """Rounds a weight to the three decimals the database keeps, halves away from zero as MySQL does."""
    return float(Decimal(str(value)).quantize(_WEIGHT_QUANTUM, rounding=ROUND_HALF_UP))
