"""Locale-aware number parsing for wire values."""

import re
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class NumberFormat:
    """Separators used when reading numbers.

    Attributes:
        grouping_separator: Thousands separator (e.g. "," in en_US).
        decimal_separator: Separator before the fraction digits.
    """

    grouping_separator: str = ","
    decimal_separator: str = "."

    def __post_init__(self) -> None:
        for separator in (self.grouping_separator, self.decimal_separator):
            if len(separator) != 1 or separator.isdigit() or separator in "-E":
                raise ValueError(f"invalid number separator: {separator!r}")
        if self.grouping_separator == self.decimal_separator:
            raise ValueError("grouping and decimal separators must differ")


DEFAULT_NUMBER_FORMAT = NumberFormat()


@lru_cache(maxsize=16)
def _prefix_pattern(grouping: str, decimal: str) -> re.Pattern[str]:
    g = re.escape(grouping)
    d = re.escape(decimal)
    return re.compile(
        rf"(?P<sign>-)?(?P<integer>[0-9]+(?:{g}[0-9]+)*)?(?:{d}(?P<fraction>[0-9]*))?"
        r"(?:E(?P<exponent>-?[0-9]+))?"
    )


def parse_number(text: str, number_format: NumberFormat = DEFAULT_NUMBER_FORMAT) -> float:
    """Parse the leading number of a string.

    Only the longest numeric prefix is consumed; anything after it is
    ignored, so "12ms" parses as 12.0. Grouping separators are dropped.
    An exponent written with an upper-case "E" is applied ("1.0E-4" is
    0.0001); an "E" without digits ends the prefix.

    Args:
        text: Text starting with a number.
        number_format: Separators to honour.

    Returns:
        The parsed value as a float.

    Raises:
        ValueError: If text does not start with a number.
    """
    pattern = _prefix_pattern(
        number_format.grouping_separator, number_format.decimal_separator
    )
    match = pattern.match(text)
    if match is None or not (match.group("integer") or match.group("fraction")):
        raise ValueError(f"not a number: {text!r}")
    sign = match.group("sign") or ""
    digits = (match.group("integer") or "0").replace(number_format.grouping_separator, "")
    fraction = match.group("fraction") or "0"
    exponent = match.group("exponent") or "0"
    return float(f"{sign}{digits}.{fraction}e{exponent}")
