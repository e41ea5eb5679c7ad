"""Money and date formatting for netbanking values."""

from datetime import datetime
from typing import Any, Dict, Optional

from .exceptions import ParseError

API_TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%S'
SHORT_DATE_FORMAT = '%d.%m.%Y'


def format_amount(value: str, precision: int, currency: str) -> str:
    """
    Place the decimal point into a raw digit string.

    Args:
        value: Raw amount digits as delivered by the API, e.g. "12345".
        precision: Number of trailing digits forming the fractional part.
        currency: Currency code appended after a space.

    Returns:
        Decimal string with currency, e.g. "123.45 CZK".
    """
    if precision == 0:
        return f"{value}.00 {currency}"
    places = len(value)
    return f"{value[:places - precision]}.{value[places - precision:]} {currency}"


def group_thousands(text: str) -> str:
    """
    Insert a space every three digits of the integer part.

    Everything from the decimal point on (fraction and any currency suffix)
    is kept as is. No separator is placed directly after a leading minus sign.
    """
    dec = text.find('.')
    if dec >= 0:
        integer, rest = text[:dec], text[dec:]
    else:
        integer, rest = text, ''

    grouped = ''
    count = 0
    for i in range(len(integer) - 1, -1, -1):
        grouped = integer[i] + grouped
        count += 1
        if count % 3 == 0 and i > 0 and integer[i - 1] != '-':
            grouped = ' ' + grouped
    return grouped + rest


def read_amount(amount: Optional[Dict[str, Any]]) -> str:
    """Convert an API amount object {value, precision, currency} into a decimal string."""
    if not amount:
        raise ParseError("Amount object is missing")
    try:
        value = str(amount['value'])
        precision = int(amount.get('precision') or 0)
        currency = amount.get('currency') or ''
    except (KeyError, TypeError, ValueError) as e:
        raise ParseError(f"Invalid amount object {amount!r}: {e}") from e
    if precision < 0 or precision > len(value):
        raise ParseError(f"Precision {precision} does not fit value '{value}'")
    return format_amount(value, precision, currency)


def format_money(amount: Optional[Dict[str, Any]]) -> str:
    """Decimal string with thousands grouping for an API amount object."""
    return group_thousands(read_amount(amount))


def short_date(timestamp: Optional[str]) -> str:
    """
    Normalize an API timestamp without offset to the short display form.

    Only the leading 'YYYY-MM-DDTHH:MM:SS' part is considered; fractions or an
    offset after it are ignored.
    """
    if not timestamp:
        raise ParseError("Date is missing")
    try:
        parsed = datetime.strptime(timestamp[:19], API_TIMESTAMP_FORMAT)
    except (TypeError, ValueError) as e:
        raise ParseError(f"Malformed date '{timestamp}': {e}") from e
    return parsed.strftime(SHORT_DATE_FORMAT)
