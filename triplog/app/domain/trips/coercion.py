"""
Boundary coercion for trip input.

Values arriving from forms or from the spreadsheet transport are parsed here,
once, before they reach the lifecycle engine.
"""

import math
import re
from datetime import date
from typing import Any, Optional

from triplog.app.core.exceptions import ValidationError


_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})")
_BR_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_NON_DIGITS = re.compile(r"\D")


def clean_text(value: Any) -> Optional[str]:
    """Strip a text field; empty text becomes None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_number(value: Any, field: str) -> Optional[float]:
    """
    Parse a numeric field.

    Accepts ints, floats and numeric strings, including the Brazilian
    decimal comma ("500,00", "1.234,56"). Empty input yields None.

    Raises:
        ValidationError: if the value is not a finite number
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field=field)
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(" ", "")
        if not text:
            return None
        if "," in text:
            text = text.replace(".", "").replace(",", ".")
        try:
            number = float(text)
        except ValueError:
            raise ValidationError(f"{field} must be a number", field=field)
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number", field=field)
    return number


def normalize_numero_dt(value: Any) -> str:
    """Keep only the digits of a DT document number."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return _NON_DIGITS.sub("", str(value))


def normalize_plate(value: Any) -> Optional[str]:
    text = clean_text(value)
    return text.upper() if text else None


def normalize_date(value: Any) -> Optional[str]:
    """
    Return a date in zero-padded YYYY-MM-DD form.

    Spreadsheets hand dates back as ISO timestamps or in DD/MM/YYYY; both are
    folded into the canonical form so that string comparison orders them.
    Unrecognized text is returned stripped.
    """
    if isinstance(value, date):
        return value.isoformat()[:10]
    text = clean_text(value)
    if text is None:
        return None
    match = _ISO_DATE.match(text)
    if match:
        year, month, day = match.groups()
        return f"{int(year):04d}-{int(month):02d}-{int(day):02d}"
    match = _BR_DATE.match(text)
    if match:
        day, month, year = match.groups()
        return f"{int(year):04d}-{int(month):02d}-{int(day):02d}"
    return text


def parse_date_filter(value: Any, field: str) -> Optional[str]:
    """Normalize a date filter, rejecting anything that is not a calendar date."""
    text = normalize_date(value)
    if text is None:
        return None
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError:
        raise ValidationError(f"Invalid date '{text}', expected YYYY-MM-DD", field=field)
