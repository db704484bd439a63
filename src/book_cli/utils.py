import re
import unicodedata
from datetime import date
from typing import Optional

import click

from .constants import DATE_FORMAT, ELLIPSIS, PLACEHOLDER
from .exceptions import InvalidDate


DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def today() -> str:
    return date.today().strftime(DATE_FORMAT)


def validate_date(value: str) -> str:
    """Return ``value`` if it has the strict ``YYYY-MM-DD`` shape.

    Only the shape is checked, ``2024-13-40`` passes like it always did.
    """
    if not isinstance(value, str) or DATE_RE.fullmatch(value) is None:
        raise InvalidDate(value)
    return value


class DateType(click.ParamType):
    name = "YYYY-MM-DD"

    def convert(self, value, param, ctx):
        try:
            return validate_date(value)
        except InvalidDate as exc:
            self.fail(str(exc), param, ctx)


date_type = DateType()


def _char_width(char: str) -> int:
    if unicodedata.combining(char):
        return 0
    if unicodedata.east_asian_width(char) in ("W", "F"):
        return 2
    return 1


def display_width(text: str) -> int:
    """Number of terminal columns ``text`` occupies."""
    return sum(_char_width(c) for c in text)


def truncate(text: str, width: int, ellipsis: str = ELLIPSIS) -> str:
    """Cut ``text`` to at most ``width`` terminal columns.

    When something is cut the ellipsis is appended and counts towards
    ``width``. Wide (CJK) characters count as two columns.
    """
    if display_width(text) <= width:
        return text

    budget = width - display_width(ellipsis)
    used = 0
    chars = []
    for char in text:
        w = _char_width(char)
        if used + w > budget:
            break
        chars.append(char)
        used += w
    return "".join(chars) + ellipsis


def or_placeholder(value: Optional[str], placeholder: str = PLACEHOLDER) -> str:
    return value if value else placeholder
