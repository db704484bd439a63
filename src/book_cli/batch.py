"""Batch import of purchases from line-oriented text.

Every line names one volume as ``<series> <volume>``, e.g.::

    One Piece 105
    Mob Psycho 100 12

The volume is the trailing integer, so the second line is volume 12 of
"Mob Psycho 100". All lines of a batch share the same store and purchase
date and are written in a single transaction.
"""
import logging
import pathlib
import re
from typing import IO, Iterable, Optional, Tuple, Union

import click

from .constants import MAX_VOLUME
from .db.purchases import PurchaseStore
from .exceptions import FileDoesNotExists
from .models import BatchSummary
from .utils import validate_date


logger = logging.getLogger("book_cli.batch")

LINE_RE = re.compile(r"^(.*)\s+(\d+)$", re.ASCII)
STDIN = "-"


def parse_line(line: str) -> Optional[Tuple[str, int]]:
    """Split a batch line into ``(series, volume)``.

    Returns ``None`` if the line does not end with a whitespace separated
    integer, has nothing in front of it or the volume is too large to store.
    """
    match = LINE_RE.match(line.strip())
    if match is None:
        return None
    series = match.group(1).strip()
    digits = match.group(2).lstrip("0") or "0"
    if not series or len(digits) > len(str(MAX_VOLUME)):
        return None
    volume = int(digits)
    if volume > MAX_VOLUME:
        return None
    return series, volume


def resolve_batch_source(
        source: str,
        batch_dir: Union[str, pathlib.Path]
) -> str:
    """Find the file to read a batch from.

    ``-`` stands for stdin. Other names are tried as given first and then
    inside ``batch_dir``.

    Raises:
        FileDoesNotExists: if neither location holds a file.
    """
    if source == STDIN:
        return source

    path = pathlib.Path(source)
    if path.is_file():
        return str(path)

    alt = pathlib.Path(batch_dir) / source.lstrip("/")
    if alt.is_file():
        logger.debug(f"Using batch file {click.format_filename(alt)}")
        return str(alt)

    raise FileDoesNotExists(path)


def open_batch_source(
        source: str,
        batch_dir: Union[str, pathlib.Path]
) -> IO[str]:
    """Open the batch named by ``source`` for reading, see
    :func:`resolve_batch_source`."""
    filename = resolve_batch_source(source, batch_dir)
    return click.open_file(filename, "r", encoding="utf-8", errors="replace")


async def import_lines(
        store: PurchaseStore,
        lines: Iterable[str],
        store_name: str,
        bought_at: str
) -> BatchSummary:
    """Upsert every parseable line into ``store`` as one atomic unit.

    Blank lines only count towards ``total``, unparseable lines are counted
    as skipped. If any upsert fails nothing of the batch is kept.

    Args:
        store: An open purchase store.
        lines: The batch lines, trailing newlines allowed.
        store_name: Where all volumes of this batch were bought.
        bought_at: Purchase date of the batch as ``YYYY-MM-DD``.
    """
    bought_at = validate_date(bought_at)
    summary = BatchSummary()

    async with store.transaction():
        for line in lines:
            summary.total += 1
            line = line.strip()
            if not line:
                continue

            parsed = parse_line(line)
            if parsed is None:
                summary.skipped += 1
                logger.debug(f"Skipped line {summary.total}: {line!r}")
                continue

            series, volume = parsed
            result = await store.upsert(series, volume, store_name, "", bought_at)
            summary.record(result)

    logger.debug(f"Batch committed: {summary}")
    return summary
