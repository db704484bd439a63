import logging

import click
from click import echo

from ..batch import import_lines, open_batch_source
from ..decorators import pass_session, pass_store
from ..utils import date_type, today


logger = logging.getLogger("book_cli.cmds.batch")


@click.command("batch")
@click.argument("source")
@click.argument("store_name", metavar="STORE")
@click.argument("bought_at", metavar="[DATE]", type=date_type, required=False)
@pass_session
@pass_store
async def cli(session, store, source, store_name, bought_at):
    """Import one volume per line from SOURCE

    Every line reads "<series> <volume>". SOURCE is a file, a file name in
    the batch directory or "-" for stdin. All volumes get the same STORE
    and DATE (YYYY-MM-DD, default today). Lines in another format are
    skipped. The batch is saved completely or not at all.
    """
    bought_at = bought_at or today()

    with open_batch_source(source, session.batch_dir) as f:
        summary = await import_lines(store, f, store_name, bought_at)

    if summary.skipped:
        logger.warning(f"{summary.skipped} line(s) skipped, expected '<series> <volume>'")
    echo(f"Batch done: {summary}")
