import click
from click import echo
from tabulate import tabulate

from ..constants import DISPLAY_WIDTH
from ..decorators import pass_store
from ..utils import or_placeholder, truncate


@click.command("list-all")
@click.argument("keyword", required=False, default="")
@pass_store
async def cli(store, keyword):
    """Table of the latest volume per series with store, date and notes"""
    records = await store.latest_per_series(keyword)
    if not records:
        echo("(no data)")
        return

    head = ["Series", "Vol.", "Store", "Date", "Notes"]
    data = [
        [
            truncate(r.series, DISPLAY_WIDTH),
            r.volume,
            or_placeholder(r.store),
            or_placeholder(r.bought_at),
            truncate(or_placeholder(r.notes), DISPLAY_WIDTH)
        ]
        for r in records
    ]

    table = tabulate(
        data, head, tablefmt="simple",
        colalign=("left", "right", "left", "left", "left"))

    echo(table)
