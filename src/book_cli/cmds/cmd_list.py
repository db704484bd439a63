import click
from click import echo

from ..decorators import pass_store
from ..utils import or_placeholder


LABEL_WIDTH = 40


@click.command("list")
@click.argument("keyword", required=False, default="")
@click.option(
    "--no-date", "--hide-date", "hide_date",
    is_flag=True,
    help="Do not show the purchase date."
)
@pass_store
async def cli(store, keyword, hide_date):
    """List the latest volume per series, filtered by KEYWORD"""
    records = await store.latest_per_series(keyword)
    if not records:
        echo("(no data)")
        return

    for r in records:
        label = f"{r.series} {r.volume}"
        if hide_date:
            echo(label)
        else:
            echo(f"{label:<{LABEL_WIDTH}} [{or_placeholder(r.bought_at)}]")
