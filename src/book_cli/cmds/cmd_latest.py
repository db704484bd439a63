import click
from click import echo

from ..decorators import pass_store
from ..utils import or_placeholder


@click.command("latest")
@click.argument("keyword")
@pass_store
async def cli(store, keyword):
    """Show the highest volume bought of series matching KEYWORD

    The highest volume is searched across all matching series together.
    """
    record = await store.latest_by_series(keyword)
    if record is None:
        echo(f"No volumes of {keyword} purchased yet.")
        return

    echo(
        f"Latest: {record.series} vol. {record.volume} "
        f"(bought at {or_placeholder(record.store)})."
    )
