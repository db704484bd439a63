import click
from click import echo

from ..constants import MAX_VOLUME
from ..decorators import pass_session, pass_store
from ..models import UpsertResult
from ..utils import date_type, today


@click.command("add")
@click.argument("series")
@click.argument("volume", type=click.IntRange(min=0, max=MAX_VOLUME))
@click.argument("store_name", metavar="[STORE]", required=False)
@click.argument("bought_at", metavar="[DATE]", type=date_type, required=False)
@click.argument("notes", metavar="[NOTES]", required=False, default="")
@pass_session
@pass_store
async def cli(session, store, series, volume, store_name, bought_at, notes):
    """Record that VOLUME of SERIES was bought

    Buying a volume again updates its store, date and notes. STORE defaults
    to the config's default_store, DATE (YYYY-MM-DD) to today.
    """
    if store_name is None:
        store_name = session.default_store
    bought_at = bought_at or today()

    result = await store.upsert(series, volume, store_name, notes, bought_at)

    if result is UpsertResult.INSERTED:
        echo(f"Added {series} vol. {volume} ({bought_at})")
    else:
        echo(f"Updated {series} vol. {volume} date/notes ({bought_at})")
