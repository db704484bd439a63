import click
from click import echo
from tabulate import tabulate

from ..decorators import pass_session
from ..constants import APP_OPTIONS


@click.group("config")
def cli():
    """show or change settings"""


@cli.command("show")
@pass_session
def show_config(session):
    """Show the config file and the settings in effect"""
    echo(f"Config file: {click.format_filename(session.config.filename)}")

    data = [
        ["db_file", click.format_filename(session.db_path)],
        ["batch_dir", click.format_filename(session.batch_dir)],
        ["default_store", session.default_store or ""]
    ]
    echo(tabulate(data, ["Option", "Value"], tablefmt="pretty",
                  colalign=("left", "left")))


@cli.command("set")
@click.argument("key", type=click.Choice(APP_OPTIONS))
@click.argument("value")
@pass_session
def set_config(session, key, value):
    """Set KEY to VALUE in the config file"""
    session.config.set_app_option(key, value)
