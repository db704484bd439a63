import click

from . import (
    cmd_add,
    cmd_batch,
    cmd_config,
    cmd_latest,
    cmd_list,
    cmd_list_all
)

cli_cmds = [
    cmd_add.cli,
    cmd_batch.cli,
    cmd_config.cli,
    cmd_latest.cli,
    cmd_list.cli,
    cmd_list_all.cli
]


def build_in_cmds(group):
    """
    A decorator to register build-in CLI commands to an instance of
    `click.Group()`.

    Returns
    -------
    click.Group()
    """
    if not isinstance(group, click.Group):
        raise TypeError("Commands can only be attached to an instance of "
                        "click.Group()")

    for cmd in cli_cmds:
        group.add_command(cmd)

    return group
