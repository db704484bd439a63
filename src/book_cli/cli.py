import logging
import sys

import click

from .cmds import build_in_cmds
from .decorators import (
    batch_dir_option,
    db_file_option,
    verbosity_option,
    version_option
)
from .exceptions import BookCliException
from ._logging import click_basic_config


logger = logging.getLogger("book_cli")
click_basic_config(logger)

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


@build_in_cmds
@click.group(context_settings=CONTEXT_SETTINGS)
@db_file_option
@batch_dir_option
@version_option
@verbosity_option(cli_logger=logger)
def cli():
    """Keep track of the book volumes you bought."""


def main(*args, **kwargs):
    try:
        sys.exit(cli(*args, **kwargs))
    except click.Abort:
        logger.error("Aborted")
        sys.exit(1)
    except BookCliException as e:
        logger.error(e)
        sys.exit(2)
    except Exception:
        logger.exception("Uncaught Exception")
        sys.exit(3)
