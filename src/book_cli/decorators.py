import asyncio
import logging
from functools import wraps

import click

from .config import Session
from ._logging import _normalize_logger
from . import __version__


pass_session = click.make_pass_decorator(Session, ensure=True)


def run_async(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, ** kwargs))
    return wrapper


def pass_store(func=None, **store_kwargs):
    """Open the session's purchase store around an async command.

    The store is passed after any positional arguments and closed when the
    command returns or raises.
    """
    def coro(f):
        @wraps(f)
        @pass_session
        @run_async
        async def wrapper(session, *args, **kwargs):
            async with session.get_store(**store_kwargs) as store:
                return await f(*args, store, **kwargs)
        return wrapper

    if callable(func):
        return coro(func)

    return coro


def add_param_to_session(ctx: click.Context, param, value):
    """Add a parameter to :class:`Session` `param` attribute

    This is usually used as a callback for a click option
    """
    session = ctx.ensure_object(Session)
    session.params[param.name] = value
    return value


def version_option(func=None, **kwargs):
    def callback(ctx, param, value):
        if not value or ctx.resilient_parsing:
            return

        click.echo(f"book-cli, version {__version__}", color=ctx.color)
        ctx.exit()

    kwargs.setdefault("is_flag", True)
    kwargs.setdefault("expose_value", False)
    kwargs.setdefault("is_eager", True)
    kwargs.setdefault("help", "Show the version and exit.")
    kwargs["callback"] = callback

    option = click.option("--version", **kwargs)

    if callable(func):
        return option(func)

    return option


def verbosity_option(func=None, *, cli_logger=None, **kwargs):
    """A decorator that adds a `--verbosity, -v` option to the decorated
    command.
    Keyword arguments are passed to
    the underlying ``click.option`` decorator.
    """
    def callback(ctx, param, value):
        x = getattr(logging, value.upper(), None)
        if not isinstance(x, int):
            raise click.BadParameter(
                f"Must be CRITICAL, ERROR, WARNING, INFO or DEBUG, "
                f"not {value}"
            )
        cli_logger.setLevel(x)

    kwargs.setdefault("default", "INFO")
    kwargs.setdefault("metavar", "LVL")
    kwargs.setdefault("expose_value", False)
    kwargs.setdefault(
        "help", "Either CRITICAL, ERROR, WARNING, "
        "INFO or DEBUG. [default: INFO]"
    )
    kwargs.setdefault("is_eager", True)
    kwargs.setdefault("callback", callback)

    cli_logger = _normalize_logger(cli_logger)

    option = click.option("--verbosity", "-v", **kwargs)

    if callable(func):
        return option(func)

    return option


def db_file_option(func=None, **kwargs):
    kwargs.setdefault("type", click.Path(dir_okay=False))
    kwargs.setdefault("callback", add_param_to_session)
    kwargs.setdefault("expose_value", False)
    kwargs.setdefault(
        "help",
        "The SQLite database to use instead of the one from the config."
    )

    option = click.option("--db-file", **kwargs)

    if callable(func):
        return option(func)

    return option


def batch_dir_option(func=None, **kwargs):
    kwargs.setdefault("type", click.Path(file_okay=False))
    kwargs.setdefault("callback", add_param_to_session)
    kwargs.setdefault("expose_value", False)
    kwargs.setdefault(
        "help",
        "Directory to look up batch file names in."
    )

    option = click.option("--batch-dir", **kwargs)

    if callable(func):
        return option(func)

    return option
