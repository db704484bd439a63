import logging
import os
import pathlib
from typing import Any, Dict, Optional, Union

import click
import toml

from . import __version__
from .constants import (
    APP_NAME,
    APP_OPTIONS,
    BATCH_DIR,
    CONFIG_DIR_ENV,
    CONFIG_FILE,
    DB_FILE,
    DEFAULT_CONFIG_DATA
)
from .db.purchases import PurchaseStore
from .exceptions import ConfigError


logger = logging.getLogger("book_cli.config")


class ConfigFile:
    """Presents a book-cli configuration file

    Instantiate a :class:`~book_cli.config.ConfigFile` will load the file
    content by default. To work with a file which does not exist yet, the
    ``file_exists`` argument must be set to ``False``.

    Book-cli configuration files are written in the toml markup language.
    All options live in the main section named `APP`.

    Args:
        filename: The file path to the config file
        file_exists: If ``True``, the file must exist and the file content
            is loaded.
    """

    def __init__(
            self,
            filename: Union[str, pathlib.Path],
            file_exists: bool = True
    ) -> None:
        filename = pathlib.Path(filename).resolve()
        config_data = {k: v.copy() if isinstance(v, dict) else v
                       for k, v in DEFAULT_CONFIG_DATA.items()}
        file_data = {}

        if file_exists:
            if not filename.is_file():
                raise ConfigError(
                    f"Config file {click.format_filename(filename)} "
                    f"does not exists"
                )
            try:
                file_data = toml.load(filename)
            except toml.TomlDecodeError as exc:
                raise ConfigError(
                    f"Config file {click.format_filename(filename)} "
                    f"is not valid toml: {exc}"
                ) from exc
            logger.debug(
                f"Config loaded from "
                f"{click.format_filename(filename, shorten=True)}"
            )

        config_data.update(file_data)

        self._config_file = filename
        self._config_data = config_data

    @property
    def filename(self) -> pathlib.Path:
        """Returns the path to the config file"""
        return self._config_file

    @property
    def dirname(self) -> pathlib.Path:
        """Returns the path to the config file directory"""
        return self.filename.parent

    @property
    def data(self) -> Dict[str, Union[str, Dict]]:
        """Returns the configuration data"""
        return self._config_data

    @property
    def app_config(self) -> Dict[str, str]:
        """Returns the configuration data for the APP section"""
        return self.data.setdefault("APP", {})

    def get_app_option(
            self,
            option: str,
            default: Optional[str] = None
    ) -> Optional[str]:
        """Returns the value for an option in the ``APP`` section.

        Args:
            option: The name of the option to search for
            default: The default value to return, if the option is not found
        """
        return self.app_config.get(option, default)

    def set_app_option(
            self,
            option: str,
            value: str,
            write_config: bool = True
    ) -> None:
        """Sets an option in the ``APP`` section

        Args:
            option: One of ``db_file``, ``batch_dir`` or ``default_store``
            value: The new value
            write_config: If ``True``, save the config to file
        """
        if option not in APP_OPTIONS:
            raise ConfigError(
                f"Unknown option {option}, "
                f"choose from {', '.join(APP_OPTIONS)}"
            )

        self.app_config[option] = value
        logger.info(f"Option {option} set to {value!r}")

        if write_config:
            self.write_config()

    def write_config(
            self,
            filename: Optional[Union[str, pathlib.Path]] = None
    ) -> None:
        """Write the config data to file

        Args:
            filename: If not ``None`` the config is written to these file path
                instead of ``self.filename``
        """
        f = pathlib.Path(filename or self.filename).resolve()

        if not f.parent.is_dir():
            f.parent.mkdir(parents=True)

        with f.open("w", encoding="utf-8") as fp:
            toml.dump(self.data, fp)

        click_f = click.format_filename(f, shorten=True)
        logger.info(f"Config written to {click_f}")


class Session:
    """Holds the settings for the current session"""
    def __init__(self) -> None:
        self._config: Optional[ConfigFile] = None
        self._params: Dict[str, Any] = {}
        self._app_dir: pathlib.Path = get_app_dir()

        logger.debug(f"book-cli version: {__version__}")
        logger.debug(f"App dir: {click.format_filename(self.app_dir)}")

    @property
    def params(self):
        """Returns the parameter of the session

        Parameter are usually added using the ``add_param_to_session``
        callback on a click option. This way an option from the main group
        can be accessed from its subcommands.
        """
        return self._params

    @property
    def app_dir(self) -> pathlib.Path:
        """Returns the path of the app dir"""
        return self._app_dir

    @property
    def config(self) -> ConfigFile:
        """Returns the ConfigFile for this session

        A missing config file is not an error, the defaults are used then.
        """
        if self._config is None:
            conf_file = self.app_dir / CONFIG_FILE
            self._config = ConfigFile(conf_file, file_exists=conf_file.is_file())

        return self._config

    def _resolve_path(self, param: str, default: str) -> pathlib.Path:
        value = self.params.get(param)
        if value is not None:
            return pathlib.Path(value).resolve()
        value = self.config.get_app_option(param, default)
        return (self.app_dir / pathlib.Path(value).expanduser()).resolve()

    @property
    def db_path(self) -> pathlib.Path:
        """Returns the database file

        Order: ``--db-file`` option, ``db_file`` from config (relative to
        the app dir), ``books.db`` in the app dir.
        """
        return self._resolve_path("db_file", DB_FILE)

    @property
    def batch_dir(self) -> pathlib.Path:
        """Returns the directory batch file names are looked up in"""
        return self._resolve_path("batch_dir", BATCH_DIR)

    @property
    def default_store(self) -> str:
        return self.config.get_app_option("default_store", "")

    def get_store(self, **kwargs) -> PurchaseStore:
        """Returns an unopened :class:`PurchaseStore` for the session db"""
        return PurchaseStore(self.db_path, **kwargs)


def get_app_dir() -> pathlib.Path:
    app_dir = os.getenv(CONFIG_DIR_ENV) or click.get_app_dir(
        APP_NAME, roaming=False, force_posix=True
    )
    return pathlib.Path(app_dir).resolve()
