from ._logging import log_helper
from ._version import __version__
from .cli import main


__all__ = ["__version__", "log_helper", "main"]
