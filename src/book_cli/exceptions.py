from pathlib import Path


class BookCliException(Exception):
    """Base class for all errors"""


class FileDoesNotExists(BookCliException):
    """Raised if a file does not exist"""

    def __init__(self, file):
        if isinstance(file, Path):
            file = str(file.resolve())

        message = f"{file} does not exist"
        super().__init__(message)


class InvalidDate(BookCliException, ValueError):
    """Raised if a date is not in YYYY-MM-DD form"""

    def __init__(self, value):
        message = f"Date must be in YYYY-MM-DD format, got {value!r}"
        super().__init__(message)


class InvalidPurchase(BookCliException, ValueError):
    """Raised if a purchase has an empty series or an out-of-range volume"""


class StoreNotOpen(BookCliException):
    """Raised if the purchase store is used before open() or after close()"""


class ConfigError(BookCliException):
    """Raised for unreadable config files or unknown config options"""
