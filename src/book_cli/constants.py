from typing import Dict, Tuple


APP_NAME: str = "book-cli"
CONFIG_FILE: str = "config.toml"
CONFIG_DIR_ENV: str = "BOOK_CLI_CONFIG_DIR"
DB_FILE: str = "books.db"
BATCH_DIR: str = "batch_file"
DEFAULT_CONFIG_DATA: Dict[str, Dict] = {
    "title": "book-cli Config File",
    "APP": {}
}
APP_OPTIONS: Tuple[str, ...] = ("db_file", "batch_dir", "default_store")
DATE_FORMAT: str = "%Y-%m-%d"
DISPLAY_WIDTH: int = 20
ELLIPSIS: str = "…"
PLACEHOLDER: str = "—"
# largest value an SQLite INTEGER column holds
MAX_VOLUME: int = 2 ** 63 - 1
