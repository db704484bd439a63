__title__ = "book-cli"
__description__ = "Command line tool to keep track of purchased book volumes."
__version__ = "0.1.0"
__author__ = "book-cli developers"
__license__ = "AGPL"
__status__ = "Development"
