import pathlib
import re
import sys
from setuptools import setup, find_packages


if sys.version_info < (3, 9, 0):
    raise RuntimeError("book-cli requires Python 3.9.0+")

here = pathlib.Path(__file__).parent

long_description = (here / "README.md").read_text("utf-8")

about = (here / "src" / "book_cli" / "_version.py").read_text("utf-8")


def read_from_file(key):
    return re.search(f"{key} = ['\"]([^'\"]+)['\"]", about).group(1)


setup(
    name=read_from_file("__title__"),
    version=read_from_file("__version__"),
    packages=find_packages("src"),
    package_dir={"": "src"},
    include_package_data=True,
    description=read_from_file("__description__"),
    license=read_from_file("__license__"),
    author=read_from_file("__author__"),
    classifiers=[
         "Development Status :: 3 - Alpha",
         "Environment :: Console",
         "License :: OSI Approved :: GNU Affero General Public License v3",
         "Programming Language :: Python :: 3.9",
         "Programming Language :: Python :: 3.10",
         "Programming Language :: Python :: 3.11",
         "Programming Language :: Python :: 3.12"
    ],
    install_requires=[
        "aiosqlite",
        "click>=8",
        "colorama; platform_system=='Windows'",
        "filelock>=3.11",
        "tabulate",
        "toml"
    ],
    extras_require={
        "tests": [
            "coverage[toml]",
            "pytest"
        ]
    },
    python_requires=">=3.9",
    keywords="books, manga, purchases, sqlite, cli",
    long_description=long_description,
    long_description_content_type="text/markdown",
    entry_points={
        "console_scripts": ["book-cli = book_cli:main"]
    }
)
