"""Nox sessions."""

from pathlib import Path

import nox


nox.needs_version = ">= 2023.04.22"
nox.options.error_on_external_run = True
nox.options.sessions = ("tests",)

PACKAGE = "book_cli"
PYTHON_VERSIONS = ["3.9", "3.10", "3.11", "3.12"]
DEFAULT_PYTHON_VERSION = PYTHON_VERSIONS[-1]


@nox.session(python=PYTHON_VERSIONS)
def tests(s: nox.Session) -> None:
    """Run the test suite."""
    s.install(".[tests]")
    try:
        s.run(
            "coverage",
            "run",
            "--parallel",
            f"--source={PACKAGE}",
            "-m",
            "pytest",
            *s.posargs,
        )
    finally:
        if s.interactive:
            s.notify("coverage", posargs=[])


@nox.session(python=DEFAULT_PYTHON_VERSION)
def coverage(s: nox.Session) -> None:
    """Produce the coverage report."""
    s.install("coverage[toml]")
    default_args = ["report"]
    args = s.posargs or default_args
    if not s.posargs and any(Path().glob(".coverage.*")):
        s.run("coverage", "combine")

    s.run("coverage", *args)
