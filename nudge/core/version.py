import sqlite3
from importlib.metadata import PackageNotFoundError, version


def package_version() -> str:
    try:
        return version("nudge")
    except PackageNotFoundError:
        return "0.0.0+unknown"


def sqlite_version() -> str:
    return sqlite3.sqlite_version
