"""Builders that turn an operation plus settings into a :class:`CommandSpec`."""

from .base import CommandBuilder, CommandSpec, flatten_sql
from .dbview import DbviewCommand
from .mysql import MysqlExportCommand, MysqlQueryCommand
from .mysqlimport import MysqlImportCommand
from .wget import WgetCommand

__all__ = [
    "CommandBuilder",
    "CommandSpec",
    "flatten_sql",
    "DbviewCommand",
    "MysqlExportCommand",
    "MysqlQueryCommand",
    "MysqlImportCommand",
    "WgetCommand",
]
