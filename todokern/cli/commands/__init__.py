"""CLI command modules for todokern.

Each module contains related command handlers used by __main__.py.
"""

from todokern.cli.commands.encode import cmd_encode
from todokern.cli.commands.store import cmd_list, cmd_read, cmd_run

__all__ = ["cmd_encode", "cmd_list", "cmd_read", "cmd_run"]
