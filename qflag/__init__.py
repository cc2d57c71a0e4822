"""qflag - a command-line flag library with offline shell completion.

The completion engine turns a command tree (commands, subcommands, flags and
enum values) into a self-contained Bash or PowerShell completion script with
built-in fuzzy matching.
"""

from .commands.models import Command, Flag, FlagType, ValueKind
from .completions import gen_and_print, generate
from .models import CommandSpecError, ExitCode, QFlagError, UnsupportedShellError

__all__ = [
    "Command",
    "CommandSpecError",
    "ExitCode",
    "Flag",
    "FlagType",
    "QFlagError",
    "UnsupportedShellError",
    "ValueKind",
    "gen_and_print",
    "generate",
]
