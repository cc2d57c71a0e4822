"""Shell completion generation.

Turns a command tree into a self-contained Bash or PowerShell completion
script. The scripts carry the command tree as data and a tiered fuzzy
matcher as code, so completing never calls back into the program.
"""

from __future__ import annotations

from .discovery import collect
from .escaping import escape_bash, escape_powershell, quote_powershell
from .handlers import (
    COMPLETION_NOTES,
    completion_examples,
    current_shell,
    format_completion_help,
    gen_and_print,
    generate,
    handle_completion_flag,
)
from .matcher import FuzzyMatcher, complete, fuzzy_score
from .models import CommandModel, FlagParam, FuzzyConfig, RequirementKind

__all__ = [
    "COMPLETION_NOTES",
    "CommandModel",
    "FlagParam",
    "FuzzyConfig",
    "FuzzyMatcher",
    "RequirementKind",
    "collect",
    "complete",
    "completion_examples",
    "current_shell",
    "escape_bash",
    "escape_powershell",
    "format_completion_help",
    "fuzzy_score",
    "gen_and_print",
    "generate",
    "handle_completion_flag",
    "quote_powershell",
]
