"""Command tree models for qflag.

This package provides:
- models: Capability protocols (CommandLike, FlagLike) and the concrete
  Command and Flag data classes
- tree: Building command trees from nested mappings
"""

from .models import Command, CommandLike, Flag, FlagLike, FlagType, ValueKind
from .tree import build_command

__all__ = ["Command", "CommandLike", "Flag", "FlagLike", "FlagType", "ValueKind", "build_command"]
