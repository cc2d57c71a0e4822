"""Data models for the command tree.

The completion engine only reads a small capability surface from commands and
flags (names, value kind, enum values, children). It is described by the
`CommandLike` and `FlagLike` protocols, so any registry exposing those
attributes can be used. `Command` and `Flag` are the concrete implementations
shipped with qflag.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol

__all__ = ["Command", "CommandLike", "Flag", "FlagLike", "FlagType", "ValueKind"]


class ValueKind(StrEnum):
    """What a flag expects as value, as far as completion is concerned."""

    BOOL = "bool"
    STRING = "string"
    ENUM = "enum"


class FlagType(StrEnum):
    """Flag types known to the flag parser."""

    STRING = "string"
    INT = "int"
    INT64 = "int64"
    UINT = "uint"
    FLOAT = "float"
    BOOL = "bool"
    ENUM = "enum"
    DURATION = "duration"
    TIME = "time"
    SIZE = "size"
    MAP = "map"
    STRING_SLICE = "string_slice"
    INT_SLICE = "int_slice"
    PATH = "path"
    URL = "url"
    IP = "ip"

    @property
    def value_kind(self) -> ValueKind:
        """Completion value kind: bool and enum are kept, anything else takes a string."""
        if self is FlagType.BOOL:
            return ValueKind.BOOL
        if self is FlagType.ENUM:
            return ValueKind.ENUM
        return ValueKind.STRING


class FlagLike(Protocol):
    """Read-only flag surface used by the completion engine."""

    @property
    def long_name(self) -> str: ...

    @property
    def short_name(self) -> str: ...

    @property
    def value_kind(self) -> ValueKind: ...

    @property
    def enum_values(self) -> Sequence[str]: ...


class CommandLike(Protocol):
    """Read-only command surface used by the completion engine."""

    @property
    def long_name(self) -> str: ...

    @property
    def short_name(self) -> str: ...

    @property
    def flags(self) -> Sequence[FlagLike]: ...

    @property
    def subcommands(self) -> Sequence[CommandLike]: ...


@dataclass
class Flag:
    """A command-line flag."""

    long_name: str = ""
    short_name: str = ""
    flag_type: FlagType = FlagType.STRING
    enum_values: list[str] = field(default_factory=list)
    usage: str = ""

    @property
    def value_kind(self) -> ValueKind:
        """Completion value kind derived from the flag type."""
        return self.flag_type.value_kind

    @property
    def name(self) -> str:
        """Display name, long name preferred."""
        return self.long_name or self.short_name


@dataclass
class Command:
    """A command, with its flags and subcommands.

    The tree is expected to be acyclic: cycles are rejected by the command
    registry before the tree reaches the completion engine.
    """

    long_name: str = ""
    short_name: str = ""
    flags: list[Flag] = field(default_factory=list)
    subcommands: list[Command] = field(default_factory=list)
    description: str = ""

    @property
    def name(self) -> str:
        """Display name, long name preferred."""
        return self.long_name or self.short_name

    def add_flag(self, flag: Flag) -> Flag:
        """Attach a flag and return it."""
        self.flags.append(flag)
        return flag

    def add_subcommand(self, command: Command) -> Command:
        """Attach a subcommand and return it."""
        self.subcommands.append(command)
        return command
