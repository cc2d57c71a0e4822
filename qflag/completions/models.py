"""Data models for shell completion generation.

Contains the structures produced by the command-model collector and the
fuzzy matcher tunables baked into the emitted scripts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from ..commands.models import ValueKind
from ..constants import (
    FUZZY_CACHE_MAX_SIZE,
    FUZZY_COMPLETION_ENABLED,
    FUZZY_MAX_CANDIDATES,
    FUZZY_MAX_RESULTS,
    FUZZY_MIN_PATTERN_LENGTH,
    FUZZY_SCORE_THRESHOLD,
)

__all__ = [
    "ROOT_CONTEXT",
    "CommandModel",
    "FlagParam",
    "FuzzyConfig",
    "RequirementKind",
]

ROOT_CONTEXT = "/"


class RequirementKind(StrEnum):
    """Whether a flag consumes the next word as its value."""

    REQUIRED = "required"
    NONE = "none"


@dataclass
class FlagParam:
    """A flag name reachable in one completion context."""

    command_path: str  # context path, e.g. "/" or "/sub/"
    name: str  # prefixed: "--mode" or "-m"
    requirement: RequirementKind
    value_kind: ValueKind
    enum_options: list[str] = field(default_factory=list)

    @property
    def key(self) -> str:
        """Lookup key used by the emitted scripts."""
        return f"{self.command_path}|{self.name}"


@dataclass
class CommandModel:
    """Everything an emitter needs to know about a command tree."""

    root_options: list[str] = field(default_factory=list)
    # context path -> deduplicated options (flags and subcommand names), root included
    contexts: dict[str, list[str]] = field(default_factory=dict)
    flag_params: list[FlagParam] = field(default_factory=list)

    def flag_index(self) -> dict[str, FlagParam]:
        """Map "context|flag" keys to their FlagParam."""
        return {param.key: param for param in self.flag_params}


@dataclass(frozen=True)
class FuzzyConfig:
    """Fuzzy matcher tunables.

    The same values are emitted into every script so that Bash and
    PowerShell rank candidates identically.
    """

    enabled: bool = FUZZY_COMPLETION_ENABLED
    max_candidates: int = FUZZY_MAX_CANDIDATES
    min_pattern_length: int = FUZZY_MIN_PATTERN_LENGTH
    score_threshold: int = FUZZY_SCORE_THRESHOLD
    max_results: int = FUZZY_MAX_RESULTS
    cache_max_size: int = FUZZY_CACHE_MAX_SIZE

    def __post_init__(self) -> None:
        for name in ("max_candidates", "min_pattern_length", "max_results", "cache_max_size"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                msg = f"{name} must be a non-negative integer, got {value!r}"
                raise ValueError(msg)
        if not 0 <= self.score_threshold <= 100:  # noqa: PLR2004
            msg = f"score_threshold must be within 0-100, got {self.score_threshold!r}"
            raise ValueError(msg)
