"""Command model collection.

Walks a command tree breadth-first and extracts what the emitted scripts
need: the completable options of every context and the flag parameters.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..commands.models import ValueKind
from ..logging_setup import get_logger
from .models import ROOT_CONTEXT, CommandModel, FlagParam, RequirementKind

if TYPE_CHECKING:
    from ..commands.models import CommandLike, FlagLike

__all__ = ["collect", "collect_context_options", "collect_flag_params", "join_context", "walk_contexts"]


@dataclass
class _Entry:
    """A queued traversal entry: one alias of one command."""

    name: str
    parent_path: str
    command: CommandLike


def join_context(parent_path: str, name: str) -> str:
    """Return the context path of `name` under `parent_path`.

    >>> join_context("/", "sub")
    '/sub/'
    >>> join_context("/sub/", "child")
    '/sub/child/'
    """
    return f"{parent_path.rstrip('/')}/{name}/"


def _aliases(command: CommandLike) -> Iterator[str]:
    """Long name first, then short name; empty names are skipped."""
    if command.long_name:
        yield command.long_name
    if command.short_name:
        yield command.short_name


def _enqueue(queue: deque[_Entry], parent_path: str, commands: Iterable[CommandLike | None]) -> None:
    for command in commands:
        if command is None:
            continue
        for name in _aliases(command):
            queue.append(_Entry(name=name, parent_path=parent_path, command=command))


def walk_contexts(root: CommandLike | None) -> Iterator[tuple[str, CommandLike]]:
    """Yield (context path, command) pairs breadth-first, starting at the root's children.

    Every command is visited once per alias, so a command with a long and a
    short name shows up under two context paths.

    The tree must be acyclic. Cycles are rejected by the command registry and
    are not checked again here.
    """
    if root is None:
        return
    queue: deque[_Entry] = deque()
    _enqueue(queue, ROOT_CONTEXT, root.subcommands)
    while queue:
        entry = queue.popleft()
        path = join_context(entry.parent_path, entry.name)
        yield path, entry.command
        _enqueue(queue, path, entry.command.subcommands)


def _flag_names(flag: FlagLike) -> Iterator[str]:
    if flag.long_name:
        yield "--" + flag.long_name
    if flag.short_name:
        yield "-" + flag.short_name


def collect_context_options(command: CommandLike | None) -> list[str]:
    """Collect the completable options directly reachable from a command.

    Flag names (long and short, prefixed) come first, then subcommand names
    (long and short). Duplicates are removed, first occurrence wins.

    Args:
        command: The command, None yields no options

    Returns:
        The options of the command's context
    """
    if command is None:
        return []
    seen: dict[str, None] = {}
    for flag in command.flags:
        if flag is None:
            continue
        for name in _flag_names(flag):
            seen.setdefault(name)
    for sub in command.subcommands:
        if sub is None:
            continue
        for name in _aliases(sub):
            seen.setdefault(name)
    return list(seen)


def _make_param(path: str, name: str, flag: FlagLike) -> FlagParam:
    kind = ValueKind(flag.value_kind)
    return FlagParam(
        command_path=path,
        name=name,
        requirement=RequirementKind.NONE if kind is ValueKind.BOOL else RequirementKind.REQUIRED,
        value_kind=kind,
        enum_options=list(flag.enum_values) if kind is ValueKind.ENUM else [],
    )


def collect_flag_params(root: CommandLike | None) -> list[FlagParam]:
    """Collect one FlagParam per flag name and context.

    The tree is walked breadth-first from the root (context "/"), following
    every alias path. Parameters are keyed by context path plus prefixed
    name; a key that was already seen is skipped.

    Args:
        root: The root command

    Returns:
        The flag parameters, in traversal order
    """
    if root is None:
        return []
    params: list[FlagParam] = []
    seen: set[tuple[str, str]] = set()

    def add_flags(path: str, command: CommandLike) -> None:
        for flag in command.flags:
            if flag is None:
                continue
            for name in _flag_names(flag):
                key = (path, name)
                if key in seen:
                    continue
                seen.add(key)
                params.append(_make_param(path, name, flag))

    add_flags(ROOT_CONTEXT, root)
    for path, command in walk_contexts(root):
        add_flags(path, command)
    return params


def collect(root: CommandLike | None) -> CommandModel:
    """Build the completion model of a command tree.

    Args:
        root: The root command; None or an empty tree gives an empty model

    Returns:
        The CommandModel (root options, per-context options, flag parameters)
    """
    log = get_logger("qflag.completions")
    root_options = collect_context_options(root)
    contexts: dict[str, list[str]] = {ROOT_CONTEXT: root_options}
    for path, command in walk_contexts(root):
        contexts.setdefault(path, collect_context_options(command))
    params = collect_flag_params(root)
    log.debug("Collected %d contexts and %d flag parameters", len(contexts), len(params))
    return CommandModel(root_options=root_options, contexts=contexts, flag_params=params)
