"""Building command trees from nested mappings."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..models import CommandSpecError
from .models import Command, Flag, FlagType

__all__ = ["build_command", "build_flag"]


def build_flag(spec: Mapping[str, Any], where: str = "") -> Flag:
    """Build a Flag from a mapping.

    Recognized keys: "name" (long name), "short", "type" (a FlagType value,
    defaults to "string"), "values" (enum options) and "usage".

    Args:
        spec: The flag description
        where: Location used in error messages

    Returns:
        The Flag
    """
    long_name = str(spec.get("name", ""))
    short_name = str(spec.get("short", ""))
    if not long_name and not short_name:
        raise CommandSpecError(f"{where}: flag needs a name or a short name")

    raw_type = spec.get("type", FlagType.STRING.value)
    try:
        flag_type = FlagType(raw_type)
    except ValueError as e:
        raise CommandSpecError(f"{where}: unknown flag type {raw_type!r}") from e

    values = [str(v) for v in spec.get("values", [])]
    if flag_type is FlagType.ENUM and not values:
        raise CommandSpecError(f"{where}: enum flag {long_name or short_name!r} has no values")

    return Flag(
        long_name=long_name,
        short_name=short_name,
        flag_type=flag_type,
        enum_values=values,
        usage=str(spec.get("usage", "")),
    )


def build_command(spec: Mapping[str, Any], where: str = "") -> Command:
    """Build a Command tree from nested mappings.

    Example:
        build_command({
            "name": "prog",
            "flags": [{"name": "mode", "short": "m", "type": "enum", "values": ["dev", "prod"]}],
            "commands": [{"name": "start", "short": "s"}],
        })

    Args:
        spec: The command description ("name", "short", "description", "flags", "commands")
        where: Location used in error messages (filled in for nested commands)

    Returns:
        The root Command
    """
    long_name = str(spec.get("name", ""))
    short_name = str(spec.get("short", ""))
    location = f"{where}/{long_name or short_name}" if where else (long_name or short_name or "/")
    if where and not long_name and not short_name:
        raise CommandSpecError(f"{where}: subcommand needs a name or a short name")

    command = Command(long_name=long_name, short_name=short_name, description=str(spec.get("description", "")))
    for flag_spec in spec.get("flags", []):
        command.add_flag(build_flag(flag_spec, location))
    for sub_spec in spec.get("commands", []):
        command.add_subcommand(build_command(sub_spec, location))
    return command
