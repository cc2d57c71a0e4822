"""Tests for command tree models and the declarative builder."""

import pytest

from qflag.commands.models import Command, Flag, FlagType, ValueKind
from qflag.commands.tree import build_command, build_flag
from qflag.models import CommandSpecError


class TestFlagType:
    """Test the completion value kind of flag types."""

    def test_bool_and_enum_kept(self) -> None:
        """Bool and enum map to themselves."""
        assert FlagType.BOOL.value_kind is ValueKind.BOOL
        assert FlagType.ENUM.value_kind is ValueKind.ENUM

    @pytest.mark.parametrize("flag_type", [t for t in FlagType if t not in (FlagType.BOOL, FlagType.ENUM)])
    def test_others_take_strings(self, flag_type: FlagType) -> None:
        """Every other type completes as a string."""
        assert flag_type.value_kind is ValueKind.STRING


class TestModels:
    """Test the concrete Command and Flag classes."""

    def test_flag_name(self) -> None:
        """The long name is preferred."""
        assert Flag(long_name="verbose", short_name="v").name == "verbose"
        assert Flag(short_name="v").name == "v"

    def test_add_children(self) -> None:
        """add_flag and add_subcommand attach and return their argument."""
        root = Command(long_name="prog")
        flag = root.add_flag(Flag(long_name="mode", flag_type=FlagType.ENUM, enum_values=["a"]))
        sub = root.add_subcommand(Command(long_name="run", short_name="r"))
        assert root.flags == [flag]
        assert root.subcommands == [sub]
        assert flag.value_kind is ValueKind.ENUM


class TestBuildCommand:
    """Test building trees from mappings."""

    def test_sample_tree(self, sample_root: Command) -> None:
        """The sample tree is built as described."""
        assert sample_root.name == "prog"
        assert [f.long_name for f in sample_root.flags] == ["mode", "verbose", "output"]
        assert sample_root.flags[0].enum_values == ["dev", "prod", "staging"]
        start = sample_root.subcommands[0]
        assert (start.long_name, start.short_name) == ("start", "s")
        assert start.subcommands[0].name == "now"

    def test_default_type_is_string(self) -> None:
        """Flags without a type take strings."""
        assert build_flag({"name": "file"}).flag_type is FlagType.STRING

    def test_unknown_type(self) -> None:
        """Unknown types are reported with their location."""
        with pytest.raises(CommandSpecError, match="prog: unknown flag type 'color'"):
            build_command({"name": "prog", "flags": [{"name": "x", "type": "color"}]})

    def test_enum_without_values(self) -> None:
        """Enum flags need values."""
        with pytest.raises(CommandSpecError, match="no values"):
            build_flag({"name": "mode", "type": "enum"})

    def test_nameless_flag(self) -> None:
        """Flags need at least one name."""
        with pytest.raises(CommandSpecError):
            build_flag({"type": "bool"})

    def test_nameless_subcommand(self) -> None:
        """Subcommands need at least one name."""
        with pytest.raises(CommandSpecError, match="prog/run: subcommand"):
            build_command({"name": "prog", "commands": [{"name": "run", "commands": [{}]}]})

    def test_spec_error_is_value_error(self) -> None:
        """CommandSpecError can be caught as ValueError."""
        with pytest.raises(ValueError):
            build_flag({})
