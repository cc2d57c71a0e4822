"""Tests for command model collection."""

from qflag.commands.models import Command, Flag, FlagType, ValueKind
from qflag.completions.discovery import (
    collect,
    collect_context_options,
    collect_flag_params,
    join_context,
    walk_contexts,
)
from qflag.completions.models import CommandModel, RequirementKind


class TestJoinContext:
    """Test context path construction."""

    def test_join(self) -> None:
        """Paths always start and end with a slash."""
        assert join_context("/", "sub") == "/sub/"
        assert join_context("/sub/", "child") == "/sub/child/"


class TestContextOptions:
    """Test the options of one context."""

    def test_flags_then_subcommands(self, sample_root: Command) -> None:
        """Prefixed flag names come first, then subcommand aliases."""
        assert collect_context_options(sample_root) == [
            "--mode",
            "-m",
            "--verbose",
            "-v",
            "--output",
            "-o",
            "start",
            "s",
            "stop",
        ]

    def test_duplicates_removed(self) -> None:
        """A name offered twice is listed once, at its first position."""
        cmd = Command(
            long_name="prog",
            flags=[Flag(long_name="all", short_name="a"), Flag(short_name="a")],
            subcommands=[Command(long_name="all"), Command(long_name="add", short_name="all")],
        )
        assert collect_context_options(cmd) == ["--all", "-a", "all", "add"]

    def test_none(self) -> None:
        """No command, no options."""
        assert collect_context_options(None) == []

    def test_none_children_skipped(self) -> None:
        """None entries among children are ignored."""
        cmd = Command(long_name="prog", flags=[None, Flag(long_name="x")], subcommands=[None])
        assert collect_context_options(cmd) == ["--x"]


class TestWalkContexts:
    """Test breadth-first traversal."""

    def test_every_alias_visited(self, sample_root: Command) -> None:
        """Each alias of a command yields its own context path, level by level."""
        assert [path for path, _ in walk_contexts(sample_root)] == [
            "/start/",
            "/s/",
            "/stop/",
            "/start/now/",
            "/s/now/",
        ]

    def test_none_root(self) -> None:
        """Nothing to walk."""
        assert list(walk_contexts(None)) == []


class TestFlagParams:
    """Test flag parameter collection."""

    def test_sample(self, sample_root: Command) -> None:
        """Root flags are found under "/", subcommand flags under each alias path."""
        keys = [p.key for p in collect_flag_params(sample_root)]
        assert keys == [
            "/|--mode",
            "/|-m",
            "/|--verbose",
            "/|-v",
            "/|--output",
            "/|-o",
            "/start/|--force",
            "/start/|--level",
            "/s/|--force",
            "/s/|--level",
        ]

    def test_kinds(self, sample_root: Command) -> None:
        """Requirement and value kind follow the flag type."""
        params = {p.key: p for p in collect_flag_params(sample_root)}
        mode = params["/|-m"]
        assert mode.requirement is RequirementKind.REQUIRED
        assert mode.value_kind is ValueKind.ENUM
        assert mode.enum_options == ["dev", "prod", "staging"]
        verbose = params["/|--verbose"]
        assert verbose.requirement is RequirementKind.NONE
        assert verbose.value_kind is ValueKind.BOOL
        output = params["/|--output"]
        assert output.requirement is RequirementKind.REQUIRED
        assert output.value_kind is ValueKind.STRING
        assert output.enum_options == []

    def test_first_definition_wins(self) -> None:
        """A second flag with the same name in the same context is discarded."""
        cmd = Command(
            long_name="prog",
            flags=[
                Flag(long_name="x", flag_type=FlagType.ENUM, enum_values=["a"]),
                Flag(long_name="x", flag_type=FlagType.BOOL),
            ],
        )
        params = collect_flag_params(cmd)
        assert len(params) == 1
        assert params[0].value_kind is ValueKind.ENUM

    def test_enum_values_copied(self) -> None:
        """Later changes to the flag do not leak into the model."""
        flag = Flag(long_name="x", flag_type=FlagType.ENUM, enum_values=["a"])
        params = collect_flag_params(Command(long_name="prog", flags=[flag]))
        flag.enum_values.append("b")
        assert params[0].enum_options == ["a"]


class TestCollect:
    """Test the full model."""

    def test_sample(self, sample_model: CommandModel) -> None:
        """The root is stored under "/" next to every alias path."""
        assert list(sample_model.contexts) == ["/", "/start/", "/s/", "/stop/", "/start/now/", "/s/now/"]
        assert sample_model.contexts["/"] == sample_model.root_options
        assert sample_model.contexts["/start/"] == ["--force", "--level", "now"]
        assert sample_model.contexts["/stop/"] == []
        assert len(sample_model.flag_params) == 10

    def test_flag_index(self, sample_model: CommandModel) -> None:
        """The index is keyed by "context|flag"."""
        index = sample_model.flag_index()
        assert index["/s/|--level"].enum_options == ["low", "high"]
        assert "/stop/|--level" not in index

    def test_none_root(self) -> None:
        """A missing root gives an empty model with the root context."""
        model = collect(None)
        assert model.contexts == {"/": []}
        assert model.root_options == []
        assert model.flag_params == []

    def test_empty_tree(self) -> None:
        """A bare root has no options."""
        assert collect(Command(long_name="prog")).contexts == {"/": []}
