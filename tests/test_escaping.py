"""Tests for shell escaping."""

import pytest

from qflag.completions.escaping import BASH_SPECIAL_CHARS, escape_bash, escape_powershell, quote_powershell


class TestEscapeBash:
    """Test escaping for unquoted Bash words."""

    def test_plain_text_unchanged(self) -> None:
        """Ordinary names pass through."""
        assert escape_bash("--output-dir") == "--output-dir"
        assert escape_bash("a.b_c=d:e,f%g+h@i/j") == "a.b_c=d:e,f%g+h@i/j"

    def test_example(self) -> None:
        """Spaces and pipes are backslash-escaped."""
        assert escape_bash("a b|c") == "a\\ b\\|c"

    @pytest.mark.parametrize("char", sorted(BASH_SPECIAL_CHARS))
    def test_special_chars(self, char: str) -> None:
        """Every special character gets a backslash."""
        assert escape_bash(f"x{char}y") == f"x\\{char}y"

    def test_command_substitution_is_inert(self) -> None:
        """$(...) and backticks cannot run."""
        assert escape_bash("$(rm -rf /)") == "\\$\\(rm\\ -rf\\ /\\)"
        assert escape_bash("`id`") == "\\`id\\`"

    def test_control_chars(self) -> None:
        """Newlines and tabs become ANSI-C quoted fragments; NUL is dropped."""
        assert escape_bash("a\nb") == "a$'\\n'b"
        assert escape_bash("a\tb\r") == "a$'\\t'b$'\\r'"
        assert escape_bash("a\0b") == "ab"

    def test_empty(self) -> None:
        """Empty input gives empty output."""
        assert escape_bash("") == ""


class TestEscapePowershell:
    """Test the PowerShell escaping table."""

    def test_quotes_doubled(self) -> None:
        """Single quotes, including typographic ones, are doubled."""
        assert escape_powershell("it's") == "it''s"
        assert escape_powershell("it\u2019s") == "it\u2019\u2019s"

    def test_backtick_escapes(self) -> None:
        """Special characters get a backtick prefix."""
        assert escape_powershell('$a`b"c&d|e;f<g>h(i)') == '`$a``b`"c`&d`|e`;f`<g`>h`(i`)'

    def test_backslash_doubled(self) -> None:
        """Backslashes are doubled."""
        assert escape_powershell("C:\\tmp") == "C:\\\\tmp"

    def test_control_chars(self) -> None:
        """Control characters become backtick escapes."""
        assert escape_powershell("a\r\n\tb") == "a`r`n`tb"

    def test_plain_text_unchanged(self) -> None:
        """Ordinary names pass through."""
        assert escape_powershell("--output-dir") == "--output-dir"


class TestQuotePowershell:
    """Test verbatim single-quoted literals."""

    def test_wraps_in_quotes(self) -> None:
        """Text is wrapped in single quotes."""
        assert quote_powershell("prod") == "'prod'"
        assert quote_powershell("") == "''"

    def test_only_quotes_escaped(self) -> None:
        """Inside single quotes nothing but quotes is special."""
        assert quote_powershell("it's") == "'it''s'"
        assert quote_powershell("$(x) `n \\") == "'$(x) `n \\'"
        assert quote_powershell("\u2018a\u201b") == "'\u2018\u2018a\u201b\u201b'"
