"""Escaping of arbitrary text for embedding in emitted shell code.

Every function here is total: any input string produces safe output, there
is no failure case and no unescape.
"""

from __future__ import annotations

__all__ = ["escape_bash", "escape_powershell", "quote_powershell"]

# Characters prefixed with a backslash so that the result stays one literal
# unquoted Bash word (array element, assignment value or subscript).
BASH_SPECIAL_CHARS = frozenset("\\\" $`|&;()<>*?[]{}~#'")

# Control characters cannot be backslash-escaped: a backslash-newline is a
# line continuation. They are written as ANSI-C quoted fragments instead.
_BASH_CONTROL = {
    "\n": "$'\\n'",
    "\r": "$'\\r'",
    "\t": "$'\\t'",
    "\0": "",  # Bash strings cannot hold NUL
}

# PowerShell treats the typographic single quotes as quote delimiters too
PWSH_SINGLE_QUOTES = frozenset("'‘’‚‛")

_PWSH_ESCAPES = {
    "\\": "\\\\",
    "$": "`$",
    "`": "``",
    '"': '`"',
    "&": "`&",
    "|": "`|",
    ";": "`;",
    "<": "`<",
    ">": "`>",
    "(": "`(",
    ")": "`)",
    "\r": "`r",
    "\n": "`n",
    "\t": "`t",
}


def _bash_char(char: str) -> str:
    if char in BASH_SPECIAL_CHARS:
        return "\\" + char
    return _BASH_CONTROL.get(char, char)


def escape_bash(text: str) -> str:
    """Escape text for use as a single unquoted Bash word.

    Args:
        text: Arbitrary text (command, flag or enum value)

    Returns:
        The escaped word, e.g. "a b|c" -> "a\\ b\\|c"
    """
    return "".join(_bash_char(char) for char in text)


def escape_powershell(text: str) -> str:
    """Escape text for PowerShell.

    Single quotes are doubled, backslashes are doubled, and the characters
    ``$ ` " & | ; < > ( )`` get a backtick prefix. Control characters become
    their backtick escapes.

    Args:
        text: Arbitrary text

    Returns:
        The escaped text
    """
    parts: list[str] = []
    for char in text:
        if char in PWSH_SINGLE_QUOTES:
            parts.append(char * 2)
        else:
            parts.append(_PWSH_ESCAPES.get(char, char))
    return "".join(parts)


def quote_powershell(text: str) -> str:
    """Return text as a verbatim single-quoted PowerShell literal.

    Inside single quotes only quote characters are special, so they are
    doubled and everything else is kept as is.

    Args:
        text: Arbitrary text

    Returns:
        The quoted literal, e.g. "it's" -> "'it''s'"
    """
    return "'" + "".join(char * 2 if char in PWSH_SINGLE_QUOTES else char for char in text) + "'"
