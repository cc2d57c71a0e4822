"""Shared helpers."""

import re

__all__ = ["render_template", "sanitize_identifier"]

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")
_NON_IDENTIFIER = re.compile(r"[^A-Za-z0-9_]")


def render_template(template: str, variables: dict[str, str]) -> str:
    """Replace {{name}} placeholders with content from supplied variables.

    Unknown placeholders are left untouched. Substituted values are never
    scanned again, so a value containing "{{x}}" is emitted verbatim.

    Args:
        template: the string template
        variables: a dict containing the variables to replace
    """

    def replace(match: re.Match[str]) -> str:
        return variables.get(match.group(1), match.group(0))

    return _PLACEHOLDER.sub(replace, template)


def sanitize_identifier(name: str) -> str:
    """Turn an arbitrary program name into a shell-safe identifier.

    "my-tool.exe" -> "my_tool_exe". A leading digit gets an underscore prefix.
    """
    ident = _NON_IDENTIFIER.sub("_", name) or "_"
    if ident[0].isdigit():
        ident = "_" + ident
    return ident
