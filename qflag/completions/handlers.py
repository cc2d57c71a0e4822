"""Entry points for shell completion generation.

Provides `generate` (script as a string), `gen_and_print` and the handler
behind the built-in ``--completion <shell>`` flag, plus the installation
notes shown by the help system.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, TextIO

from ..ansi import HelpStyles
from ..constants import COMPLETION_FLAG_NAME, SHELL_BASH, SHELL_POWERSHELL, SUPPORTED_SHELLS
from ..logging_setup import get_logger
from ..models import ExitCode, UnsupportedShellError
from .discovery import collect
from .generators import GENERATORS

if TYPE_CHECKING:
    from ..commands.models import CommandLike
    from .models import FuzzyConfig

__all__ = [
    "COMPLETION_NOTES",
    "completion_examples",
    "current_shell",
    "format_completion_help",
    "gen_and_print",
    "generate",
    "handle_completion_flag",
    "normalize_shell",
]

COMPLETION_NOTES = (
    "PowerShell: requires PowerShell 5.1 or newer (Register-ArgumentCompleter -Native)",
    "Bash: requires bash 4.2 or newer (associative arrays)",
    "Completion does not work on older shells; the script then loads without effect",
)


def current_shell() -> str:
    """Return the default shell of the running platform."""
    return SHELL_POWERSHELL if sys.platform == "win32" else SHELL_BASH


def normalize_shell(shell: str | None) -> str:
    """Canonical shell name: trimmed and lower-cased.

    Raises:
        UnsupportedShellError: if the shell is not supported
    """
    name = shell.strip().lower() if isinstance(shell, str) else ""
    if name not in GENERATORS:
        raise UnsupportedShellError(str(shell), SUPPORTED_SHELLS)
    return name


def _default_program_name() -> str:
    return os.path.basename(sys.argv[0]) or "qflag"


def generate(
    root: CommandLike | None,
    shell: str,
    *,
    program_name: str | None = None,
    config: FuzzyConfig | None = None,
) -> str:
    """Generate a completion script for a command tree.

    Args:
        root: The root command; None produces a script with no candidates
        shell: "bash", "pwsh" or "powershell" (case-insensitive)
        program_name: Name the script registers for, base name of sys.argv[0] by default
        config: Fuzzy matcher tunables, defaults when omitted

    Returns:
        The complete script text

    Raises:
        UnsupportedShellError: for any other shell name
    """
    name = normalize_shell(shell)
    program = program_name or _default_program_name()
    model = collect(root)
    script = GENERATORS[name](model, program, config)
    get_logger("qflag.completions").debug("Generated %s completion for %s (%d characters)", name, program, len(script))
    return script


def gen_and_print(
    root: CommandLike | None,
    shell: str,
    *,
    program_name: str | None = None,
    config: FuzzyConfig | None = None,
    stream: TextIO | None = None,
) -> None:
    """Generate a completion script and write it to `stream` (stdout by default)."""
    out = stream or sys.stdout
    out.write(generate(root, shell, program_name=program_name, config=config))
    out.flush()


def handle_completion_flag(
    root: CommandLike | None,
    shell: str | None = None,
    stream: TextIO | None = None,
    *,
    program_name: str | None = None,
) -> ExitCode:
    """Handle the built-in completion flag.

    Args:
        root: The root command
        shell: Requested shell, the platform default when empty
        stream: Output stream for the script
        program_name: Name the script registers for

    Returns:
        ExitCode.SUCCESS once the script is written, ExitCode.USAGE_ERROR for an unknown shell
    """
    try:
        gen_and_print(root, shell or current_shell(), program_name=program_name, stream=stream)
    except UnsupportedShellError as e:
        get_logger("qflag").error("--%s: %s", COMPLETION_FLAG_NAME, e)
        return ExitCode.USAGE_ERROR
    return ExitCode.SUCCESS


def completion_examples(program: str) -> list[tuple[str, str]]:
    """Installation examples for a program.

    Returns:
        (description, command line) pairs
    """
    flag = f"--{COMPLETION_FLAG_NAME}"
    return [
        ("Bash, current session", f"source <({program} {flag} bash)"),
        ("Bash, permanently (append to ~/.bashrc)", f"echo 'source <({program} {flag} bash)' >> ~/.bashrc"),
        ("PowerShell, current session", f"{program} {flag} pwsh | Out-String | Invoke-Expression"),
        (
            "PowerShell, permanently (append to $PROFILE)",
            f"Add-Content $PROFILE '{program} {flag} pwsh | Out-String | Invoke-Expression'",
        ),
    ]


def format_completion_help(program: str, stream: TextIO | None = None) -> str:
    """Render the examples and notes as help text, colored when `stream` is a terminal."""
    styles = HelpStyles.for_stream(stream)
    lines = [styles.heading("Shell completion:")]
    for description, usage in completion_examples(program):
        lines.append(f"  {description}:")
        lines.append(f"    {styles.usage(usage)}")
    lines.append(styles.heading("Notes:"))
    lines.extend(f"  - {styles.note(note)}" for note in COMPLETION_NOTES)
    return "\n".join(lines) + "\n"
