"""Common error types and exit codes."""

from enum import IntEnum

__all__ = ["CommandSpecError", "ExitCode", "QFlagError", "UnsupportedShellError"]


class QFlagError(Exception):
    """Base class for qflag errors."""


class UnsupportedShellError(QFlagError, ValueError):
    """Raised when a completion script is requested for an unknown shell."""

    def __init__(self, shell: str, supported: tuple[str, ...]) -> None:
        self.shell = shell
        self.supported = supported
        super().__init__(f"Unsupported shell: {shell!r}. Supported: {', '.join(supported)}")


class CommandSpecError(QFlagError, ValueError):
    """Raised when a declarative command description is malformed."""


class ExitCode(IntEnum):
    """Exit codes returned by built-in flag handlers."""

    SUCCESS = 0
    USAGE_ERROR = 1  # Unknown shell, invalid arguments
