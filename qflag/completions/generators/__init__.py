"""Shell completion generators.

Provides generator functions for each supported shell.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...constants import SHELL_BASH, SHELL_POWERSHELL, SHELL_PWSH
from .bash import generate_bash
from .powershell import generate_powershell

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..models import CommandModel, FuzzyConfig

__all__ = ["GENERATORS", "generate_bash", "generate_powershell"]

GENERATORS: dict[str, Callable[[CommandModel, str, FuzzyConfig | None], str]] = {
    SHELL_BASH: generate_bash,
    SHELL_PWSH: generate_powershell,
    SHELL_POWERSHELL: generate_powershell,
}
