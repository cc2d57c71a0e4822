"""Shared constants for qflag."""

__all__ = [
    "COMPLETION_FLAG_NAME",
    "FUZZY_CACHE_MAX_SIZE",
    "FUZZY_COMPLETION_ENABLED",
    "FUZZY_MAX_CANDIDATES",
    "FUZZY_MAX_RESULTS",
    "FUZZY_MIN_PATTERN_LENGTH",
    "FUZZY_SCORE_THRESHOLD",
    "POOL_INITIAL_BUILDERS",
    "POOL_MAX_BUILDER_SIZE",
    "SHELL_BASH",
    "SHELL_POWERSHELL",
    "SHELL_PWSH",
    "SUPPORTED_SHELLS",
]

# Supported shells for completion generation
SHELL_BASH = "bash"
SHELL_PWSH = "pwsh"
SHELL_POWERSHELL = "powershell"
SUPPORTED_SHELLS = (SHELL_BASH, SHELL_PWSH, SHELL_POWERSHELL)

# Built-in flag asking a program to print its completion script
COMPLETION_FLAG_NAME = "completion"

# Fuzzy matcher tunables, baked into every emitted script
FUZZY_COMPLETION_ENABLED = True
FUZZY_MAX_CANDIDATES = 120  # above this, only case-sensitive prefix matching
FUZZY_MIN_PATTERN_LENGTH = 2
FUZZY_SCORE_THRESHOLD = 25  # 0-100
FUZZY_MAX_RESULTS = 10
FUZZY_CACHE_MAX_SIZE = 500

# String builder pool
POOL_INITIAL_BUILDERS = 4
POOL_MAX_BUILDER_SIZE = 8192  # characters; larger builders are dropped
