" generic fixtures "
import pytest

from qflag.commands.models import Command
from qflag.commands.tree import build_command
from qflag.completions.discovery import collect
from qflag.completions.models import CommandModel

SAMPLE_TREE = {
    "name": "prog",
    "flags": [
        {"name": "mode", "short": "m", "type": "enum", "values": ["dev", "prod", "staging"]},
        {"name": "verbose", "short": "v", "type": "bool"},
        {"name": "output", "short": "o", "type": "path"},
    ],
    "commands": [
        {
            "name": "start",
            "short": "s",
            "flags": [
                {"name": "force", "type": "bool"},
                {"name": "level", "type": "enum", "values": ["low", "high"]},
            ],
            "commands": [{"name": "now"}],
        },
        {"name": "stop"},
    ],
}


def pytest_configure():
    "Runs once before all"
    from qflag.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


@pytest.fixture
def sample_root() -> Command:
    "The sample command tree"
    return build_command(SAMPLE_TREE)


@pytest.fixture
def sample_model(sample_root) -> CommandModel:
    "The collected model of the sample tree"
    return collect(sample_root)
