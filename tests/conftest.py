"""
Shared fixtures for the test suite.

Centralizes deterministic choosers and the API client so individual test
files don't repeat setup boilerplate.
"""

from collections.abc import Callable, Iterable, Sequence

import pytest
from fastapi.testclient import TestClient

from api.deps import get_config
from api.main import app
from core.config import GenerationConfig

# ---------------------------------------------------------------------------
# Deterministic choosers
# ---------------------------------------------------------------------------


def first_choice(options: Sequence):
    """Chooser that always takes the first option."""
    return options[0]


def last_choice(options: Sequence):
    """Chooser that always takes the last option."""
    return options[-1]


class ScriptedChooser:
    """Chooser that replays a script of picks.

    Each entry is either an index into the options or a value that must be
    one of the options. Once the script is exhausted it falls back to the
    first option. ``calls`` records every options tuple it was offered.
    """

    def __init__(self, script: Iterable[object] = ()) -> None:
        self._script = list(script)
        self.calls: list[tuple] = []

    def __call__(self, options: Sequence):
        self.calls.append(tuple(options))
        if not self._script:
            return options[0]
        pick = self._script.pop(0)
        if isinstance(pick, int) and not isinstance(pick, bool):
            return options[pick]
        assert pick in options, f"{pick!r} not in {options!r}"
        return pick


@pytest.fixture()
def scripted() -> Callable[..., ScriptedChooser]:
    """Factory fixture: ``scripted(["Major", "5", ...])``."""

    def _make(script: Iterable[object] = ()) -> ScriptedChooser:
        return ScriptedChooser(script)

    return _make


# ---------------------------------------------------------------------------
# FastAPI test client fixture
# ---------------------------------------------------------------------------

TEST_CONFIG = GenerationConfig(max_length=16, max_examples=4, chord_duration_sec=1.5)


@pytest.fixture()
def api_client():
    """FastAPI ``TestClient`` with the generation config pinned to TEST_CONFIG."""
    app.dependency_overrides[get_config] = lambda: TEST_CONFIG
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
