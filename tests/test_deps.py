"""
Tests for api/deps.py: the generation config singleton.
"""

import api.deps as deps
from core.config import GenerationConfig


class TestGetConfig:
    def test_loaded_once_and_shared(self, monkeypatch):
        calls = []

        def fake_load_config():
            calls.append(1)
            return GenerationConfig()

        monkeypatch.setattr(deps, "_config", None)
        monkeypatch.setattr(deps, "load_config", fake_load_config)

        first = deps.get_config()
        assert deps.get_config() is first
        assert len(calls) == 1
