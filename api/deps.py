"""
FastAPI dependency providers.

The generation config is read from the environment once and reused across
requests. Tests override ``get_config`` through ``app.dependency_overrides``.
"""

from core.config import GenerationConfig, load_config

_config: GenerationConfig | None = None


def get_config() -> GenerationConfig:
    """
    Return a cached ``GenerationConfig`` singleton.

    Built on first call from ``.env`` and the process environment; the
    config is frozen, so sharing it between requests is safe.
    """
    global _config  # noqa: PLW0603
    if _config is None:
        _config = load_config()
    return _config
