"""
Runtime configuration for progression generation.

GenerationConfig is an immutable config object shared by the API, the CLI
and the MIDI exporter. load_config() builds one from the environment
(after loading a local .env file, if present) so deployments can tune
limits without code changes.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from core.music_theory.pitch import NOT_FOUND, chromatic_index
from core.music_theory.types import Quality

# Environment variable names
ENV_DEFAULT_KEY = "PROGRESSION_DEFAULT_KEY"
ENV_DEFAULT_QUALITY = "PROGRESSION_DEFAULT_QUALITY"
ENV_DEFAULT_LENGTH = "PROGRESSION_DEFAULT_LENGTH"
ENV_MAX_LENGTH = "PROGRESSION_MAX_LENGTH"
ENV_MAX_EXAMPLES = "PROGRESSION_MAX_EXAMPLES"
ENV_CHORD_DURATION = "PROGRESSION_CHORD_DURATION"
ENV_BPM = "PROGRESSION_BPM"
ENV_SEED = "PROGRESSION_SEED"


@dataclass(frozen=True)
class GenerationConfig:
    """
    Configuration for progression generation and playback rendering.

    Attributes:
        default_key: Tonic used when a caller does not choose one.
        default_quality: "Major" or "Minor".
        default_length: Chord count used when a caller does not choose one.
        max_length: Upper bound on chords per progression.
        max_examples: Upper bound on progressions per request.
        chord_duration_sec: Fixed duration of each chord during playback.
        bpm: Tempo written into exported MIDI files.
        octave: Octave the bass of each exported chord is placed in.
        seed: Seed for reproducible generation; None draws fresh entropy.

    Example:
        >>> config = GenerationConfig(max_length=16, seed=42)
    """

    default_key: str = "C"
    default_quality: str = "Major"
    default_length: int = 4
    max_length: int = 32
    max_examples: int = 10
    chord_duration_sec: float = 1.5
    bpm: float = 120.0
    octave: int = 4
    seed: int | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if chromatic_index(self.default_key) == NOT_FOUND:
            raise ValueError(f"default_key {self.default_key!r} is not a known note")
        Quality.parse(self.default_quality)
        if self.max_length < 1:
            raise ValueError(f"max_length must be positive, got {self.max_length}")
        if not (1 <= self.default_length <= self.max_length):
            raise ValueError(
                f"default_length ({self.default_length}) must be in [1, {self.max_length}]"
            )
        if self.max_examples < 1:
            raise ValueError(f"max_examples must be positive, got {self.max_examples}")
        if self.chord_duration_sec <= 0:
            raise ValueError(
                f"chord_duration_sec must be positive, got {self.chord_duration_sec}"
            )
        if self.bpm <= 0:
            raise ValueError(f"bpm must be positive, got {self.bpm}")
        if not (0 <= self.octave <= 8):
            raise ValueError(f"octave must be in [0, 8], got {self.octave}")


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def load_config() -> GenerationConfig:
    """
    Build a GenerationConfig from .env and the process environment.

    Unset variables keep the GenerationConfig defaults.

    Raises:
        ValueError: If a variable is malformed or the result is invalid.
    """
    load_dotenv()
    base = DEFAULT_CONFIG
    return GenerationConfig(
        default_key=os.environ.get(ENV_DEFAULT_KEY, base.default_key).strip(),
        default_quality=os.environ.get(ENV_DEFAULT_QUALITY, base.default_quality).strip(),
        default_length=_env_int(ENV_DEFAULT_LENGTH, base.default_length),
        max_length=_env_int(ENV_MAX_LENGTH, base.max_length),
        max_examples=_env_int(ENV_MAX_EXAMPLES, base.max_examples),
        chord_duration_sec=_env_float(ENV_CHORD_DURATION, base.chord_duration_sec),
        bpm=_env_float(ENV_BPM, base.bpm),
        seed=_env_int(ENV_SEED, base.seed),
    )


DEFAULT_CONFIG = GenerationConfig()
"""Default configuration: C Major, 4 chords, 1.5 s per chord at 120 BPM."""
