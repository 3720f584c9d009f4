"""
api/schemas/progression.py: Pydantic request/response schemas.

Covers:
    /generate/progression    ProgressionGenerateRequest / ProgressionGenerateResponse
    /analyze/possibilities   PossibilitiesResponse
    /analyze/keys            KeysResponse
"""

from pydantic import BaseModel, Field, field_validator

from core.music_theory.pitch import NOT_FOUND, chromatic_index
from core.music_theory.types import Quality

# ---------------------------------------------------------------------------
# Shared sub-schemas
# ---------------------------------------------------------------------------


class ContextOut(BaseModel):
    """Harmonic context active at a step."""

    key: str
    quality: Quality


class StepOut(BaseModel):
    """A single chord of a generated progression."""

    numeral: str
    roman: str
    func: str
    type: str
    root: str
    bass: str
    symbol: str
    notes: str = Field(..., description="Hyphen-joined voiced notes, bass first.")
    context: ContextOut
    context_label: str = ""


class ProgressionOut(BaseModel):
    """One generated example."""

    steps: list[StepOut]
    modulated: bool
    duration_sec: float = Field(..., gt=0.0)


class PossibilityOut(BaseModel):
    """One catalog entry of the analysis expander."""

    label: str
    type: str
    notes: str


class AnalysisSectionOut(BaseModel):
    """Analysis of one step in its own context."""

    header: str
    context: ContextOut
    numeral: str
    root: str
    degree_quality: str
    function: str
    possibilities: list[PossibilityOut]


def _validate_note(value: str) -> str:
    value = value.strip()
    if chromatic_index(value) == NOT_FOUND:
        raise ValueError(f"Unknown note {value!r}")
    return value


# ---------------------------------------------------------------------------
# /generate/progression
# ---------------------------------------------------------------------------


class ProgressionGenerateRequest(BaseModel):
    """Request body for POST /generate/progression."""

    key: str = Field(
        default="C",
        max_length=4,
        description="Tonic spelling, e.g. 'C', 'F#', 'Bb', 'C##'.",
    )
    quality: Quality = Field(default=Quality.MAJOR, description="'Major' or 'Minor'.")
    length: int = Field(default=4, ge=1, description="Number of chords.")
    enable_modulation: bool = Field(
        default=False,
        description="Modulate to a related key at the midpoint.",
    )
    deceptive_cadence: bool = Field(
        default=False,
        description="Resolve a penultimate V or vii to vi.",
    )
    examples: int = Field(default=1, ge=1, description="Independent progressions to return.")
    seed: int | None = Field(default=None, description="Seed for reproducible output.")
    include_analysis: bool = Field(
        default=False,
        description="Attach the chord-possibility analysis of the first example.",
    )

    @field_validator("key")
    @classmethod
    def key_must_be_known(cls, v: str) -> str:
        return _validate_note(v)

    @field_validator("quality", mode="before")
    @classmethod
    def quality_any_case(cls, v: object) -> Quality:
        return Quality.parse(v)


class ProgressionGenerateResponse(BaseModel):
    """Response body for POST /generate/progression."""

    key: str
    quality: Quality
    length: int
    examples: list[ProgressionOut]
    analysis: list[AnalysisSectionOut] | None = None


# ---------------------------------------------------------------------------
# /analyze
# ---------------------------------------------------------------------------


class PossibilitiesResponse(BaseModel):
    """Response body for GET /analyze/possibilities."""

    numeral: str
    key: str
    quality: Quality
    root: str
    function: str
    possibilities: list[PossibilityOut]


class KeysResponse(BaseModel):
    """Response body for GET /analyze/keys."""

    selectable_keys: list[str]
    key: str
    quality: Quality
    scale: list[str]
    related_keys: list[ContextOut]
