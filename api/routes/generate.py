"""
api/routes/generate.py: Progression generation endpoint.

Endpoints:
    POST /generate/progression : one or more rule-based progressions

Pure theory computation. Every request builds its own seeded chooser, so
concurrent requests share no mutable state.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_config
from api.schemas.progression import (
    AnalysisSectionOut,
    ContextOut,
    PossibilityOut,
    ProgressionGenerateRequest,
    ProgressionGenerateResponse,
    ProgressionOut,
    StepOut,
)
from core.config import GenerationConfig
from core.music_theory.analysis import analyze_progression
from core.music_theory.progression import generate_examples
from core.music_theory.types import (
    AnalysisSection,
    Key,
    Progression,
    ProgressionRequest,
    UnknownNote,
)
from infrastructure.metrics import LatencyTimer, record_generation, record_generation_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/generate", tags=["generate"])


def _context_out(key: Key) -> ContextOut:
    return ContextOut(key=key.tonic, quality=key.quality)


def _progression_out(progression: Progression, chord_duration_sec: float) -> ProgressionOut:
    steps = [
        StepOut(
            numeral=s.numeral,
            roman=s.roman,
            func=s.function,
            type=s.chord_type,
            root=s.root,
            bass=s.bass,
            symbol=s.symbol,
            notes=s.note_string,
            context=_context_out(s.context),
            context_label=progression.context_label(i),
        )
        for i, s in enumerate(progression)
    ]
    return ProgressionOut(
        steps=steps,
        modulated=progression.modulated,
        duration_sec=progression.duration_sec(chord_duration_sec),
    )


def _section_out(section: AnalysisSection) -> AnalysisSectionOut:
    return AnalysisSectionOut(
        header=section.header,
        context=_context_out(section.context),
        numeral=section.numeral,
        root=section.root,
        degree_quality=section.degree_quality,
        function=section.function,
        possibilities=[
            PossibilityOut(label=p.label, type=p.chord_type, notes=p.note_string)
            for p in section.possibilities
        ],
    )


# ---------------------------------------------------------------------------
# POST /generate/progression
# ---------------------------------------------------------------------------


@router.post("/progression", response_model=ProgressionGenerateResponse)
def generate_progression_endpoint(
    request: ProgressionGenerateRequest,
    config: GenerationConfig = Depends(get_config),  # noqa: B008
) -> ProgressionGenerateResponse:
    """Generate diatonic chord progressions.

    Args:
        request: Key, quality, length, modulation/deceptive flags, example
            count, optional seed and analysis flag.
        config: Limits and playback duration.

    Returns:
        ProgressionGenerateResponse with every example and, on request, the
        per-step analysis of the first example.

    Raises:
        422: Unknown key, or length/examples above the configured limits.
    """
    if request.length > config.max_length:
        record_generation_error("length_limit")
        logger.warning("Rejected length %d (max %d)", request.length, config.max_length)
        raise HTTPException(
            status_code=422,
            detail=f"length must be <= {config.max_length}, got {request.length}",
        )
    if request.examples > config.max_examples:
        record_generation_error("examples_limit")
        logger.warning("Rejected examples %d (max %d)", request.examples, config.max_examples)
        raise HTTPException(
            status_code=422,
            detail=f"examples must be <= {config.max_examples}, got {request.examples}",
        )

    try:
        engine_request = ProgressionRequest(
            key=request.key,
            quality=request.quality,
            length=request.length,
            enable_modulation=request.enable_modulation,
            deceptive_cadence=request.deceptive_cadence,
        )
    except UnknownNote as exc:
        record_generation_error("unknown_note")
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ValueError as exc:
        record_generation_error("invalid_request")
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    seed = request.seed if request.seed is not None else config.seed
    with LatencyTimer() as timer:
        progressions = generate_examples(engine_request, request.examples, seed=seed)
    record_generation(progressions, latency_seconds=timer.elapsed)

    logger.info(
        "Generated %d x %d chords in %s %s (modulation=%s, deceptive=%s)",
        request.examples,
        request.length,
        request.key,
        request.quality.value,
        request.enable_modulation,
        request.deceptive_cadence,
    )

    analysis = None
    if request.include_analysis:
        analysis = [_section_out(s) for s in analyze_progression(progressions[0])]

    return ProgressionGenerateResponse(
        key=request.key,
        quality=request.quality,
        length=request.length,
        examples=[_progression_out(p, config.chord_duration_sec) for p in progressions],
        analysis=analysis,
    )
