"""
api/routes/analyze.py: Descriptive theory lookups.

Endpoints:
    GET /analyze/possibilities : chord catalog of one degree in one key
    GET /analyze/keys          : selectable keys, scale and related keys

Independent of any generated progression.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query

from api.schemas.progression import (
    ContextOut,
    KeysResponse,
    PossibilitiesResponse,
    PossibilityOut,
)
from core.music_theory.analysis import possibilities
from core.music_theory.chords import root_note
from core.music_theory.pitch import SELECTABLE_KEYS, diatonic_scale
from core.music_theory.theory import degree_info, related_keys
from core.music_theory.types import InvalidScaleDegree, Quality, UnknownNote

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyze", tags=["analyze"])


def _parse_quality(value: str) -> Quality:
    """Quality.parse for query strings: any letter case, 422 otherwise."""
    try:
        return Quality.parse(value)
    except ValueError as exc:
        logger.warning("Rejected quality %r", value)
        raise HTTPException(status_code=422, detail=str(exc)) from exc


# ---------------------------------------------------------------------------
# GET /analyze/possibilities
# ---------------------------------------------------------------------------


@router.get("/possibilities", response_model=PossibilitiesResponse)
def analyze_possibilities(
    numeral: str = Query(..., description="Scale degree '1'..'7'."),
    key: str = Query("C", description="Tonic spelling."),
    quality: str = Query("Major", description="'Major' or 'Minor', any letter case."),
) -> PossibilitiesResponse:
    """List every theoretically valid chord on a scale degree.

    Raises:
        422: Unknown key, unknown quality or numeral outside 1..7.
    """
    key_quality = _parse_quality(quality)
    numeral = numeral.strip()
    try:
        root = root_note(numeral, key, key_quality)
    except (InvalidScaleDegree, UnknownNote) as exc:
        logger.warning("Rejected possibilities query: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    info = degree_info(numeral, key_quality)
    options = possibilities(numeral, key, key_quality)
    return PossibilitiesResponse(
        numeral=numeral,
        key=key,
        quality=key_quality,
        root=root,
        function=info.function if info is not None else "",
        possibilities=[
            PossibilityOut(label=p.label, type=p.chord_type, notes=p.note_string) for p in options
        ],
    )


# ---------------------------------------------------------------------------
# GET /analyze/keys
# ---------------------------------------------------------------------------


@router.get("/keys", response_model=KeysResponse)
def analyze_keys(
    key: str = Query("C", description="Tonic spelling."),
    quality: str = Query("Major", description="'Major' or 'Minor', any letter case."),
) -> KeysResponse:
    """Return the selectable keys plus the scale and related keys of one key.

    Raises:
        422: Unknown key or quality.
    """
    key_quality = _parse_quality(quality)
    try:
        scale = diatonic_scale(key, key_quality)
        related = related_keys(key, key_quality)
    except UnknownNote as exc:
        logger.warning("Rejected keys query: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return KeysResponse(
        selectable_keys=list(SELECTABLE_KEYS),
        key=key,
        quality=key_quality,
        scale=list(scale),
        related_keys=[ContextOut(key=k.tonic, quality=k.quality) for k in related],
    )
