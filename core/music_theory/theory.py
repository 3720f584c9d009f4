"""
core/music_theory/theory.py: Diatonic theory tables and rule-driven choices.

Tables are process-wide, read-only lookup data built once at import time.

Exports:
    DegreeInfo              per-numeral metadata (degree quality, types, function)
    DIATONIC_CHORDS         Quality -> numeral -> DegreeInfo
    PROGRESSION_RULES       Quality -> numeral -> permitted next numerals
    RELATED_KEY_OFFSETS     semitone offsets of relative/dominant/subdominant
    ANALYSIS_EXTRAS         degree quality -> extra chord types for analysis
    NUMERALS                ("1", ..., "7")

    degree_info(numeral, quality) -> DegreeInfo | None
    roman_numeral(numeral, quality) -> str
    related_keys(key, quality) -> tuple[Key, ...]
    random_chord_type(numeral, quality, choose) -> ChordType
    next_numeral(numeral, quality, choose) -> str

Randomness is always injected as a `choose` callable with the signature of
random.Random.choice, so callers decide seeding and thread ownership.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import TypeVar

from core.music_theory.pitch import preferred_name, require_index
from core.music_theory.types import ChordType, InvalidScaleDegree, Key, Quality

logger = logging.getLogger(__name__)

T = TypeVar("T")
ChooseFn = Callable[[Sequence[T]], T]

NUMERALS: tuple[str, ...] = ("1", "2", "3", "4", "5", "6", "7")

# Degree (triad) qualities
DEGREE_MAJOR = "Major"
DEGREE_MINOR = "Minor"
DEGREE_DIMINISHED = "Diminished"

# ---------------------------------------------------------------------------
# Per-degree metadata
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DegreeInfo:
    """Metadata of one scale degree in one key quality.

    Attributes:
        degree_quality: Quality of the diatonic triad: Major, Minor, Diminished
        chord_types:    Chord types the generator may pick, in table order
        function:       Harmonic function label
    """

    degree_quality: str
    chord_types: tuple[ChordType, ...]
    function: str

    def __post_init__(self) -> None:
        if not self.chord_types:
            raise ValueError("DegreeInfo.chord_types must not be empty")
        if not self.function:
            raise ValueError("DegreeInfo.function must not be empty")


_MAJOR_SHAPES = (ChordType.MAJOR, ChordType.MAJ7, ChordType.SIXTH)
_MINOR_SHAPES = (ChordType.MINOR, ChordType.M7)
_MINOR_COLOR_SHAPES = (
    ChordType.MINOR,
    ChordType.M7,
    ChordType.M6,
    ChordType.ADD9,
    ChordType.MADD9,
)
_DIMINISHED_SHAPES = (ChordType.DIMINISHED, ChordType.HALF_DIMINISHED)

DIATONIC_CHORDS: MappingProxyType[Quality, MappingProxyType[str, DegreeInfo]] = MappingProxyType(
    {
        Quality.MAJOR: MappingProxyType(
            {
                "1": DegreeInfo(DEGREE_MAJOR, _MAJOR_SHAPES, "Tonic"),
                "2": DegreeInfo(DEGREE_MINOR, _MINOR_SHAPES, "Subdominant"),
                "3": DegreeInfo(DEGREE_MINOR, _MINOR_SHAPES, "Mediant"),
                "4": DegreeInfo(DEGREE_MAJOR, _MAJOR_SHAPES, "Subdominant"),
                "5": DegreeInfo(
                    DEGREE_MAJOR, (ChordType.MAJOR, ChordType.DOMINANT_7), "Dominant"
                ),
                "6": DegreeInfo(DEGREE_MINOR, _MINOR_COLOR_SHAPES, "Tonic/Subdominant"),
                "7": DegreeInfo(DEGREE_DIMINISHED, _DIMINISHED_SHAPES, "Leading Tone"),
            }
        ),
        Quality.MINOR: MappingProxyType(
            {
                "1": DegreeInfo(DEGREE_MINOR, _MINOR_COLOR_SHAPES, "Tonic"),
                "2": DegreeInfo(DEGREE_DIMINISHED, _DIMINISHED_SHAPES, "Subdominant"),
                "3": DegreeInfo(DEGREE_MAJOR, _MAJOR_SHAPES, "Mediant"),
                "4": DegreeInfo(DEGREE_MINOR, _MINOR_SHAPES, "Subdominant"),
                "5": DegreeInfo(
                    DEGREE_MAJOR,
                    (ChordType.MAJOR, ChordType.DOMINANT_7, ChordType.DOMINANT_7SUS4),
                    "Dominant",
                ),
                "6": DegreeInfo(DEGREE_MAJOR, _MAJOR_SHAPES, "Submediant"),
                "7": DegreeInfo(DEGREE_DIMINISHED, _DIMINISHED_SHAPES, "Leading Tone"),
            }
        ),
    }
)

# ---------------------------------------------------------------------------
# Transition rules
# ---------------------------------------------------------------------------

PROGRESSION_RULES: MappingProxyType[Quality, MappingProxyType[str, tuple[str, ...]]] = (
    MappingProxyType(
        {
            Quality.MAJOR: MappingProxyType(
                {
                    "1": ("2", "3", "4", "5", "6"),
                    "2": ("5", "7"),
                    "3": ("6", "4"),
                    "4": ("2", "5", "7"),
                    "5": ("1", "6"),
                    "6": ("2", "4"),
                    "7": ("1", "3"),
                }
            ),
            Quality.MINOR: MappingProxyType(
                {
                    "1": ("4", "5", "6"),
                    "2": ("5", "7"),
                    "3": ("6", "4"),
                    "4": ("1", "5", "7"),
                    "5": ("1", "6"),
                    "6": ("2", "4"),
                    "7": ("1", "3"),
                }
            ),
        }
    )
)

# (offset, quality of the target key) in selection order
RELATED_KEY_OFFSETS: MappingProxyType[Quality, tuple[tuple[int, Quality], ...]] = (
    MappingProxyType(
        {
            # relative minor, dominant, subdominant
            Quality.MAJOR: ((9, Quality.MINOR), (7, Quality.MAJOR), (5, Quality.MAJOR)),
            # relative major, dominant, subdominant
            Quality.MINOR: ((3, Quality.MAJOR), (7, Quality.MINOR), (5, Quality.MINOR)),
        }
    )
)

ANALYSIS_EXTRAS: MappingProxyType[str, tuple[ChordType, ...]] = MappingProxyType(
    {
        DEGREE_MAJOR: (ChordType.SUS2, ChordType.SUS4, ChordType.ADD9, ChordType.SIXTH),
        DEGREE_MINOR: (
            ChordType.SUS2,
            ChordType.SUS4,
            ChordType.M6,
            ChordType.MADD9,
            ChordType.M7,
        ),
        DEGREE_DIMINISHED: (ChordType.HALF_DIMINISHED,),
    }
)

_ROMAN_BASE: tuple[str, ...] = ("I", "II", "III", "IV", "V", "VI", "VII")


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def _normalize_numeral(numeral: str | int) -> str:
    """Canonical table key of a numeral: 5, "5" and " 5 " all become "5"."""
    return str(numeral).strip()


def degree_index(numeral: str | int) -> int:
    """Return the 0-based degree of a numeral.

    Raises:
        InvalidScaleDegree: If numeral is not "1".."7".
    """
    text = _normalize_numeral(numeral)
    if text not in NUMERALS:
        raise InvalidScaleDegree(numeral)
    return int(text) - 1


def degree_info(numeral: str | int, quality: Quality | str) -> DegreeInfo | None:
    """Return the table entry for a numeral, or None if it has none."""
    return DIATONIC_CHORDS[Quality.parse(quality)].get(_normalize_numeral(numeral))


def roman_numeral(numeral: str, quality: Quality | str) -> str:
    """Roman numeral with case and '°' taken from the degree quality.

    Examples:
        >>> roman_numeral("5", "Major")
        'V'
        >>> roman_numeral("2", "Minor")
        'ii°'
    """
    label = _ROMAN_BASE[degree_index(numeral)]
    info = degree_info(numeral, quality)
    if info is None or info.degree_quality == DEGREE_MAJOR:
        return label
    if info.degree_quality == DEGREE_DIMINISHED:
        return f"{label.lower()}°"
    return label.lower()


def related_keys(key: str, quality: Quality | str) -> tuple[Key, ...]:
    """Return the relative, dominant and subdominant keys of a key.

    Major keys relate to their relative minor (+9) and to the major keys a
    fifth above (+7) and below (+5). Minor keys relate to their relative
    major (+3) and to the minor keys +7 and +5. Tonics are spelled with the
    preferred alias, so F Major's subdominant is "A#".

    Raises:
        UnknownNote: If key is not a recognised spelling.
    """
    root = require_index(key)
    return tuple(
        Key(tonic=preferred_name(root + offset), quality=target)
        for offset, target in RELATED_KEY_OFFSETS[Quality.parse(quality)]
    )


# ---------------------------------------------------------------------------
# Random choices
# ---------------------------------------------------------------------------


def random_chord_type(numeral: str, quality: Quality | str, choose: ChooseFn) -> ChordType:
    """Pick uniformly among the numeral's permitted chord types.

    Falls back to ChordType.MAJOR when the numeral has no table entry.
    """
    info = degree_info(numeral, quality)
    if info is None:
        logger.debug("No chord types for numeral %r in %s; using Major", numeral, quality)
        return ChordType.MAJOR
    return choose(info.chord_types)


def next_numeral(numeral: str, quality: Quality | str, choose: ChooseFn) -> str:
    """Pick the next numeral from the transition rules.

    A numeral without a rule entry draws uniformly from every numeral that
    has one, so a walk never dead-ends.
    """
    rules = PROGRESSION_RULES[Quality.parse(quality)]
    candidates = rules.get(_normalize_numeral(numeral))
    if not candidates:
        logger.debug("No progression rule for numeral %r; sampling all numerals", numeral)
        candidates = tuple(rules)
    return choose(candidates)
