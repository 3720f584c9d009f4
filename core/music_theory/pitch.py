"""
core/music_theory/pitch.py: Pitch model. Note names, chromatic indices, scales.

The name -> index mapping is many-to-one (every enharmonic spelling, double
sharps and double flats included, collapses onto one pitch class). The
index -> name mapping is one-to-many and is resolved for display by always
taking alias #0 of INDEX_TO_NOTES.

Exports:
    NOT_FOUND            sentinel returned by chromatic_index for unknown names
    NOTE_TO_INDEX        spelling -> pitch class (read-only mapping)
    INDEX_TO_NOTES       pitch class -> ordered spelling aliases
    SCALE_INTERVALS      semitone pattern per Quality
    SELECTABLE_KEYS      tonic spellings offered to users

    chromatic_index(name) -> int
    preferred_name(pc) -> str
    diatonic_scale(key, quality) -> tuple[str, ...]
    circular_distance(a, b) -> int
    strip_octave(name) -> str
"""

from __future__ import annotations

import re
from types import MappingProxyType

from core.music_theory.types import Quality, UnknownNote

NOT_FOUND: int = -1

# ---------------------------------------------------------------------------
# Enharmonic tables
# ---------------------------------------------------------------------------

INDEX_TO_NOTES: tuple[tuple[str, ...], ...] = (
    ("C", "B#", "Dbb"),
    ("C#", "Db"),
    ("D", "C##", "Ebb"),
    ("D#", "Eb", "Fbb"),
    ("E", "Fb", "D##"),
    ("F", "E#", "Gbb"),
    ("F#", "Gb"),
    ("G", "F##", "Abb"),
    ("G#", "Ab"),
    ("A", "G##", "Bbb"),
    ("A#", "Bb", "Cbb"),
    ("B", "Cb", "A##"),
)

NOTE_TO_INDEX: MappingProxyType[str, int] = MappingProxyType(
    {alias: pc for pc, aliases in enumerate(INDEX_TO_NOTES) for alias in aliases}
)

SCALE_INTERVALS: MappingProxyType[Quality, tuple[int, ...]] = MappingProxyType(
    {
        Quality.MAJOR: (0, 2, 4, 5, 7, 9, 11),
        Quality.MINOR: (0, 2, 3, 5, 7, 8, 10),
    }
)

SELECTABLE_KEYS: tuple[str, ...] = (
    "C",
    "C#",
    "Db",
    "D",
    "Eb",
    "E",
    "F",
    "F#",
    "Gb",
    "G",
    "Ab",
    "A",
    "Bb",
    "B",
)

_OCTAVE_SUFFIX = re.compile(r"\d+$")


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def chromatic_index(name: str) -> int:
    """Return the pitch class (0-11) of a note spelling.

    Spellings are case-sensitive ("Bb", not "bb") and may use double
    accidentals ("C##", "Dbb").

    Returns:
        Pitch class, or NOT_FOUND (-1) if the spelling is unknown.
        Callers must check before using the result as an offset.

    Examples:
        >>> chromatic_index("Eb")
        3
        >>> chromatic_index("H")
        -1
    """
    return NOTE_TO_INDEX.get(name, NOT_FOUND)


def preferred_name(pc: int) -> str:
    """Return the display spelling (alias #0) of a pitch class.

    Any integer is accepted and reduced mod 12, so raw chord offsets such
    as root + 14 spell correctly.
    """
    return INDEX_TO_NOTES[pc % 12][0]


def require_index(name: str) -> int:
    """chromatic_index() for callers that cannot continue without a pitch class.

    Raises:
        UnknownNote: If the spelling is not in NOTE_TO_INDEX.
    """
    index = chromatic_index(name)
    if index == NOT_FOUND:
        raise UnknownNote(name)
    return index


def diatonic_scale(key: str, quality: Quality | str) -> tuple[str, ...]:
    """Return the 7 display spellings of a major or natural-minor scale.

    Element i is preferred_name(index(key) + interval[i]).

    Raises:
        UnknownNote: If key is not a recognised spelling.
        ValueError:  If quality is not Major/Minor.

    Examples:
        >>> diatonic_scale("C", "Major")
        ('C', 'D', 'E', 'F', 'G', 'A', 'B')
        >>> diatonic_scale("Eb", "Minor")
        ('D#', 'F', 'F#', 'G#', 'A#', 'B', 'C#')
    """
    root = require_index(key)
    intervals = SCALE_INTERVALS[Quality.parse(quality)]
    return tuple(preferred_name(root + interval) for interval in intervals)


def circular_distance(a: int, b: int) -> int:
    """Shortest chromatic distance between two pitch classes, 0..6."""
    diff = abs(a - b) % 12
    return min(diff, 12 - diff)


def strip_octave(name: str) -> str:
    """Drop a trailing octave number: 'C#4' -> 'C#'."""
    return _OCTAVE_SUFFIX.sub("", name)
