"""
core/music_theory/chords.py: Chord builder. Roots, spellings and symbols.

Chord types are resolved through the closed ChordType enum. A label that is
not a member is tolerated on purpose: it is spelled with the Major shape and
rendered as "root(label)", never rejected.

Exports:
    DEFAULT_OFFSETS                         shape used for unknown chord types
    root_note(numeral, key, quality) -> str
    resolve_chord_type(chord_type) -> ChordType | None
    chord_offsets(chord_type) -> tuple[int, ...]
    chord_notes(root, chord_type) -> ChordNotes
    chord_symbol(root, chord_type) -> str
"""

from __future__ import annotations

import logging

from core.music_theory.pitch import diatonic_scale, preferred_name, require_index
from core.music_theory.theory import degree_index
from core.music_theory.types import ChordNotes, ChordType, Quality

logger = logging.getLogger(__name__)

DEFAULT_OFFSETS: tuple[int, ...] = ChordType.MAJOR.offsets


def root_note(numeral: str | int, key: str, quality: Quality | str) -> str:
    """Return the root spelling of a diatonic degree.

    Args:
        numeral: Scale degree "1".."7"
        key:     Tonic spelling
        quality: Major or Minor

    Raises:
        InvalidScaleDegree: If numeral is outside 1..7.
        UnknownNote:        If key is not a recognised spelling.

    Examples:
        >>> root_note("5", "C", "Major")
        'G'
        >>> root_note("3", "A", "Minor")
        'C'
    """
    return diatonic_scale(key, quality)[degree_index(numeral)]


def resolve_chord_type(chord_type: ChordType | str) -> ChordType | None:
    """Return the enum member for a member or label, None if unknown."""
    if isinstance(chord_type, ChordType):
        return chord_type
    return ChordType.from_label(chord_type)


def chord_offsets(chord_type: ChordType | str) -> tuple[int, ...]:
    """Semitone offsets of a chord type, DEFAULT_OFFSETS for unknown labels."""
    resolved = resolve_chord_type(chord_type)
    if resolved is None:
        logger.debug("Unknown chord type %r; using Major shape", chord_type)
        return DEFAULT_OFFSETS
    return resolved.offsets


def chord_notes(root: str, chord_type: ChordType | str) -> ChordNotes:
    """Spell a chord from its root and type.

    Offsets are kept raw (add9 keeps 14) while pitch classes and spellings
    wrap mod 12.

    Raises:
        UnknownNote: If root is not a recognised spelling.

    Examples:
        >>> chord_notes("A", "m7").spelled_notes
        ('A', 'C', 'E', 'G')
        >>> chord_notes("C", "add9").pitch_classes
        (0, 4, 7, 2)
    """
    root_idx = require_index(root)
    offsets = chord_offsets(chord_type)
    resolved = resolve_chord_type(chord_type)
    label = resolved.label if resolved is not None else str(chord_type)
    return ChordNotes(
        root=root,
        chord_type=label,
        offsets=offsets,
        pitch_classes=tuple((root_idx + semi) % 12 for semi in offsets),
        spelled_notes=tuple(preferred_name(root_idx + semi) for semi in offsets),
    )


def chord_symbol(root: str, chord_type: ChordType | str) -> str:
    """Chord shorthand such as 'Am7', 'Bm7b5', 'G7sus4'.

    Unknown chord types render as 'root(type)', e.g. 'C(m11)'.
    """
    resolved = resolve_chord_type(chord_type)
    if resolved is None:
        return f"{root}({chord_type})"
    return f"{root}{resolved.suffix}"
