"""
core/music_theory/analysis.py: Descriptive chord catalog per scale degree.

Nothing here influences generation. possibilities() lists every chord type
that is theoretically reasonable on a degree: the generator's own palette
first, then colour chords chosen by the degree's triad quality
(ANALYSIS_EXTRAS), deduplicated in first-seen order.

analyze_progression() applies the catalog to every step of a generated
progression, each in the key that was active when the step was emitted.
"""

from __future__ import annotations

from core.music_theory.chords import chord_notes, chord_symbol, root_note
from core.music_theory.theory import ANALYSIS_EXTRAS, degree_info
from core.music_theory.types import (
    AnalysisSection,
    ChordPossibility,
    ChordType,
    Progression,
    Quality,
)


def possibility_types(numeral: str, quality: Quality | str) -> tuple[ChordType, ...]:
    """Deduplicated chord types listed for a degree, empty if unknown."""
    info = degree_info(numeral, quality)
    if info is None:
        return ()
    extras = ANALYSIS_EXTRAS.get(info.degree_quality, ())
    return tuple(dict.fromkeys(info.chord_types + extras))


def possibilities(numeral: str, key: str, quality: Quality | str) -> tuple[ChordPossibility, ...]:
    """Spell every listed chord type on a degree.

    Args:
        numeral: Scale degree "1".."7"
        key:     Tonic spelling
        quality: Major or Minor

    Returns:
        Ordered ChordPossibility tuple; empty for a numeral with no entry.

    Raises:
        UnknownNote: If key is not a recognised spelling.

    Examples:
        >>> [p.label for p in possibilities("1", "C", "Major")]
        ['C', 'Cmaj7', 'C6', 'Csus2', 'Csus4', 'Cadd9']
    """
    types = possibility_types(numeral, quality)
    if not types:
        return ()
    root = root_note(numeral, key, quality)
    return tuple(
        ChordPossibility(
            label=chord_symbol(root, chord_type),
            chord_type=chord_type.label,
            notes=chord_notes(root, chord_type).spelled_notes,
        )
        for chord_type in types
    )


def analyze_progression(progression: Progression) -> tuple[AnalysisSection, ...]:
    """One AnalysisSection per step, in the step's own context."""
    sections: list[AnalysisSection] = []
    for step in progression:
        ctx = step.context
        info = degree_info(step.numeral, ctx.quality)
        sections.append(
            AnalysisSection(
                context=ctx,
                numeral=step.numeral,
                root=root_note(step.numeral, ctx.tonic, ctx.quality),
                degree_quality=info.degree_quality if info is not None else "",
                function=step.function,
                possibilities=possibilities(step.numeral, ctx.tonic, ctx.quality),
            )
        )
    return tuple(sections)
