"""
core/music_theory/voicing.py: Bass selection and single-octave inversion.

voice_chord() chooses, for each chord after the first, the bass that moves
least from the previous chord's root, then rotates the chord so that tone
sounds lowest.

Algorithm (greedy, one chord at a time):
    1. No previous chord: the root is the bass, the spelling is unchanged.
    2. Otherwise score the first MAX_BASS_CANDIDATES chord tones (root, 3rd,
       5th, 7th) by circular chromatic distance to the previous root:
       min(|d|, 12 - |d|).
    3. The lowest score wins; on a tie the earlier chord tone wins (stable
       scan, strict less-than).
    4. Rotate the spelling to start at the winner. Tones before it are
       appended after the tail; nothing is transposed, the chord stays
       inside one octave.

Voice leading is deliberately limited to the bass and a single octave; the
upper voices keep the chord's own order.
"""

from __future__ import annotations

from collections.abc import Sequence

from core.music_theory.pitch import circular_distance, strip_octave
from core.music_theory.types import ChordNotes, VoicedChord

MAX_BASS_CANDIDATES: int = 4


def best_bass_index(previous_root: int, pitch_classes: Sequence[int]) -> int:
    """Index of the chord tone closest to previous_root.

    Only the first MAX_BASS_CANDIDATES tones are considered. Ties keep the
    earlier index.

    Examples:
        >>> best_bass_index(0, (3, 9, 7, 2))
        3
        >>> best_bass_index(0, (3, 9, 6))
        0
    """
    best = 0
    best_movement: int | None = None
    for i, pc in enumerate(pitch_classes[:MAX_BASS_CANDIDATES]):
        movement = circular_distance(previous_root, pc)
        if best_movement is None or movement < best_movement:
            best = i
            best_movement = movement
    return best


def rotate(notes: Sequence[str], start: int) -> tuple[str, ...]:
    """Rotate notes so notes[start] comes first ('C E G', 1 -> 'E G C')."""
    return tuple(notes[start:]) + tuple(notes[:start])


def voice_chord(previous: ChordNotes | VoicedChord | None, current: ChordNotes) -> VoicedChord:
    """Choose the bass of current relative to previous and invert accordingly.

    Args:
        previous: Preceding chord, or None for the first chord of a sequence.
                  Only its root pitch class is used.
        current:  Chord to voice.

    Returns:
        VoicedChord with the bass name (octave suffix stripped), the rotated
        spelling and the bass movement in semitones.
    """
    prev_chord = previous.chord if isinstance(previous, VoicedChord) else previous
    if prev_chord is None or not prev_chord.pitch_classes:
        return VoicedChord(
            chord=current,
            bass=strip_octave(current.spelled_notes[0]),
            bass_index=0,
            voiced_notes=current.spelled_notes,
            movement=0,
        )

    previous_root = prev_chord.root_pitch_class
    index = best_bass_index(previous_root, current.pitch_classes)
    return VoicedChord(
        chord=current,
        bass=strip_octave(current.spelled_notes[index]),
        bass_index=index,
        voiced_notes=rotate(current.spelled_notes, index),
        movement=circular_distance(previous_root, current.pitch_classes[index]),
    )


def voice_sequence(chords: Sequence[ChordNotes]) -> tuple[VoicedChord, ...]:
    """Voice a whole chord sequence, each chord against its predecessor."""
    result: list[VoicedChord] = []
    previous: ChordNotes | None = None
    for chord in chords:
        result.append(voice_chord(previous, chord))
        previous = chord
    return tuple(result)


def total_bass_movement(voiced: Sequence[VoicedChord]) -> int:
    """Sum of bass movements across a voiced sequence."""
    return sum(v.movement for v in voiced)
