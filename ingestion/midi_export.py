"""
ingestion/midi_export.py: Write generated progressions to MIDI files with mido.

This is the file-output boundary of the engine. It does not synthesize or
schedule audio; it only renders the same data the playback collaborator
consumes (each step's notes, one fixed duration per chord) into a
Standard MIDI File that any DAW can open.

MIDI structure:
    Type 1, Track 0 = tempo + time signature, Track 1 = chords (channel 0)

Pitch placement:
    A step's voiced notes start at the bass chosen by the voice-leading
    engine. The bass is placed in the configured octave and every following
    tone is the nearest pitch strictly above the previous one, so the
    inversion survives the export.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import mido

from core.music_theory.pitch import require_index, strip_octave
from core.music_theory.types import Progression, ProgressionStep

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_TICKS_PER_BEAT: int = 480
"""Standard MIDI ticks per quarter note."""

MIDI_CHANNEL: int = 0
DEFAULT_VELOCITY: int = 80
DEFAULT_CHORD_DURATION_SEC: float = 1.5
DEFAULT_OCTAVE: int = 4


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------


def _sec_to_ticks(seconds: float, bpm: float, ticks_per_beat: int) -> int:
    """Convert seconds to MIDI ticks: seconds x (BPM / 60) x ticks_per_beat."""
    if seconds < 0:
        return 0
    return max(0, round(seconds * (bpm / 60.0) * ticks_per_beat))


def _bpm_to_tempo_us(bpm: float) -> int:
    """Convert BPM to MIDI tempo (microseconds per quarter note)."""
    if bpm <= 0:
        bpm = 120.0
    return max(1, round(60_000_000.0 / bpm))


def step_to_midi_pitches(notes: Sequence[str], octave: int = DEFAULT_OCTAVE) -> tuple[int, ...]:
    """Place voiced note names as ascending MIDI pitches.

    Args:
        notes:  Note names, bass first, e.g. ("E", "G", "C"). Octave
                suffixes are ignored.
        octave: Octave of the bass (4 puts C at 60).

    Returns:
        Strictly ascending MIDI pitches, clamped to [0, 127].

    Raises:
        UnknownNote: If a note name is not a recognised spelling.

    Examples:
        >>> step_to_midi_pitches(("E", "G", "C"))
        (64, 67, 72)
    """
    pitches: list[int] = []
    for name in notes:
        pc = require_index(strip_octave(name))
        if not pitches:
            pitch = (octave + 1) * 12 + pc
        else:
            prev = pitches[-1]
            pitch = prev + ((pc - prev) % 12 or 12)
        pitches.append(pitch)
    return tuple(min(max(p, 0), 127) for p in pitches)


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def progression_to_midi(
    progression: Progression | Sequence[ProgressionStep],
    *,
    bpm: float = 120.0,
    chord_duration_sec: float = DEFAULT_CHORD_DURATION_SEC,
    octave: int = DEFAULT_OCTAVE,
    velocity: int = DEFAULT_VELOCITY,
    output_path: str | Path | None = None,
    ticks_per_beat: int = DEFAULT_TICKS_PER_BEAT,
) -> mido.MidiFile:
    """Render one block chord per step, each held for chord_duration_sec.

    Args:
        progression: Generated progression (or its steps). Must not be empty.
        bpm: Tempo written to the file.
        chord_duration_sec: Length of every chord.
        octave: Octave of each chord's bass.
        velocity: Note-on velocity, clamped to [1, 127].
        output_path: If provided, the file is saved there. The parent
                     directory must exist.
        ticks_per_beat: MIDI resolution.

    Returns:
        mido.MidiFile object.

    Raises:
        ValueError: If progression is empty or chord_duration_sec <= 0.
        OSError: If output_path is not writable.
    """
    steps = tuple(progression)
    if not steps:
        raise ValueError("progression must not be empty")
    if chord_duration_sec <= 0:
        raise ValueError(f"chord_duration_sec must be > 0, got {chord_duration_sec}")

    midi = mido.MidiFile(type=1, ticks_per_beat=ticks_per_beat)

    meta_track = mido.MidiTrack()
    midi.tracks.append(meta_track)
    meta_track.append(mido.MetaMessage("set_tempo", tempo=_bpm_to_tempo_us(bpm), time=0))
    meta_track.append(
        mido.MetaMessage(
            "time_signature",
            numerator=4,
            denominator=4,
            clocks_per_click=24,
            notated_32nd_notes_per_beat=8,
            time=0,
        )
    )
    meta_track.append(mido.MetaMessage("end_of_track", time=0))

    chord_track = mido.MidiTrack()
    midi.tracks.append(chord_track)
    chord_track.append(mido.MetaMessage("track_name", name="Chords", time=0))

    chord_ticks = max(1, _sec_to_ticks(chord_duration_sec, bpm, ticks_per_beat))
    vel = max(1, min(127, velocity))

    for step in steps:
        pitches = step_to_midi_pitches(step.notes, octave)
        for pitch in pitches:
            chord_track.append(
                mido.Message("note_on", note=pitch, velocity=vel, channel=MIDI_CHANNEL, time=0)
            )
        for i, pitch in enumerate(pitches):
            chord_track.append(
                mido.Message(
                    "note_off",
                    note=pitch,
                    velocity=0,
                    channel=MIDI_CHANNEL,
                    time=chord_ticks if i == 0 else 0,
                )
            )

    chord_track.append(mido.MetaMessage("end_of_track", time=0))

    if output_path is not None:
        midi.save(str(output_path))

    return midi
