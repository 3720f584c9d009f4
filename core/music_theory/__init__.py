"""
core/music_theory/: Pure diatonic progression engine.

Exports:
    Types:       Quality, ChordType, Key, ChordNotes, VoicedChord,
                 ProgressionRequest, ProgressionStep, Progression,
                 ChordPossibility, AnalysisSection
    Errors:      UnknownNote, InvalidScaleDegree
    Pitch:       chromatic_index, diatonic_scale, NOT_FOUND
    Chords:      root_note, chord_notes, chord_symbol
    Theory:      related_keys, PROGRESSION_RULES, DIATONIC_CHORDS
    Voicing:     voice_chord
    Progression: generate_progression, generate_examples
    Analysis:    possibilities, analyze_progression
"""

from core.music_theory.analysis import analyze_progression, possibilities
from core.music_theory.chords import chord_notes, chord_symbol, root_note
from core.music_theory.pitch import NOT_FOUND, chromatic_index, diatonic_scale
from core.music_theory.progression import generate_examples, generate_progression
from core.music_theory.theory import DIATONIC_CHORDS, PROGRESSION_RULES, related_keys
from core.music_theory.types import (
    AnalysisSection,
    ChordNotes,
    ChordPossibility,
    ChordType,
    InvalidScaleDegree,
    Key,
    Progression,
    ProgressionRequest,
    ProgressionStep,
    Quality,
    UnknownNote,
    VoicedChord,
)
from core.music_theory.voicing import voice_chord

__all__ = [
    # Types
    "Quality",
    "ChordType",
    "Key",
    "ChordNotes",
    "VoicedChord",
    "ProgressionRequest",
    "ProgressionStep",
    "Progression",
    "ChordPossibility",
    "AnalysisSection",
    # Errors
    "UnknownNote",
    "InvalidScaleDegree",
    # Pitch
    "NOT_FOUND",
    "chromatic_index",
    "diatonic_scale",
    # Chords
    "root_note",
    "chord_notes",
    "chord_symbol",
    # Theory
    "DIATONIC_CHORDS",
    "PROGRESSION_RULES",
    "related_keys",
    # Voicing
    "voice_chord",
    # Progression
    "generate_progression",
    "generate_examples",
    # Analysis
    "possibilities",
    "analyze_progression",
]
