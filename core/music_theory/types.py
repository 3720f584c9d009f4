"""
core/music_theory/types.py: Value objects for the diatonic progression engine.

All records are frozen dataclasses (or enums) so they are hashable and can be
shared freely between threads. No I/O, no side effects, stdlib only.

Types:
    Quality            Major | Minor key quality
    ChordType          closed set of chord shapes (offsets + symbol suffix)
    Key                tonic spelling + quality
    ChordNotes         a chord built from a root and a chord type
    VoicedChord        ChordNotes plus the chosen bass and its rotation
    ProgressionRequest validated input of one generation request
    ProgressionStep    one emitted chord of a progression
    Progression        ordered, immutable sequence of steps
    ChordPossibility   one catalog entry of the analysis expander
    AnalysisSection    per-step analysis block (context + possibilities)

Errors:
    UnknownNote         note spelling not present in the enharmonic table
    InvalidScaleDegree  numeral outside "1".."7"
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class UnknownNote(ValueError):
    """Raised when a note name is not a recognised spelling."""

    def __init__(self, note: str) -> None:
        super().__init__(f"Unknown note {note!r}")
        self.note = note


class InvalidScaleDegree(ValueError):
    """Raised when a numeral does not name a diatonic degree 1-7."""

    def __init__(self, numeral: object) -> None:
        super().__init__(f"Invalid scale degree {numeral!r}; expected '1'..'7'")
        self.numeral = numeral


# ---------------------------------------------------------------------------
# Quality
# ---------------------------------------------------------------------------


class Quality(str, Enum):
    """Key quality. The value is the display string used on the wire."""

    MAJOR = "Major"
    MINOR = "Minor"

    @classmethod
    def parse(cls, value: str | Quality) -> Quality:
        """Return the Quality for 'Major'/'Minor' (case-insensitive).

        Raises:
            ValueError: If value is neither quality.
        """
        if isinstance(value, Quality):
            return value
        normalized = str(value).strip().capitalize()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unknown quality {value!r}. Valid: ['Major', 'Minor']")

    @property
    def short_label(self) -> str:
        """'Maj' or 'min', as shown next to a modulated chord."""
        return "Maj" if self is Quality.MAJOR else "min"


# ---------------------------------------------------------------------------
# ChordType
# ---------------------------------------------------------------------------


class ChordType(Enum):
    """Closed set of chord shapes.

    Each member carries its display label, its semitone offsets from the root
    (not reduced mod 12, add9 reaches 14) and its chord-symbol suffix.
    """

    MAJOR = ("Major", (0, 4, 7), "")
    MINOR = ("Minor", (0, 3, 7), "m")
    MAJ7 = ("Maj7", (0, 4, 7, 11), "maj7")
    M7 = ("m7", (0, 3, 7, 10), "m7")
    DOMINANT_7 = ("Dominant 7", (0, 4, 7, 10), "7")
    DIMINISHED = ("Diminished", (0, 3, 6), "dim")
    HALF_DIMINISHED = ("Half-Diminished", (0, 3, 6, 10), "m7b5")
    SUS2 = ("sus2", (0, 2, 7), "sus2")
    SUS4 = ("sus4", (0, 5, 7), "sus4")
    ADD9 = ("add9", (0, 4, 7, 14), "add9")
    MADD9 = ("madd9", (0, 3, 7, 14), "madd9")
    SIXTH = ("6", (0, 4, 7, 9), "6")
    M6 = ("m6", (0, 3, 7, 9), "m6")
    DOMINANT_7SUS4 = ("Dominant 7sus4", (0, 5, 7, 10), "7sus4")

    def __init__(self, label: str, offsets: tuple[int, ...], suffix: str) -> None:
        self.label = label
        self.offsets = offsets
        self.suffix = suffix

    @classmethod
    def from_label(cls, label: str) -> ChordType | None:
        """Return the member whose label matches exactly, or None."""
        return _CHORD_TYPES_BY_LABEL.get(label)

    def __str__(self) -> str:
        return self.label


_CHORD_TYPES_BY_LABEL: dict[str, ChordType] = {ct.label: ct for ct in ChordType}


# ---------------------------------------------------------------------------
# Key
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Key:
    """A harmonic context: tonic spelling plus quality.

    Attributes:
        tonic:   Note spelling of the tonic, e.g. "C", "F#", "Bb"
        quality: Quality.MAJOR or Quality.MINOR
    """

    tonic: str
    quality: Quality

    def __post_init__(self) -> None:
        if not self.tonic:
            raise ValueError("Key.tonic must not be empty")
        if not isinstance(self.quality, Quality):
            object.__setattr__(self, "quality", Quality.parse(self.quality))

    @property
    def label(self) -> str:
        """Human-readable label, e.g. 'A Minor'."""
        return f"{self.tonic} {self.quality.value}"

    def to_dict(self) -> dict[str, str]:
        return {"key": self.tonic, "quality": self.quality.value}


# ---------------------------------------------------------------------------
# Chords
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChordNotes:
    """A chord spelled from a root and a chord type.

    Attributes:
        root:          Root spelling as given, e.g. "A"
        chord_type:    Chord-type label, e.g. "m7" (free text; unknown labels
                       are kept verbatim and spelled with the Major shape)
        offsets:       Raw semitone offsets from the root (may exceed 11)
        pitch_classes: (root index + offset) mod 12, in offset order
        spelled_notes: Preferred spelling of each pitch class, in offset order
    """

    root: str
    chord_type: str
    offsets: tuple[int, ...]
    pitch_classes: tuple[int, ...]
    spelled_notes: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.pitch_classes) != len(self.spelled_notes):
            raise ValueError("ChordNotes.pitch_classes and spelled_notes must align")
        for pc in self.pitch_classes:
            if not (0 <= pc <= 11):
                raise ValueError(f"Pitch class must be in [0, 11], got {pc}")

    @property
    def root_pitch_class(self) -> int:
        return self.pitch_classes[0]


@dataclass(frozen=True)
class VoicedChord:
    """A chord with a single-octave inversion chosen by the voice-leading engine.

    Attributes:
        chord:        Original ChordNotes (unchanged)
        bass:         Bass note name, octave suffix stripped
        bass_index:   Position of the bass tone in chord.spelled_notes
        voiced_notes: chord.spelled_notes rotated to start at the bass
        movement:     Circular semitone distance from the previous root
                      to the bass (0 for the first chord)
    """

    chord: ChordNotes
    bass: str
    bass_index: int
    voiced_notes: tuple[str, ...]
    movement: int = 0

    @property
    def pitch_classes(self) -> tuple[int, ...]:
        return self.chord.pitch_classes

    @property
    def is_inversion(self) -> bool:
        return self.bass_index != 0


# ---------------------------------------------------------------------------
# Progression
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProgressionRequest:
    """Validated input for one progression generation.

    Attributes:
        key:               Starting key spelling, e.g. "C", "Eb"
        quality:           Starting key quality
        length:            Number of chords to emit (>= 1)
        enable_modulation: Change key at the midpoint
        deceptive_cadence: Force V/vii -> vi on the penultimate chord
    """

    key: str
    quality: Quality
    length: int = 4
    enable_modulation: bool = False
    deceptive_cadence: bool = False

    def __post_init__(self) -> None:
        from core.music_theory.pitch import NOT_FOUND, chromatic_index

        if chromatic_index(self.key) == NOT_FOUND:
            raise UnknownNote(self.key)
        object.__setattr__(self, "quality", Quality.parse(self.quality))
        if isinstance(self.length, bool) or not isinstance(self.length, int):
            raise ValueError(f"length must be an integer, got {self.length!r}")
        if self.length < 1:
            raise ValueError(f"length must be >= 1, got {self.length}")

    @property
    def initial_key(self) -> Key:
        return Key(tonic=self.key, quality=self.quality)


@dataclass(frozen=True)
class ProgressionStep:
    """One chord of a generated progression.

    Attributes:
        numeral:    Scale degree "1".."7" within the step's context
        roman:      Roman numeral label, e.g. "I", "ii", "vii°"
        function:   Harmonic function label, e.g. "Dominant"
        root:       Root spelling
        chord_type: Chord-type label, e.g. "Dominant 7"
        bass:       Bass note chosen by the voice-leading engine
        symbol:     "<chord symbol>/<bass>", e.g. "G7/F"
        notes:      Voiced note names, starting at the bass
        context:    Key active when this step was emitted
    """

    numeral: str
    roman: str
    function: str
    root: str
    chord_type: str
    bass: str
    symbol: str
    notes: tuple[str, ...]
    context: Key

    @property
    def note_string(self) -> str:
        """Hyphen-joined voiced notes, e.g. 'E-G-C'."""
        return "-".join(self.notes)

    def to_dict(self) -> dict[str, Any]:
        """Render with the keys consumed by playback and display collaborators."""
        return {
            "numeral": self.numeral,
            "func": self.function,
            "type": self.chord_type,
            "bass": self.bass,
            "symbol": self.symbol,
            "notes": self.note_string,
            "context": self.context.to_dict(),
        }


@dataclass(frozen=True)
class Progression:
    """An immutable generated progression.

    Attributes:
        steps:             Emitted steps in order (len == request.length)
        initial_key:       Key the progression started in
        enable_modulation: Whether modulation was requested
        deceptive_cadence: Whether the deceptive cadence was requested
    """

    steps: tuple[ProgressionStep, ...]
    initial_key: Key
    enable_modulation: bool = False
    deceptive_cadence: bool = False

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError("Progression.steps must not be empty")

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[ProgressionStep]:
        return iter(self.steps)

    def __getitem__(self, index: int) -> ProgressionStep:
        return self.steps[index]

    @property
    def numerals(self) -> tuple[str, ...]:
        return tuple(s.numeral for s in self.steps)

    @property
    def symbols(self) -> tuple[str, ...]:
        return tuple(s.symbol for s in self.steps)

    @property
    def modulated(self) -> bool:
        """True if any step was emitted outside the initial key."""
        return any(s.context != self.initial_key for s in self.steps)

    def duration_sec(self, chord_duration_sec: float) -> float:
        """Total playback length when each chord lasts chord_duration_sec."""
        if chord_duration_sec <= 0:
            raise ValueError(f"chord_duration_sec must be > 0, got {chord_duration_sec}")
        return chord_duration_sec * len(self.steps)

    def context_label(self, index: int) -> str:
        """Label a step whose context differs from the first step's context.

        Returns:
            "(G Maj)" / "(E min)" style label, or "" when the context matches.
        """
        first = self.steps[0].context
        ctx = self.steps[index].context
        if ctx == first:
            return ""
        return f"({ctx.tonic} {ctx.quality.short_label})"

    def to_dicts(self) -> list[dict[str, Any]]:
        return [s.to_dict() for s in self.steps]


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChordPossibility:
    """One theoretically valid chord for a degree.

    Attributes:
        label:      Chord symbol, e.g. "Am7"
        chord_type: Chord-type label, e.g. "m7"
        notes:      Root-position spelling, e.g. ("A", "C", "E", "G")
    """

    label: str
    chord_type: str
    notes: tuple[str, ...]

    @property
    def note_string(self) -> str:
        return "-".join(self.notes)


@dataclass(frozen=True)
class AnalysisSection:
    """Analysis of one progression step within its own context.

    Attributes:
        context:        Key active at the step
        numeral:        Scale degree "1".."7"
        root:           Root spelling of the degree in context
        degree_quality: Quality of the diatonic triad: Major, Minor, Diminished
        function:       Harmonic function label
        possibilities:  Catalog from the analysis expander
    """

    context: Key
    numeral: str
    root: str
    degree_quality: str
    function: str
    possibilities: tuple[ChordPossibility, ...] = field(default_factory=tuple)

    @property
    def header(self) -> str:
        """e.g. 'C Major - Numeral 5 (G Major, Function: Dominant)'."""
        quality = self.context.quality.value
        return (
            f"{self.context.tonic} {quality} - Numeral {self.numeral} "
            f"({self.root} {quality}, Function: {self.function})"
        )
