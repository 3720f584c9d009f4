"""
core/music_theory/progression.py: Rule-based progression generator.

generate_progression() walks the scale degrees of a key with the transition
rules of core.music_theory.theory, spelling and voicing one chord per step.

State:
    numeral  current scale degree, starts at "1"
    context  current Key, starts at the requested key

Per step i (0-based):
    1. root = degree `numeral` of context; chord type drawn uniformly from
       the numeral's permitted types
    2. spell the chord and voice it against the previous step's chord
    3. emit a ProgressionStep with symbol "<chord symbol>/<bass>"
    4. draw the next numeral from the rules
    5. deceptive cadence: if requested, i == length - 2 and numeral is "5"
       or "7", the next numeral becomes "6"
    6. modulation: if requested and i == length // 2 - 1, switch context to
       a related key and force the next numeral to "1". Evaluated after
       step 5, so it wins when both apply at the same step.

Randomness:
    Every draw goes through one `choose` callable (random.Random.choice
    signature). Draw order per step is chord type, next numeral, then the
    related key on the modulation step. Each call owns its own chooser, so
    concurrent requests never share generator state.
"""

from __future__ import annotations

import logging
import random

from core.music_theory.chords import chord_notes, chord_symbol, root_note
from core.music_theory.theory import (
    ChooseFn,
    degree_info,
    next_numeral,
    random_chord_type,
    related_keys,
    roman_numeral,
)
from core.music_theory.types import (
    ChordNotes,
    ChordType,
    Key,
    Progression,
    ProgressionRequest,
    ProgressionStep,
)
from core.music_theory.voicing import voice_chord

logger = logging.getLogger(__name__)

START_NUMERAL: str = "1"
DECEPTIVE_TARGET: str = "6"
DECEPTIVE_SOURCES: frozenset[str] = frozenset({"5", "7"})


def make_chooser(seed: int | None = None) -> ChooseFn:
    """Return a fresh random.Random(seed).choice, private to the caller."""
    return random.Random(seed).choice


def is_modulation_step(index: int, length: int) -> bool:
    """True at the step after which the key changes (length // 2 - 1)."""
    return index == length // 2 - 1


def is_deceptive_step(index: int, length: int, numeral: str) -> bool:
    """True on the penultimate step when it holds V or vii."""
    return index == length - 2 and numeral in DECEPTIVE_SOURCES


def build_step(
    numeral: str,
    context: Key,
    chord_type: ChordType | str,
    previous: ChordNotes | None,
) -> tuple[ProgressionStep, ChordNotes]:
    """Spell, voice and label one chord.

    Returns:
        (step, chord) where chord is the unvoiced ChordNotes to pass as
        `previous` to the next step.
    """
    root = root_note(numeral, context.tonic, context.quality)
    chord = chord_notes(root, chord_type)
    voiced = voice_chord(previous, chord)
    bass = voiced.bass or root

    info = degree_info(numeral, context.quality)
    step = ProgressionStep(
        numeral=numeral,
        roman=roman_numeral(numeral, context.quality),
        function=info.function if info is not None else "",
        root=root,
        chord_type=chord.chord_type,
        bass=bass,
        symbol=f"{chord_symbol(root, chord.chord_type)}/{bass}",
        notes=voiced.voiced_notes,
        context=context,
    )
    return step, chord


def generate_progression(
    request: ProgressionRequest,
    *,
    choose: ChooseFn | None = None,
    seed: int | None = None,
) -> Progression:
    """Generate one progression.

    Args:
        request: Validated generation request.
        choose:  Random-choice function. Defaults to a fresh
                 random.Random(seed).choice. Inject a deterministic function
                 to script the walk.
        seed:    Seed for the default chooser; ignored when choose is given.

    Returns:
        Progression with exactly request.length steps.

    Examples:
        >>> req = ProgressionRequest(key="C", quality="Major", length=1)
        >>> prog = generate_progression(req, seed=7)
        >>> prog[0].numeral, prog[0].bass
        ('1', 'C')
    """
    pick = choose if choose is not None else make_chooser(seed)
    length = request.length
    context = request.initial_key
    numeral = START_NUMERAL
    previous: ChordNotes | None = None
    steps: list[ProgressionStep] = []

    for i in range(length):
        chord_type = random_chord_type(numeral, context.quality, pick)
        step, previous = build_step(numeral, context, chord_type, previous)
        steps.append(step)

        upcoming = next_numeral(numeral, context.quality, pick)

        if request.deceptive_cadence and is_deceptive_step(i, length, numeral):
            logger.debug("Deceptive cadence at step %d: %s -> %s", i, numeral, DECEPTIVE_TARGET)
            upcoming = DECEPTIVE_TARGET

        if request.enable_modulation and is_modulation_step(i, length):
            target = pick(related_keys(context.tonic, context.quality))
            logger.debug("Modulating at step %d: %s -> %s", i, context.label, target.label)
            context = target
            upcoming = START_NUMERAL

        numeral = upcoming

    return Progression(
        steps=tuple(steps),
        initial_key=request.initial_key,
        enable_modulation=request.enable_modulation,
        deceptive_cadence=request.deceptive_cadence,
    )


def generate_examples(
    request: ProgressionRequest,
    count: int = 1,
    *,
    choose: ChooseFn | None = None,
    seed: int | None = None,
) -> tuple[Progression, ...]:
    """Generate `count` independent progressions from one chooser.

    Raises:
        ValueError: If count < 1.
    """
    if count < 1:
        raise ValueError(f"count must be >= 1, got {count}")
    pick = choose if choose is not None else make_chooser(seed)
    return tuple(generate_progression(request, choose=pick) for _ in range(count))
