"""
Tests for core/music_theory/progression.py: the rule-based generator.

Validates:
    - exact length, first step on numeral "1" in the requested key
    - every transition follows the rules unless a cadence or modulation
      overrides it
    - deceptive cadence on the penultimate V/vii
    - modulation at length // 2 - 1, effective from the next step
    - draw order through the injected chooser and seed reproducibility
    - ProgressionRequest validation
"""

import pytest

from core.music_theory.progression import (
    generate_examples,
    generate_progression,
    is_deceptive_step,
    is_modulation_step,
    make_chooser,
)
from core.music_theory.theory import PROGRESSION_RULES, degree_info, related_keys
from core.music_theory.types import (
    ChordType,
    Key,
    ProgressionRequest,
    Quality,
    UnknownNote,
)
from tests.conftest import ScriptedChooser, first_choice, last_choice


def _request(**overrides) -> ProgressionRequest:
    params = {"key": "C", "quality": "Major", "length": 4}
    params.update(overrides)
    return ProgressionRequest(**params)


C_MAJOR = Key("C", Quality.MAJOR)
A_MINOR = Key("A", Quality.MINOR)


# ---------------------------------------------------------------------------
# Basic walk
# ---------------------------------------------------------------------------


class TestGenerateProgression:
    @pytest.mark.parametrize("length", [1, 2, 5, 16])
    def test_exact_length(self, length):
        progression = generate_progression(_request(length=length), seed=3)
        assert len(progression) == length

    def test_single_chord_is_tonic(self):
        progression = generate_progression(_request(length=1), seed=11)
        step = progression[0]
        assert step.numeral == "1"
        assert step.chord_type in {"Major", "Maj7", "6"}
        assert step.bass == "C"
        assert step.symbol.startswith("C")
        assert step.symbol.endswith("/C")
        assert step.context == C_MAJOR

    def test_first_choice_walk(self):
        progression = generate_progression(_request(length=4), choose=first_choice)
        # 1 -> 2 -> 5 -> 1, first chord type each time
        assert progression.numerals == ("1", "2", "5", "1")
        assert progression.symbols == ("C/C", "Dm/D", "G/D", "C/G")
        assert progression[2].notes == ("D", "G", "B")

    def test_step_metadata(self):
        progression = generate_progression(_request(length=3), choose=first_choice)
        step = progression[2]
        assert step.roman == "V"
        assert step.function == "Dominant"
        assert step.root == "G"
        assert step.note_string == "D-G-B"

    @pytest.mark.parametrize("quality", list(Quality))
    @pytest.mark.parametrize("seed", range(5))
    def test_transitions_follow_rules(self, quality, seed):
        progression = generate_progression(
            _request(key="E", quality=quality, length=12), seed=seed
        )
        rules = PROGRESSION_RULES[quality]
        for current, upcoming in zip(progression.numerals, progression.numerals[1:]):
            assert upcoming in rules[current]

    @pytest.mark.parametrize("seed", range(5))
    def test_chord_types_come_from_degree_palette(self, seed):
        progression = generate_progression(_request(quality="Minor", length=8), seed=seed)
        for step in progression:
            labels = {t.label for t in degree_info(step.numeral, "Minor").chord_types}
            assert step.chord_type in labels

    def test_draw_order_without_options(self):
        chooser = ScriptedChooser()
        generate_progression(_request(length=2), choose=chooser)
        assert chooser.calls == [
            (ChordType.MAJOR, ChordType.MAJ7, ChordType.SIXTH),
            ("2", "3", "4", "5", "6"),
            (ChordType.MINOR, ChordType.M7),
            ("5", "7"),
        ]

    def test_minor_dominant_sus4(self, scripted):
        chooser = scripted([0, "5", ChordType.DOMINANT_7SUS4])
        progression = generate_progression(
            _request(key="A", quality="Minor", length=2), choose=chooser
        )
        step = progression[1]
        assert step.chord_type == "Dominant 7sus4"
        # E A B D voiced over the common tone A
        assert step.notes == ("A", "B", "D", "E")
        assert step.symbol == "E7sus4/A"

    def test_scripted_walk(self, scripted):
        chooser = scripted([ChordType.MAJ7, "4", ChordType.SIXTH, "5", ChordType.DOMINANT_7])
        progression = generate_progression(_request(length=3), choose=chooser)
        assert progression.numerals == ("1", "4", "5")
        assert progression[0].symbol == "Cmaj7/C"
        assert progression[2].chord_type == "Dominant 7"


# ---------------------------------------------------------------------------
# Deceptive cadence
# ---------------------------------------------------------------------------


class TestDeceptiveCadence:
    def test_without_cadence(self):
        progression = generate_progression(_request(length=5), choose=last_choice)
        assert progression.numerals == ("1", "6", "4", "7", "3")

    def test_penultimate_leading_tone_resolves_to_submediant(self):
        progression = generate_progression(
            _request(length=5, deceptive_cadence=True), choose=last_choice
        )
        assert progression.numerals == ("1", "6", "4", "7", "6")
        assert progression[-1].chord_type == "madd9"

    def test_penultimate_dominant(self, scripted):
        chooser = scripted([0, "5", 0, "1"])
        progression = generate_progression(
            _request(length=2, deceptive_cadence=True), choose=chooser
        )
        # step 0 is "1", so the cadence does not apply at length 2
        assert progression.numerals == ("1", "5")

        chooser = scripted([0, "5", 0, "1", 0])
        progression = generate_progression(
            _request(length=3, deceptive_cadence=True), choose=chooser
        )
        assert progression.numerals == ("1", "5", "6")

    def test_cadence_not_applied_elsewhere(self):
        progression = generate_progression(
            _request(length=3, deceptive_cadence=True), choose=first_choice
        )
        # penultimate numeral is "2", untouched
        assert progression.numerals == ("1", "2", "5")

    def test_step_predicates(self):
        assert is_deceptive_step(3, 5, "7")
        assert is_deceptive_step(3, 5, "5")
        assert not is_deceptive_step(3, 5, "4")
        assert not is_deceptive_step(2, 5, "5")
        assert is_modulation_step(2, 6)
        assert is_modulation_step(1, 5)
        assert not is_modulation_step(0, 1)


# ---------------------------------------------------------------------------
# Modulation
# ---------------------------------------------------------------------------


class TestModulation:
    def test_context_changes_after_midpoint(self):
        progression = generate_progression(
            _request(length=6, enable_modulation=True), choose=first_choice
        )
        assert progression.numerals == ("1", "2", "5", "1", "4", "1")
        contexts = [step.context for step in progression]
        assert contexts[:3] == [C_MAJOR] * 3
        assert contexts[3:] == [A_MINOR] * 3
        assert progression[3].root == "A"
        assert progression[3].symbol == "Am/A"
        assert progression.modulated

    def test_context_labels(self):
        progression = generate_progression(
            _request(length=6, enable_modulation=True), choose=first_choice
        )
        assert progression.context_label(0) == ""
        assert progression.context_label(2) == ""
        assert progression.context_label(3) == "(A min)"

    def test_related_key_is_drawn_last(self):
        chooser = ScriptedChooser([0, "5", 0, "1", Key("G", Quality.MAJOR)])
        progression = generate_progression(
            _request(length=4, enable_modulation=True), choose=chooser
        )
        assert chooser.calls[4] == related_keys("C", "Major")
        assert progression[2].context == Key("G", Quality.MAJOR)
        assert progression[2].numeral == "1"
        assert progression[2].roman == "I"

    def test_modulation_from_minor(self):
        progression = generate_progression(
            _request(key="A", quality="Minor", length=4, enable_modulation=True),
            choose=last_choice,
        )
        # last related key of A Minor is its subdominant
        assert progression[2].context == Key("D", Quality.MINOR)
        assert progression[2].numeral == "1"

    def test_single_chord_never_modulates(self):
        progression = generate_progression(
            _request(length=1, enable_modulation=True), choose=first_choice
        )
        assert not progression.modulated

    def test_disabled_never_changes_context(self):
        progression = generate_progression(_request(length=8), seed=5)
        assert not progression.modulated
        assert all(step.context == C_MAJOR for step in progression)

    def test_to_dicts(self):
        progression = generate_progression(
            _request(length=4, enable_modulation=True), choose=first_choice
        )
        rows = progression.to_dicts()
        assert set(rows[0]) == {"numeral", "func", "type", "bass", "symbol", "notes", "context"}
        assert rows[0]["context"] == {"key": "C", "quality": "Major"}
        assert rows[2]["context"] == {"key": "A", "quality": "Minor"}
        assert rows[2]["notes"] == "C-E-A"


# ---------------------------------------------------------------------------
# Randomness
# ---------------------------------------------------------------------------


class TestRandomness:
    def test_seed_is_reproducible(self):
        request = _request(length=8, enable_modulation=True, deceptive_cadence=True)
        assert generate_progression(request, seed=42) == generate_progression(request, seed=42)

    def test_make_chooser_is_private(self):
        a = make_chooser(1)
        b = make_chooser(1)
        options = tuple(range(100))
        assert [a(options) for _ in range(5)] == [b(options) for _ in range(5)]

    def test_examples_share_one_chooser(self):
        chooser = ScriptedChooser()
        progressions = generate_examples(_request(length=3), 2, choose=chooser)
        assert len(progressions) == 2
        assert len(chooser.calls) == 2 * 3 * 2

    def test_examples_reproducible(self):
        request = _request(length=4)
        assert generate_examples(request, 3, seed=9) == generate_examples(request, 3, seed=9)

    def test_examples_count_must_be_positive(self):
        with pytest.raises(ValueError, match="count must be >= 1"):
            generate_examples(_request(), 0)


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------


class TestProgressionRequest:
    def test_unknown_key(self):
        with pytest.raises(UnknownNote):
            _request(key="H")

    @pytest.mark.parametrize("length", [0, -3])
    def test_length_must_be_positive(self, length):
        with pytest.raises(ValueError, match="length must be >= 1"):
            _request(length=length)

    @pytest.mark.parametrize("length", [True, 2.5, "4"])
    def test_length_must_be_int(self, length):
        with pytest.raises(ValueError, match="length must be an integer"):
            _request(length=length)

    def test_quality_parsed(self):
        assert _request(quality="minor").quality is Quality.MINOR
        with pytest.raises(ValueError, match="Unknown quality"):
            _request(quality="Dorian")

    def test_initial_key(self):
        assert _request(key="Eb", quality="Minor").initial_key == Key("Eb", Quality.MINOR)

    def test_duration(self):
        progression = generate_progression(_request(length=6), seed=1)
        assert progression.duration_sec(1.5) == pytest.approx(9.0)
        with pytest.raises(ValueError):
            progression.duration_sec(0)
