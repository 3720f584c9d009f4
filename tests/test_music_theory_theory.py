"""
Tests for core/music_theory/theory.py: degree tables, rules, related keys.

Validates:
    - every numeral has chord types and one function label per quality
    - roman numeral casing
    - related_keys offsets and qualities
    - random_chord_type / next_numeral use the injected chooser and fall back
      gracefully for numerals without table entries
"""

import pytest

from core.music_theory.theory import (
    DIATONIC_CHORDS,
    NUMERALS,
    PROGRESSION_RULES,
    degree_index,
    degree_info,
    next_numeral,
    random_chord_type,
    related_keys,
    roman_numeral,
)
from core.music_theory.types import ChordType, InvalidScaleDegree, Key, Quality
from tests.conftest import ScriptedChooser, first_choice, last_choice

# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


class TestDiatonicTables:
    @pytest.mark.parametrize("quality", list(Quality))
    def test_every_numeral_has_types_and_function(self, quality):
        table = DIATONIC_CHORDS[quality]
        assert set(table) == set(NUMERALS)
        for info in table.values():
            assert len(info.chord_types) >= 1
            assert info.function

    def test_major_tonic_palette(self):
        info = degree_info("1", Quality.MAJOR)
        assert info.chord_types == (ChordType.MAJOR, ChordType.MAJ7, ChordType.SIXTH)
        assert info.function == "Tonic"

    def test_minor_dominant_palette(self):
        info = degree_info("5", "Minor")
        assert ChordType.DOMINANT_7SUS4 in info.chord_types
        assert info.function == "Dominant"

    @pytest.mark.parametrize("quality", list(Quality))
    def test_palettes_hold_only_known_chord_types(self, quality):
        for info in DIATONIC_CHORDS[quality].values():
            assert all(isinstance(t, ChordType) for t in info.chord_types)

    def test_numeral_is_normalized(self):
        assert degree_info(" 5 ", "Major") is degree_info("5", "Major")
        assert degree_info(5, "Major") is degree_info("5", "Major")
        assert degree_index(" 3") == 2

    def test_unknown_numeral_has_no_entry(self):
        assert degree_info("8", "Major") is None

    @pytest.mark.parametrize("quality", list(Quality))
    def test_rules_only_target_known_numerals(self, quality):
        for source, targets in PROGRESSION_RULES[quality].items():
            assert source in NUMERALS
            assert targets
            assert set(targets) <= set(NUMERALS)

    def test_degree_index(self):
        assert degree_index("1") == 0
        assert degree_index(7) == 6
        with pytest.raises(InvalidScaleDegree):
            degree_index("8")


class TestRomanNumeral:
    def test_major_key(self):
        romans = [roman_numeral(n, "Major") for n in NUMERALS]
        assert romans == ["I", "ii", "iii", "IV", "V", "vi", "vii°"]

    def test_minor_key(self):
        romans = [roman_numeral(n, "Minor") for n in NUMERALS]
        assert romans == ["i", "ii°", "III", "iv", "V", "VI", "vii°"]


# ---------------------------------------------------------------------------
# related_keys
# ---------------------------------------------------------------------------


class TestRelatedKeys:
    def test_c_major(self):
        assert related_keys("C", "Major") == (
            Key("A", Quality.MINOR),
            Key("G", Quality.MAJOR),
            Key("F", Quality.MAJOR),
        )

    def test_a_minor(self):
        assert related_keys("A", "Minor") == (
            Key("C", Quality.MAJOR),
            Key("E", Quality.MINOR),
            Key("D", Quality.MINOR),
        )

    def test_preferred_spelling(self):
        subdominant = related_keys("F", "Major")[2]
        assert subdominant == Key("A#", Quality.MAJOR)

    @pytest.mark.parametrize("quality", list(Quality))
    def test_never_returns_the_same_key(self, quality):
        for key in ("C", "Eb", "F#", "B"):
            tonics = {k.tonic for k in related_keys(key, quality)}
            assert key not in tonics


# ---------------------------------------------------------------------------
# Random choices
# ---------------------------------------------------------------------------


class TestRandomChoices:
    def test_chord_type_uses_chooser(self):
        assert random_chord_type("1", "Major", first_choice) is ChordType.MAJOR
        assert random_chord_type("1", "Major", last_choice) is ChordType.SIXTH

    def test_chord_type_unknown_numeral_falls_back_to_major(self):
        chooser = ScriptedChooser()
        assert random_chord_type("9", "Major", chooser) is ChordType.MAJOR
        assert chooser.calls == []

    def test_next_numeral_follows_rules(self):
        chooser = ScriptedChooser()
        next_numeral("5", "Major", chooser)
        assert chooser.calls == [("1", "6")]

    def test_next_numeral_normalizes_numeral(self):
        chooser = ScriptedChooser()
        next_numeral(" 5", "Major", chooser)
        assert chooser.calls == [("1", "6")]

    def test_next_numeral_missing_rule_samples_all(self):
        chooser = ScriptedChooser()
        result = next_numeral("9", "Minor", chooser)
        assert chooser.calls == [NUMERALS]
        assert result == "1"
