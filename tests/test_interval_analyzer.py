"""Unit tests for interval naming."""

import pytest

from harmonylab.errors import InvalidArgument
from harmonylab.interval_analyzer import diatonic_steps, interval_of, name_interval
from harmonylab.key_signature import KeySignature
from harmonylab.tables import Convention, lookup_interval

C_MAJOR = KeySignature.from_name("C")
C_MINOR = KeySignature.from_name("C", "minor")
LETTER = Convention.LETTER


def test_major_third() -> None:
    interval = name_interval(60, 64, C_MAJOR, LETTER)
    assert interval is not None
    assert interval.name == "major third"
    assert interval.quality == "major"
    assert interval.semitones == 4
    assert interval.diatonic_steps == 2
    assert not interval.compound


def test_degree_convention_is_the_default() -> None:
    interval = name_interval(60, 64, C_MAJOR)
    assert interval is not None
    assert interval.name == "M3"


def test_notes_in_either_order() -> None:
    assert name_interval(67, 60, C_MAJOR) == name_interval(60, 67, C_MAJOR)


def test_octave_is_simple() -> None:
    interval = name_interval(60, 72, C_MAJOR, LETTER)
    assert interval is not None
    assert interval.name == "perfect octave"
    assert not interval.compound
    assert name_interval(60, 72, C_MAJOR).name == "P8"  # type: ignore[union-attr]


def test_compound_third() -> None:
    interval = name_interval(60, 76, C_MAJOR, LETTER)
    assert interval is not None
    assert interval.compound
    assert interval.semitones == 16
    assert interval.name == "compound major third"
    assert name_interval(60, 76, C_MAJOR).name == "M10"  # type: ignore[union-attr]


def test_unison_of_the_same_note_is_not_an_interval() -> None:
    assert name_interval(60, 60, C_MAJOR) is None


def test_tritone_between_diatonic_notes() -> None:
    assert name_interval(65, 71, C_MAJOR, LETTER).name == "augmented fourth"  # type: ignore[union-attr]
    assert name_interval(71, 77, C_MAJOR, LETTER).name == "diminished fifth"  # type: ignore[union-attr]


def test_leading_tone_to_minor_third_is_diminished_fourth() -> None:
    interval = name_interval(59, 63, C_MINOR, LETTER)
    assert interval is not None
    assert interval.name == "diminished fourth"
    assert interval.semitones == 4


def test_minor_sixth_in_minor() -> None:
    assert name_interval(60, 68, C_MINOR, LETTER).name == "minor sixth"  # type: ignore[union-attr]


def test_perfect_fifth_is_perfect_in_any_key() -> None:
    key = KeySignature.from_name("C#")
    interval = name_interval(60, 67, key, LETTER)
    assert interval is not None
    assert interval.name == "perfect fifth"


def test_chromatic_note_respelled_to_make_a_perfect_fifth() -> None:
    # C#4 and Ab4 in C minor read as a diminished sixth when spelled in the key
    interval = name_interval(61, 68, C_MINOR, LETTER)
    assert interval is not None
    assert interval.name == "perfect fifth"
    assert interval.diatonic_steps == 4


def test_diatonic_steps_follow_key_spelling() -> None:
    assert diatonic_steps(59, 63, C_MINOR) == 3
    assert diatonic_steps(60, 64, C_MAJOR) == 2


def test_interval_of_needs_two_distinct_notes() -> None:
    with pytest.raises(InvalidArgument):
        interval_of([60], C_MAJOR)
    with pytest.raises(InvalidArgument):
        interval_of([60, 64, 67], C_MAJOR)
    with pytest.raises(InvalidArgument):
        interval_of([60, 60], C_MAJOR)


def test_interval_of_ignores_doubled_note() -> None:
    interval = interval_of([64, 60, 60], C_MAJOR)
    assert interval is not None
    assert interval.name == "M3"


def test_lookup_interval_reduces_compounds() -> None:
    entry = lookup_interval(19, 11)
    assert entry is not None
    assert entry.quality == "perfect"
    assert lookup_interval(5, 1) is None


def test_augmented_octave_is_compound() -> None:
    interval = name_interval(60, 73, C_MAJOR, LETTER)
    assert interval is not None
    assert interval.semitones == 13
    assert interval.diatonic_steps == 7
    assert interval.quality == "augmented"
    assert interval.compound
    assert interval.name == "compound augmented unison"
    assert name_interval(60, 73, C_MAJOR).name == "A8"  # type: ignore[union-attr]


def test_diminished_octave_stays_simple() -> None:
    # C#4 up to C5 is eleven semitones over an octave of letters
    interval = name_interval(61, 72, C_MAJOR, LETTER)
    assert interval is not None
    assert not interval.compound
    assert interval.name == "diminished octave"


def test_double_octave_is_compound_octave() -> None:
    interval = name_interval(48, 72, C_MAJOR, LETTER)
    assert interval is not None
    assert interval.compound
    assert interval.name == "compound perfect octave"
