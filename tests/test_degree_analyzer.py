"""Unit tests for scale degrees and solfège."""

import pytest

from harmonylab.degree_analyzer import LOWERED, RAISED, scale_degree, scale_degree_of, solfege
from harmonylab.errors import InvalidArgument
from harmonylab.key_signature import KeySignature, TieBreak

C_MAJOR = KeySignature.from_name("C")
C_MINOR = KeySignature.from_name("C", "minor")


def test_tonic_is_degree_one() -> None:
    degree = scale_degree(60, C_MAJOR)
    assert degree.step == 0
    assert degree.altered is None
    assert degree.label == "1"


def test_octave_does_not_matter() -> None:
    assert scale_degree(43, C_MAJOR) == scale_degree(79, C_MAJOR)


def test_chromatic_tone_is_raised_by_default() -> None:
    degree = scale_degree(66, C_MAJOR)
    assert degree.altered == RAISED
    assert degree.label == "#4"
    assert degree.semitones == 6


def test_chromatic_tone_lowered_with_tie_above() -> None:
    degree = scale_degree(66, C_MAJOR, TieBreak.ABOVE)
    assert degree.altered == LOWERED
    assert degree.label == "b5"


def test_degree_in_sharp_key() -> None:
    assert scale_degree(73, KeySignature.from_name("D")).label == "7"


def test_leading_tone_in_minor_is_raised_seventh() -> None:
    assert scale_degree(71, C_MINOR).label == "#7"


def test_scale_degree_of_needs_one_note() -> None:
    assert scale_degree_of([60, 64], C_MAJOR) is None
    assert scale_degree_of([], C_MAJOR) is None
    assert scale_degree_of([64], C_MAJOR).label == "3"  # type: ignore[union-attr]


def test_scale_degree_rejects_bad_note() -> None:
    with pytest.raises(InvalidArgument):
        scale_degree(128, C_MAJOR)


def test_solfege_major_scale() -> None:
    syllables = [solfege(note_id, C_MAJOR) for note_id in (60, 62, 64, 65, 67, 69, 71)]
    assert syllables == ["do", "re", "mi", "fa", "sol", "la", "ti"]


def test_solfege_chromatic_tones() -> None:
    assert solfege([66], C_MAJOR) == "fi"
    assert solfege([66], C_MAJOR, TieBreak.ABOVE) == "se"


def test_solfege_minor_key_uses_lowered_syllables() -> None:
    assert solfege(63, C_MINOR) == "me"
    assert solfege(68, C_MINOR) == "le"
    assert solfege(70, C_MINOR) == "te"


def test_solfege_leading_tone_in_minor_is_ti() -> None:
    assert solfege(71, C_MINOR) == "ti"


def test_solfege_needs_one_note() -> None:
    assert solfege([60, 64], C_MAJOR) is None
    assert solfege([], C_MAJOR) is None
