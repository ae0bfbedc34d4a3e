"""Unit tests for AnalysisSettings loading and validation."""

import json
from pathlib import Path

import pytest

from harmonylab.errors import InvalidArgument
from harmonylab.key_signature import KeySignature, TieBreak
from harmonylab.settings import AnalysisSettings, DisplayModes
from harmonylab.tables import Convention


def test_defaults() -> None:
    settings = AnalysisSettings()
    assert settings.enabled
    assert settings.key == "C major"
    assert settings.convention == Convention.DEGREE
    assert settings.tie_break == TieBreak.BELOW
    assert settings.tempo is None
    assert settings.mode.intervals and settings.mode.roman_numerals
    assert not settings.mode.note_names


def test_from_mapping_converts_values() -> None:
    settings = AnalysisSettings.from_mapping(
        {
            "key": "g",
            "convention": "letter",
            "tie_break": "above",
            "tempo": 90,
            "mode": {"solfege": True, "intervals": False},
        }
    )
    assert settings.key_signature() == KeySignature.from_name("G", "minor")
    assert settings.convention == Convention.LETTER
    assert settings.tie_break == TieBreak.ABOVE
    assert settings.tempo == 90
    assert settings.mode.solfege
    assert not settings.mode.intervals
    assert settings.mode.roman_numerals


def test_unknown_setting_is_rejected() -> None:
    with pytest.raises(InvalidArgument, match="colour"):
        AnalysisSettings.from_mapping({"colour": "blue"})


def test_unknown_display_mode_is_rejected() -> None:
    with pytest.raises(InvalidArgument):
        AnalysisSettings.from_mapping({"mode": {"tablature": True}})


def test_display_mode_must_be_boolean() -> None:
    with pytest.raises(InvalidArgument):
        AnalysisSettings.from_mapping({"mode": {"solfege": "yes"}})


def test_bad_key_fails_at_load_time() -> None:
    with pytest.raises(InvalidArgument):
        AnalysisSettings.from_mapping({"key": "H major"})


def test_bad_convention_and_tie_break() -> None:
    with pytest.raises(InvalidArgument):
        AnalysisSettings.from_mapping({"convention": "nashville"})
    with pytest.raises(InvalidArgument):
        AnalysisSettings.from_mapping({"tie_break": "nearest"})


def test_tempo_must_be_positive_int() -> None:
    for tempo in (0, -60, 90.5, True, "fast"):
        with pytest.raises(InvalidArgument):
            AnalysisSettings.from_mapping({"tempo": tempo})


def test_enabled_must_be_boolean() -> None:
    with pytest.raises(InvalidArgument):
        AnalysisSettings.from_mapping({"enabled": 1})


def test_to_dict_is_loadable() -> None:
    settings = AnalysisSettings.from_mapping({"key": "Eb major", "tempo": 72})
    data = settings.to_dict()
    assert data["convention"] == "degree"
    assert data["mode"]["roman_numerals"] is True
    assert AnalysisSettings.from_mapping(data) == settings


def test_load_reads_json_file(tmp_path: Path) -> None:
    path = tmp_path / "lesson.json"
    path.write_text(json.dumps({"key": "d minor", "mode": {"note_names": True}}), encoding="utf-8")
    settings = AnalysisSettings.load(path)
    assert settings.key_signature().short_name == "d"
    assert settings.mode.note_names


def test_load_rejects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{key: ", encoding="utf-8")
    with pytest.raises(InvalidArgument):
        AnalysisSettings.load(path)


def test_load_rejects_non_object(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(InvalidArgument):
        AnalysisSettings.load(path)


def test_load_missing_file_raises_os_error(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        AnalysisSettings.load(tmp_path / "missing.json")


def test_exclusive_pairs() -> None:
    assert DisplayModes(note_names=True).exclusive("note_names", "helmholtz") == "note_names"
    assert DisplayModes(helmholtz=True).exclusive("note_names", "helmholtz") == "helmholtz"
    assert DisplayModes(note_names=True, helmholtz=True).exclusive("note_names", "helmholtz") is None
    assert DisplayModes().exclusive("scale_degrees", "solfege") is None


def test_exclusive_rejects_unpaired_options() -> None:
    with pytest.raises(InvalidArgument):
        DisplayModes().exclusive("note_names", "solfege")
