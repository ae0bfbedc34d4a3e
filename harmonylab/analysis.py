"""One-shot analysis of a note snapshot: every label the settings ask for."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from harmonylab.chord_matcher import find_chord
from harmonylab.degree_analyzer import scale_degree_of, solfege
from harmonylab.interval_analyzer import interval_of
from harmonylab.key_signature import KeySignature
from harmonylab.pitch_speller import helmholtz_name, note_name
from harmonylab.settings import AnalysisSettings


@dataclass(frozen=True)
class AnalysisReport:
    """Labels for one snapshot of sounding notes. Missing labels are None."""

    notes: tuple[int, ...]
    key: str
    note_name: str | None = None
    helmholtz: str | None = None
    scale_degree: str | None = None
    solfege: str | None = None
    interval: str | None = None
    chord: str | None = None

    def items(self) -> list[tuple[str, str]]:
        """``(label, value)`` pairs for the labels that are present."""
        rows = [
            ("Note name", self.note_name),
            ("Helmholtz", self.helmholtz),
            ("Scale degree", self.scale_degree),
            ("Solfege", self.solfege),
            ("Interval", self.interval),
            ("Chord", self.chord),
        ]
        return [(label, value) for label, value in rows if value]


def analyze(note_ids: Sequence[int], key: KeySignature, settings: AnalysisSettings) -> AnalysisReport:
    """
    Run every analyzer whose display mode is on.

    Single-note labels need exactly one note, the interval exactly two and
    the chord three or more; anything else is simply left out. With
    analysis disabled the report carries only the notes and the key.
    """
    notes = tuple(sorted(note_ids))
    report = AnalysisReport(notes=notes, key=key.short_name)
    if not settings.enabled:
        return report

    mode = settings.mode
    degree = scale_degree_of(notes, key, settings.tie_break)
    interval = interval_of(notes, key, settings.convention) if len(set(notes)) == 2 else None
    chord = find_chord(notes, key) if len(notes) > 2 else None

    return AnalysisReport(
        notes=notes,
        key=key.short_name,
        note_name=(note_name(notes, key) or None) if mode.note_names else None,
        helmholtz=(helmholtz_name(notes, key) or None) if mode.helmholtz else None,
        scale_degree=degree.label if mode.scale_degrees and degree else None,
        solfege=solfege(notes, key, settings.tie_break) if mode.solfege else None,
        interval=interval.name if mode.intervals and interval else None,
        chord=chord.label(key, settings.convention) if mode.roman_numerals and chord else None,
    )
