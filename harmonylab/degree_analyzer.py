"""DegreeAnalyzer: scale-degree numerals and solfège for a single note."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from harmonylab.key_signature import MODE_STEPS, MAJOR, KeySignature, TieBreak
from harmonylab.note_set import pitch_class, validate_note

RAISED = "raised"
LOWERED = "lowered"

# Movable-do syllables by scale step, major-scale reference.
SOLFEGE: tuple[str, ...] = ("do", "re", "mi", "fa", "sol", "la", "ti")
SOLFEGE_RAISED: tuple[str, ...] = ("di", "ri", "my", "fi", "si", "li", "ty")
SOLFEGE_LOWERED: tuple[str, ...] = ("de", "ra", "me", "fe", "se", "le", "te")


@dataclass(frozen=True)
class ScaleDegree:
    """
    A note's position in the key.

    Attributes:
        step:       Scale step 0-6 (0 = tonic).
        altered:    None for a diatonic note, else "raised" or "lowered".
        semitones:  Semitones above the tonic (0-11).
    """

    step: int
    altered: str | None
    semitones: int

    @property
    def caret(self) -> str:
        """The degree numeral "1"-"7" (drawn under a caret)."""
        return str(self.step + 1)

    @property
    def accidental(self) -> str:
        if self.altered == RAISED:
            return "#"
        if self.altered == LOWERED:
            return "b"
        return ""

    @property
    def label(self) -> str:
        """Numeral with accidental prefix, e.g. "#4" or "b7"."""
        return f"{self.accidental}{self.caret}"


def scale_degree(note_id: int, key: KeySignature, tie_break: TieBreak = TieBreak.BELOW) -> ScaleDegree:
    """
    Scale degree of one note.

    Diatonic notes get their plain step. A chromatic note is read as the
    nearest diatonic step raised or lowered; when it sits exactly between
    two steps *tie_break* decides (the step below by default, giving #4
    rather than b5 for F# in C major).

    Raises:
        InvalidArgument: If *note_id* is not a MIDI note number.
    """
    pc = pitch_class(validate_note(note_id))
    step, distance = key.nearest_step(pc, tie_break)
    altered = None
    if distance > 0:
        altered = RAISED
    elif distance < 0:
        altered = LOWERED
    return ScaleDegree(step=step, altered=altered, semitones=(pc - key.tonic_pitch_class) % 12)


def scale_degree_of(
    note_ids: Sequence[int],
    key: KeySignature,
    tie_break: TieBreak = TieBreak.BELOW,
) -> ScaleDegree | None:
    """Scale degree when exactly one note sounds, otherwise None."""
    if len(note_ids) != 1:
        return None
    return scale_degree(note_ids[0], key, tie_break)


def solfege(
    notes: int | Sequence[int],
    key: KeySignature,
    tie_break: TieBreak = TieBreak.BELOW,
) -> str | None:
    """
    Movable-do syllable for a single note; None for chords or silence.

    The syllable follows the note's distance from the tonic measured
    against the major scale, so the lowered third of a minor key is "me"
    and its raised leading tone is "ti".
    """
    if not isinstance(notes, int):
        if len(notes) != 1:
            return None
        notes = notes[0]

    degree = scale_degree(notes, key, tie_break)
    reference = MODE_STEPS[MAJOR][degree.step]
    offset = (degree.semitones - reference + 6) % 12 - 6
    if offset > 0:
        return SOLFEGE_RAISED[degree.step]
    if offset < 0:
        return SOLFEGE_LOWERED[degree.step]
    return SOLFEGE[degree.step]
