"""PitchSpeller: key-aware letter names and Helmholtz pitch notation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from harmonylab.errors import InvalidArgument
from harmonylab.key_signature import (
    LETTERS,
    NATURAL_PITCH_CLASSES,
    KeySignature,
    TieBreak,
    accidental_symbol,
    signed_semitones,
)
from harmonylab.note_set import pitch_class, validate_note

#: Octave written as a plain lower-case letter in Helmholtz notation ("c" = C3).
HELMHOLTZ_SMALL_OCTAVE = 3


@dataclass(frozen=True)
class Spelling:
    """
    A letter name with accidental, e.g. Spelling("F", 1) for F#.

    Attributes:
        letter:     "A"-"G".
        accidental: Semitone offset from the natural letter.
    """

    letter: str
    accidental: int = 0

    @property
    def name(self) -> str:
        return f"{self.letter}{accidental_symbol(self.accidental)}"

    @property
    def pitch_class(self) -> int:
        return (NATURAL_PITCH_CLASSES[self.letter] + self.accidental) % 12

    @property
    def letter_index(self) -> int:
        return LETTERS.index(self.letter)

    def __str__(self) -> str:
        return self.name


def spell(pitch_class_: int, key: KeySignature, tie_break: TieBreak = TieBreak.BELOW) -> Spelling:
    """
    Spell a pitch class in the context of a key.

    Diatonic pitch classes take the key's own letter and accidental. A
    chromatic pitch class borrows the letter of the nearest diatonic step
    (ties go to the step below) and gets whatever accidental reaches it
    from that letter's natural pitch. Double sharps and flats are used only
    when no single-accidental spelling is available.
    """
    pc = pitch_class_ % 12
    index = key.step_index(pc)
    if index is not None:
        step = key.diatonic_frame[index]
        return Spelling(step.letter, step.accidental)

    nearest, _ = key.nearest_step(pc, tie_break)
    candidates = []
    for index, step in enumerate(key.diatonic_frame):
        accidental = signed_semitones(pc - NATURAL_PITCH_CLASSES[step.letter])
        if abs(accidental) > 2:
            continue
        distance = signed_semitones(pc - step.pitch_class)
        candidates.append((abs(accidental) > 1, index != nearest, abs(distance), index, accidental))

    _, _, _, index, accidental = min(candidates)
    return Spelling(key.diatonic_frame[index].letter, accidental)


def written_octave(note_id: int, spelling: Spelling) -> int:
    """
    Octave number as written for this spelling.

    Differs from the sounding octave across the B/C boundary: MIDI 60
    spelled B# is B#3, MIDI 59 spelled Cb is Cb4.
    """
    natural = NATURAL_PITCH_CLASSES[spelling.letter]
    return (note_id - natural - spelling.accidental) // 12 - 1


def spell_note(note_id: int, key: KeySignature, tie_break: TieBreak = TieBreak.BELOW) -> tuple[Spelling, int]:
    """Spell a MIDI note; returns ``(spelling, written_octave)``."""
    validate_note(note_id)
    spelling = spell(pitch_class(note_id), key, tie_break)
    return spelling, written_octave(note_id, spelling)


def to_helmholtz(spelling: Spelling, octave_: int) -> str:
    """
    Helmholtz pitch notation.

    C3 is "c", each octave above adds an apostrophe (C4 = "c'", C5 = "c''").
    C2 is "C", each octave below adds a comma (C1 = "C,", C0 = "C,,").
    """
    accidental = accidental_symbol(spelling.accidental)
    if octave_ >= HELMHOLTZ_SMALL_OCTAVE:
        marks = "'" * (octave_ - HELMHOLTZ_SMALL_OCTAVE)
        return f"{spelling.letter.lower()}{accidental}{marks}"
    marks = "," * (HELMHOLTZ_SMALL_OCTAVE - 1 - octave_)
    return f"{spelling.letter}{accidental}{marks}"


def note_name(note_ids: Sequence[int], key: KeySignature) -> str:
    """Letter name of a single sounding note, or "" for any other count."""
    if len(note_ids) != 1:
        return ""
    spelling, _ = spell_note(note_ids[0], key)
    return spelling.name


def helmholtz_name(note_ids: Sequence[int], key: KeySignature) -> str:
    """Helmholtz name of a single sounding note, or "" for any other count."""
    if len(note_ids) != 1:
        return ""
    return to_helmholtz(*spell_note(note_ids[0], key))


def scientific_name(note_id: int, key: KeySignature) -> str:
    """Scientific pitch name such as "Eb4"."""
    spelling, octave_ = spell_note(note_id, key)
    return f"{spelling.name}{octave_}"


def parse_note(text: str) -> int:
    """
    Parse a MIDI number ("60") or scientific pitch name ("C4", "Eb3", "F#5").

    Raises:
        InvalidArgument: If the text is neither.
    """
    text = text.strip()
    if text.lstrip("-").isdigit():
        return validate_note(int(text))

    letter = text[:1].upper()
    if letter not in NATURAL_PITCH_CLASSES:
        raise InvalidArgument(f"Cannot parse note: {text!r}.")
    rest = text[1:]
    symbol = ""
    while rest[:1] in ("#", "b"):
        symbol += rest[0]
        rest = rest[1:]
    if symbol not in ("", "#", "b", "##", "bb") or not rest.lstrip("-").isdigit():
        raise InvalidArgument(f"Cannot parse note: {text!r}.")

    accidental = symbol.count("#") - symbol.count("b")
    note_id = (int(rest) + 1) * 12 + NATURAL_PITCH_CLASSES[letter] + accidental
    return validate_note(note_id)


def enharmonic_spellings(pitch_class_: int) -> list[Spelling]:
    """Every spelling of a pitch class that needs at most one sharp or flat."""
    spellings = []
    for letter in LETTERS:
        accidental = signed_semitones(pitch_class_ - NATURAL_PITCH_CLASSES[letter])
        if abs(accidental) <= 1:
            spellings.append(Spelling(letter, accidental))
    return spellings
