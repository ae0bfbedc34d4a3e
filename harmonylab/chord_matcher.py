"""ChordMatcher: maps a set of sounding notes to a Roman-numeral chord label."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from harmonylab.key_signature import LETTERS, NATURAL_PITCH_CLASSES, KeySignature, signed_semitones
from harmonylab.note_set import pitch_class, validate_note
from harmonylab.pitch_speller import Spelling, spell
from harmonylab.tables import QUALITY_SYMBOLS, ChordTableEntry, Convention, chord_table

logger = logging.getLogger(__name__)

#: A chord needs at least root, third and fifth.
MIN_CHORD_PITCH_CLASSES = 3


@dataclass(frozen=True)
class ChordMatch:
    """
    The chord that best explains the sounding notes.

    Attributes:
        root_pitch_class: Pitch class of the chord root.
        bass_pitch_class: Pitch class of the lowest sounding note.
        quality:          e.g. "major", "dominant seventh".
        roman_numeral:    Numeral with inversion figure applied, e.g. "V65/V".
        inversion_figure: Figured-bass suffix ("", "6", "64", "7", "65", "43", "42").
        inversion:        Chord member in the bass (0 = root position), or None
                          when the bass is not a chord tone.
        entry:            The chord table entry that matched.
    """

    root_pitch_class: int
    bass_pitch_class: int
    quality: str
    roman_numeral: str
    inversion_figure: str
    inversion: int | None
    entry: ChordTableEntry

    def spell_member(self, key: KeySignature, member: int) -> Spelling:
        """
        Spell a chord tone (0 = root, 1 = third, ...) by stacking letter names
        in thirds from the numeral's scale step, so bVI in C is Ab-C-Eb
        rather than G#-C-D#.
        """
        root_letter = LETTERS.index(key.diatonic_frame[self.entry.degree].letter)
        letter = LETTERS[(root_letter + 2 * member) % 7]
        target = (self.root_pitch_class + self.entry.intervals[member]) % 12
        return Spelling(letter, signed_semitones(target - NATURAL_PITCH_CLASSES[letter]))

    def symbol(self, key: KeySignature) -> str:
        """Letter-based chord symbol, with slash bass for inversions ("G7/B")."""
        text = f"{self.spell_member(key, 0).name}{QUALITY_SYMBOLS[self.quality]}"
        if self.inversion is None:
            text = f"{text}/{spell(self.bass_pitch_class, key).name}"
        elif self.inversion > 0:
            text = f"{text}/{self.spell_member(key, self.inversion).name}"
        return text

    def label(self, key: KeySignature, convention: Convention = Convention.DEGREE) -> str:
        if convention == Convention.LETTER:
            return self.symbol(key)
        return self.roman_numeral


def chroma(note_ids: Iterable[int]) -> np.ndarray:
    """12-element count of sounding notes per pitch class (index 0 = C)."""
    vector = np.zeros(12, dtype=np.int32)
    for note_id in note_ids:
        vector[pitch_class(validate_note(note_id))] += 1
    return vector


def intervals_from_root(pitch_classes: Iterable[int], root: int) -> frozenset[int]:
    """Semitones above *root* of each pitch class, mod 12 (root itself is 0)."""
    return frozenset((pc - root) % 12 for pc in pitch_classes)


def _rank(entry: ChordTableEntry) -> tuple[int, bool]:
    # pitch classes explained (= pattern length), then diatonic root
    return len(entry.intervals), entry.diatonic_root


def find_chord(note_ids: Iterable[int], key: KeySignature) -> ChordMatch | None:
    """
    Find the chord-table entry that best explains a set of notes.

    Doublings collapse to one pitch class each and the lowest note decides
    the inversion. Every sounding pitch class is tried as the root; an
    entry matches when all its intervals are present above that root.
    Among matches the entry explaining the most pitch classes wins, then one
    whose root is diatonic to the key, then the longer (seventh) shape.

    Returns:
        The best ChordMatch, or None when nothing in the table fits (fewer
        than three pitch classes, non-tertian sets, unknown shapes).
    """
    note_ids = sorted(note_ids)
    vector = chroma(note_ids)
    pitch_classes = [int(pc) for pc in np.flatnonzero(vector)]
    if len(pitch_classes) < MIN_CHORD_PITCH_CLASSES:
        return None

    bass = pitch_class(note_ids[0])
    best: tuple[tuple[int, bool], int, ChordTableEntry] | None = None

    for root in pitch_classes:
        above_root = intervals_from_root(pitch_classes, root)
        degree = (root - key.tonic_pitch_class) % 12
        for entry in chord_table(key.mode):
            if entry.root != degree or not above_root.issuperset(entry.intervals):
                continue
            rank = _rank(entry)
            if best is None or rank > best[0]:
                best = (rank, root, entry)

    if best is None:
        logger.debug("no chord for pitch classes %s in %s", pitch_classes, key)
        return None

    _, root, entry = best
    offset = (bass - root) % 12
    inversion = entry.intervals.index(offset) if offset in entry.intervals else None
    figure = entry.figure(inversion or 0)
    logger.debug("matched %s over root %d (bass %d) in %s", entry.quality, root, bass, key)

    return ChordMatch(
        root_pitch_class=root,
        bass_pitch_class=bass,
        quality=entry.quality,
        roman_numeral=entry.roman(figure),
        inversion_figure=figure,
        inversion=inversion,
        entry=entry,
    )
