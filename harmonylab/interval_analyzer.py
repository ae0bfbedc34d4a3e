"""IntervalAnalyzer: names the interval between two sounding notes."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from itertools import product

from harmonylab.errors import InvalidArgument
from harmonylab.key_signature import KeySignature
from harmonylab.note_set import pitch_class
from harmonylab.pitch_speller import Spelling, enharmonic_spellings, spell_note, written_octave
from harmonylab.tables import Convention, IntervalTableEntry, lookup_interval

logger = logging.getLogger(__name__)

#: Semitone counts (mod 12) of the perfect intervals: unison/octave, fourth, fifth.
PERFECT_SEMITONES = frozenset({0, 5, 7})


@dataclass(frozen=True)
class IntervalName:
    """
    A recognized interval.

    Attributes:
        semitones:      Unfolded distance (19 for a compound perfect fifth).
        diatonic_steps: Letter-name steps between the two spellings (11 for the same).
        quality:        "perfect", "major", "minor", "augmented" or "diminished".
        name:           Display name in the requested convention.
        compound:       True beyond 12 semitones or beyond an octave of letter names.
    """

    semitones: int
    diatonic_steps: int
    quality: str
    name: str
    compound: bool


def _staff_position(spelling: Spelling, octave: int) -> int:
    return octave * 7 + spelling.letter_index


def diatonic_steps(low_id: int, high_id: int, key: KeySignature) -> int:
    """
    Count letter-name steps from the lower to the higher note as spelled in *key*.

    In C minor, B3 -> Eb4 spans four semitones but four letters (B C D E),
    so it is a fourth (diminished), not a third.
    """
    low, low_octave = spell_note(low_id, key)
    high, high_octave = spell_note(high_id, key)
    return _staff_position(high, high_octave) - _staff_position(low, low_octave)


def _candidate_spellings(note_id: int, key: KeySignature) -> list[tuple[Spelling, int, int]]:
    """
    ``(spelling, octave, cost)`` for every single-accidental spelling of a note.

    The key's own spelling costs 0, respelling a chromatic note costs 1 and
    respelling a diatonic note costs 2.
    """
    preferred, preferred_octave = spell_note(note_id, key)
    respell_cost = 1 if key.step_index(pitch_class(note_id)) is None else 2
    candidates = [(preferred, preferred_octave, 0)]
    for spelling in enharmonic_spellings(pitch_class(note_id)):
        if spelling != preferred:
            candidates.append((spelling, written_octave(note_id, spelling), respell_cost))
    return candidates


def _match(low_id: int, high_id: int, key: KeySignature) -> tuple[IntervalTableEntry, int] | None:
    semitones = high_id - low_id
    matches = []
    for low, high in product(_candidate_spellings(low_id, key), _candidate_spellings(high_id, key)):
        steps = _staff_position(high[0], high[1]) - _staff_position(low[0], low[1])
        entry = lookup_interval(semitones, steps)
        if entry is not None and steps >= 0:
            matches.append((low[2] + high[2], entry, steps))
    if not matches:
        return None

    matches.sort(key=lambda match: match[0])
    if semitones % 12 in PERFECT_SEMITONES:
        for _, entry, steps in matches:
            if entry.quality == "perfect":
                return entry, steps
    _, entry, steps = matches[0]
    return entry, steps


def name_interval(
    low_id: int,
    high_id: int,
    key: KeySignature,
    convention: Convention = Convention.DEGREE,
) -> IntervalName | None:
    """
    Name the interval between two notes in the context of a key.

    Both notes are spelled in the key and the quality follows from the
    letter-name distance, so B3-Eb4 in C minor is a diminished fourth.
    The one exception is a distance that can be a perfect unison, fourth,
    fifth or octave: there the cheapest single-accidental respelling that
    makes it perfect wins (chromatic notes are respelled before diatonic
    ones), so C4-G4 is a perfect fifth in every key.

    The notes may be given in either order. Returns None for a unison
    between identical notes or for any shape the interval table does not
    know; neither is an error.
    """
    low_id, high_id = sorted((low_id, high_id))
    semitones = high_id - low_id
    if semitones == 0:
        return None

    match = _match(low_id, high_id, key)
    if match is None:
        logger.debug("no interval for notes %d-%d in %s", low_id, high_id, key)
        return None

    entry, steps = match
    compound = semitones > 12 or steps > 7
    return IntervalName(
        semitones=semitones,
        diatonic_steps=steps,
        quality=entry.quality,
        name=entry.name(steps, convention, compound),
        compound=compound,
    )


def interval_of(
    note_ids: Sequence[int],
    key: KeySignature,
    convention: Convention = Convention.DEGREE,
) -> IntervalName | None:
    """
    Name the interval formed by exactly two distinct notes.

    Raises:
        InvalidArgument: If *note_ids* does not hold exactly two distinct notes.
    """
    distinct = sorted(set(note_ids))
    if len(distinct) != 2:
        raise InvalidArgument(f"An interval needs exactly two distinct notes, got {len(distinct)}.")
    return name_interval(distinct[0], distinct[1], key, convention)
