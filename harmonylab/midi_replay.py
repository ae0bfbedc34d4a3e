"""MIDI replay: turns a MIDI file into note on/off events for a NoteSet."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from itertools import groupby
from typing import Any

from harmonylab.note_set import NOTE_OFF, NOTE_ON, NoteSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoteEvent:
    """
    One note transition.

    Attributes:
        offset:  Position in quarter notes from the start of the file.
        command: "on" or "off".
        note_id: MIDI note number.
    """

    offset: float
    command: str
    note_id: int

    def sort_key(self) -> tuple[float, int, int]:
        # offs before ons at the same offset so repeated notes re-strike
        return self.offset, 0 if self.command == NOTE_OFF else 1, self.note_id


def _parse_midi_score(midi_path: str) -> Any:
    from music21 import converter

    return converter.parse(midi_path, format="midi")


def events_from_score(score: Any) -> list[NoteEvent]:
    """
    Collect time-ordered on/off events from a music21 stream.

    Chords contribute one event pair per pitch; rests contribute nothing.
    Zero-length notes (grace notes, or notes quantized away) never sound,
    so they contribute nothing either.
    """
    events: list[NoteEvent] = []
    skipped = 0
    for element in score.flatten().notes:
        start = float(element.offset)
        end = start + float(element.duration.quarterLength)
        if end <= start:
            skipped += 1
            continue
        pitches = element.pitches if element.isChord else [element.pitch]
        for pitch in pitches:
            events.append(NoteEvent(start, NOTE_ON, int(pitch.midi)))
            events.append(NoteEvent(end, NOTE_OFF, int(pitch.midi)))
    if skipped:
        logger.debug("skipped %d zero-length notes", skipped)
    events.sort(key=NoteEvent.sort_key)
    return events


def note_events(midi_path: str) -> list[NoteEvent]:
    """
    Parse a MIDI file with music21 and return its note events.

    Raises:
        OSError: If the file cannot be read.
    """
    events = events_from_score(_parse_midi_score(midi_path))
    logger.info("Read %d note events from %s", len(events), midi_path)
    return events


def replay(events: Iterable[NoteEvent], note_set: NoteSet) -> Iterator[tuple[float, bool]]:
    """
    Apply events to *note_set* one offset at a time.

    Yields ``(offset, changed)`` after each group of simultaneous events, so
    the caller can analyze the chord as it stands at that moment.

    Each off cancels one earlier on of the same pitch: when two notes of the
    same pitch overlap, the pitch stays on until the later one ends. An off
    with no matching on is ignored.
    """
    held: Counter[int] = Counter()
    ordered = sorted(events, key=NoteEvent.sort_key)
    for offset, group in groupby(ordered, key=lambda event: event.offset):
        changed = False
        for event in group:
            note_id = event.note_id
            if event.command == NOTE_ON:
                held[note_id] += 1
                if held[note_id] == 1:
                    changed = note_set.note_on(note_id) or changed
            elif held[note_id] > 0:
                held[note_id] -= 1
                if held[note_id] == 0:
                    changed = note_set.note_off(note_id) or changed
        yield offset, changed
