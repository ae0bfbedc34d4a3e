"""NoteSet: the observable set of currently sounding MIDI notes."""

from __future__ import annotations

import logging
from collections.abc import Callable

from harmonylab.errors import InvalidArgument

logger = logging.getLogger(__name__)

# ── MIDI constants ──────────────────────────────────────────────────────────
SEMITONES_PER_OCTAVE = 12
MIDDLE_C_MIDI = 60  # C4; lowest note on the treble stave
MIN_NOTE = 0
MAX_NOTE = 127

NOTE_ON = "on"
NOTE_OFF = "off"

TREBLE = "treble"
BASS = "bass"
CLEFS: tuple[str, ...] = (TREBLE, BASS)

#: Observer signature: ``callback(command, note_id)`` with command "on"/"off".
ChangeListener = Callable[[str, int], None]


def validate_note(note_id: int) -> int:
    """Return *note_id* unchanged, or raise InvalidArgument if it is not 0-127."""
    if isinstance(note_id, bool) or not isinstance(note_id, int):
        raise InvalidArgument(f"Note number must be an int, got {note_id!r}.")
    if not MIN_NOTE <= note_id <= MAX_NOTE:
        raise InvalidArgument(f"Note number {note_id} is outside {MIN_NOTE}-{MAX_NOTE}.")
    return note_id


def pitch_class(note_id: int) -> int:
    """Pitch class (0=C ... 11=B) of a MIDI note number."""
    return note_id % SEMITONES_PER_OCTAVE


def octave(note_id: int) -> int:
    """Scientific octave of a MIDI note number (Middle C = 60 is octave 4)."""
    return note_id // SEMITONES_PER_OCTAVE - 1


def belongs_to_clef(note_id: int, clef: str) -> bool:
    """
    Return True if the note is written on the given stave.

    Notes from Middle C upwards go to the treble stave, everything below
    Middle C to the bass stave.

    Raises:
        InvalidArgument: If *clef* is not "treble" or "bass".
    """
    if clef == TREBLE:
        return note_id >= MIDDLE_C_MIDI
    if clef == BASS:
        return note_id < MIDDLE_C_MIDI
    raise InvalidArgument(f"Invalid clef '{clef}'. Use one of: {', '.join(CLEFS)}.")


class NoteSet:
    """
    Tracks which MIDI notes are currently on.

    Listeners registered with ``subscribe()`` are called synchronously with
    ``(command, note_id)`` whenever a note actually changes state. Repeating
    a command for a note that is already in that state is a no-op and
    reports ``False``.

    Usage:

        notes = NoteSet()
        notes.subscribe(lambda command, note_id: print(command, note_id))
        notes.note_on(60)   # True, prints "on 60"
        notes.note_on(60)   # False, nothing printed
    """

    def __init__(self) -> None:
        self._notes: set[int] = set()
        self._listeners: list[ChangeListener] = []

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> None:
        """Register a change listener. Registering the same one twice is ignored."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> None:
        """Remove a previously registered listener, if present."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, command: str, note_id: int) -> None:
        logger.debug("note %s: %d", command, note_id)
        for listener in list(self._listeners):
            listener(command, note_id)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def note_on(self, note_id: int) -> bool:
        """Turn a note on. Returns True if the set changed."""
        validate_note(note_id)
        if note_id in self._notes:
            return False
        self._notes.add(note_id)
        self._notify(NOTE_ON, note_id)
        return True

    def note_off(self, note_id: int) -> bool:
        """Turn a note off. Returns True if the set changed."""
        validate_note(note_id)
        if note_id not in self._notes:
            return False
        self._notes.discard(note_id)
        self._notify(NOTE_OFF, note_id)
        return True

    def clear(self) -> None:
        """Turn every sounding note off, lowest first."""
        for note_id in self.sorted_ids():
            self.note_off(note_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_on(self, note_id: int) -> bool:
        return note_id in self._notes

    def sorted_ids(self) -> list[int]:
        """All sounding notes in ascending numeric order."""
        return sorted(self._notes, key=int)

    def ids_for_clef(self, clef: str) -> list[int]:
        """
        Sounding notes that belong on one stave, ascending.

        Raises:
            InvalidArgument: If *clef* is not "treble" or "bass".
        """
        if clef not in CLEFS:
            raise InvalidArgument(f"Invalid clef '{clef}'. Use one of: {', '.join(CLEFS)}.")
        return [note_id for note_id in self.sorted_ids() if belongs_to_clef(note_id, clef)]

    def has_any(self, clef: str | None = None) -> bool:
        """True if any note is on, optionally only counting one stave."""
        if clef is None:
            return bool(self._notes)
        return bool(self.ids_for_clef(clef))

    def pitches(self, clef: str | None = None) -> list[tuple[int, int]]:
        """``(pitch_class, octave)`` pairs for the sounding notes, ascending."""
        note_ids = self.sorted_ids() if clef is None else self.ids_for_clef(clef)
        return [(pitch_class(n), octave(n)) for n in note_ids]

    def __len__(self) -> int:
        return len(self._notes)

    def __contains__(self, note_id: object) -> bool:
        return note_id in self._notes

    def __iter__(self):
        return iter(self.sorted_ids())
