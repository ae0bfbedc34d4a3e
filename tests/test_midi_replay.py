"""Unit tests for MIDI replay (fake music21 streams, no MIDI file needed)."""

import os
from types import SimpleNamespace

import pytest

from harmonylab import midi_replay
from harmonylab.midi_replay import NoteEvent, events_from_score, note_events, replay
from harmonylab.note_set import NOTE_OFF, NOTE_ON, NoteSet


def _note(midi: int, offset: float, length: float) -> SimpleNamespace:
    return SimpleNamespace(
        offset=offset,
        duration=SimpleNamespace(quarterLength=length),
        isChord=False,
        pitch=SimpleNamespace(midi=midi),
    )


def _chord(midis: list[int], offset: float, length: float) -> SimpleNamespace:
    return SimpleNamespace(
        offset=offset,
        duration=SimpleNamespace(quarterLength=length),
        isChord=True,
        pitches=[SimpleNamespace(midi=midi) for midi in midis],
    )


def _score(*elements: SimpleNamespace) -> SimpleNamespace:
    flat = SimpleNamespace(notes=list(elements))
    return SimpleNamespace(flatten=lambda: flat)


def test_events_from_score_orders_offs_first() -> None:
    score = _score(_note(60, 0.0, 1.0), _note(62, 1.0, 1.0))
    assert events_from_score(score) == [
        NoteEvent(0.0, NOTE_ON, 60),
        NoteEvent(1.0, NOTE_OFF, 60),
        NoteEvent(1.0, NOTE_ON, 62),
        NoteEvent(2.0, NOTE_OFF, 62),
    ]


def test_events_from_score_expands_chords() -> None:
    events = events_from_score(_score(_chord([64, 60, 67], 0.0, 2.0)))
    assert [event.note_id for event in events if event.command == NOTE_ON] == [60, 64, 67]
    assert all(event.offset == 2.0 for event in events if event.command == NOTE_OFF)


def test_note_events_uses_parsed_score(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(midi_replay, "_parse_midi_score", lambda path: _score(_note(48, 0.0, 0.5)))
    assert note_events("song.mid") == [NoteEvent(0.0, NOTE_ON, 48), NoteEvent(0.5, NOTE_OFF, 48)]


def test_replay_groups_simultaneous_events() -> None:
    events = [
        NoteEvent(0.0, NOTE_ON, 60),
        NoteEvent(0.0, NOTE_ON, 64),
        NoteEvent(1.0, NOTE_OFF, 60),
        NoteEvent(1.0, NOTE_ON, 67),
    ]
    note_set = NoteSet()
    snapshots = []
    for offset, changed in replay(events, note_set):
        snapshots.append((offset, changed, note_set.sorted_ids()))
    assert snapshots == [(0.0, True, [60, 64]), (1.0, True, [64, 67])]


def test_replay_restrikes_repeated_note() -> None:
    events = [
        NoteEvent(1.0, NOTE_ON, 60),
        NoteEvent(0.0, NOTE_ON, 60),
        NoteEvent(1.0, NOTE_OFF, 60),
    ]
    note_set = NoteSet()
    seen: list[tuple[str, int]] = []
    note_set.subscribe(lambda command, note_id: seen.append((command, note_id)))
    list(replay(events, note_set))
    assert seen == [(NOTE_ON, 60), (NOTE_OFF, 60), (NOTE_ON, 60)]
    assert note_set.is_on(60)


def test_zero_length_note_never_sounds() -> None:
    score = _score(_note(60, 0.0, 0.0), _note(64, 1.0, 1.0))
    events = events_from_score(score)
    assert [event.note_id for event in events] == [64, 64]

    note_set = NoteSet()
    list(replay(events, note_set))
    assert note_set.sorted_ids() == []


def test_overlapping_notes_of_one_pitch_hold_until_the_last_ends() -> None:
    score = _score(_note(60, 0.0, 2.0), _note(60, 1.0, 2.0), _note(67, 0.0, 4.0))
    note_set = NoteSet()
    snapshots = []
    for offset, changed in replay(events_from_score(score), note_set):
        snapshots.append((offset, changed, note_set.sorted_ids()))
    assert snapshots == [
        (0.0, True, [60, 67]),
        (1.0, False, [60, 67]),
        (2.0, False, [60, 67]),
        (3.0, True, [67]),
        (4.0, True, []),
    ]


def test_replay_reports_unchanged_group() -> None:
    events = [NoteEvent(0.0, NOTE_OFF, 60)]
    assert list(replay(events, NoteSet())) == [(0.0, False)]


# ---------------------------------------------------------------------------
# Integration tests: require a real .mid file and music21 installed.
# Skip these in CI unless explicitly opted in with -m integration.
# ---------------------------------------------------------------------------

@pytest.mark.integration
def test_note_events_from_real_file() -> None:
    """Smoke test: a MIDI file parses into balanced on/off events."""
    mid_files = [f for f in os.listdir(".") if f.endswith(".mid")]
    if not mid_files:
        pytest.skip("No .mid file found in working directory for integration test.")

    events = note_events(mid_files[0])

    assert events
    ons = sum(1 for event in events if event.command == NOTE_ON)
    offs = sum(1 for event in events if event.command == NOTE_OFF)
    assert ons == offs
