"""
Clef notaters: decide which analysis text goes above or below each stave.

Each clef has one entry in ``NOTATERS`` with the same three operations:
``notate_stave`` (always drawn, e.g. tempo or key name on the first bar),
``notate_chord`` (drawn only while analysis is enabled) and
``vertical_position`` (the baseline the text hangs from). The treble stave
labels single notes; the bass stave labels intervals and chords.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from harmonylab.chord_matcher import find_chord
from harmonylab.degree_analyzer import scale_degree_of, solfege
from harmonylab.errors import InvalidArgument
from harmonylab.interval_analyzer import interval_of
from harmonylab.key_signature import KeySignature
from harmonylab.note_set import BASS, CLEFS, TREBLE
from harmonylab.pitch_speller import helmholtz_name, note_name
from harmonylab.settings import AnalysisSettings

# ── Layout constants ─────────────────────────────────────────────────────────
MARGIN_TOP = 25
MARGIN_BOTTOM = 25
TEXT_LIMIT = 15        # characters per wrapped line
TEXT_LINE_HEIGHT = 15
ROW_SPACING = 25       # between the two treble annotation rows
TEXT_INDENT = 10

_SYMBOLS: tuple[tuple[str, str], ...] = (("#", "♯"), ("b", "♭"))


@dataclass(frozen=True)
class Stave:
    """Geometry of one stave as reported by the renderer."""

    start_x: int
    top_y: int
    bottom_y: int
    first_bar: bool = False


@dataclass(frozen=True)
class Annotation:
    """A line of text to draw at (x, y); ``caret`` asks for a ^ above it."""

    text: str
    x: int
    y: int
    caret: bool = False


@dataclass(frozen=True)
class NotationContext:
    """What a notater needs: where to draw, in which key, with which settings."""

    stave: Stave
    key: KeySignature
    settings: AnalysisSettings
    notes: Sequence[int] | None = None


@dataclass(frozen=True)
class Notater:
    clef: str
    vertical_position: Callable[[Stave], int]
    notate_stave: Callable[[NotationContext], list[Annotation]]
    notate_chord: Callable[[NotationContext], list[Annotation]]

    def notate(self, context: NotationContext) -> list[Annotation]:
        """Stave annotations, plus chord annotations when analysis is on."""
        annotations = self.notate_stave(context)
        if context.settings.enabled and context.notes is not None:
            annotations.extend(self.notate_chord(context))
        return annotations


# ------------------------------------------------------------------
# Text helpers
# ------------------------------------------------------------------

def convert_symbols(text: str) -> str:
    """Swap ASCII accidentals for music symbols ("bVI" -> "♭VI", "F#" -> "F♯")."""
    for ascii_symbol, music_symbol in _SYMBOLS:
        text = text.replace(ascii_symbol, music_symbol)
    return text


def wrap_text(text: str, limit: int = TEXT_LIMIT) -> list[str]:
    """Greedy word wrap; a single word longer than *limit* gets its own line."""
    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= limit or not current:
            current = candidate
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def _text_x(context: NotationContext) -> int:
    return context.stave.start_x + TEXT_INDENT


def _lines(text: str, x: int, y: int) -> list[Annotation]:
    return [
        Annotation(text=line, x=x, y=y + index * TEXT_LINE_HEIGHT)
        for index, line in enumerate(wrap_text(text))
    ]


# ------------------------------------------------------------------
# Treble: single-note labels above the stave
# ------------------------------------------------------------------

def _treble_position(stave: Stave) -> int:
    return stave.top_y - MARGIN_TOP


def _treble_stave(context: NotationContext) -> list[Annotation]:
    tempo = context.settings.tempo
    if not context.stave.first_bar or not tempo:
        return []
    return [Annotation(text=f"♩ = {tempo}", x=_text_x(context), y=_treble_position(context.stave))]


def _treble_chord(context: NotationContext) -> list[Annotation]:
    notes = list(context.notes or [])
    if len(notes) != 1:
        return []

    key, settings = context.key, context.settings
    x = _text_x(context)
    first_row = _treble_position(context.stave)
    second_row = first_row + ROW_SPACING
    annotations = []

    upper = settings.mode.exclusive("scale_degrees", "solfege")
    if upper == "scale_degrees":
        degree = scale_degree_of(notes, key, settings.tie_break)
        if degree is not None:
            annotations.append(Annotation(convert_symbols(degree.label), x, first_row, caret=True))
    elif upper == "solfege":
        syllable = solfege(notes, key, settings.tie_break)
        if syllable:
            annotations.append(Annotation(syllable, x, first_row))

    lower = settings.mode.exclusive("note_names", "helmholtz")
    if lower == "note_names":
        text = convert_symbols(note_name(notes, key))
    elif lower == "helmholtz":
        text = helmholtz_name(notes, key)
    else:
        text = ""
    if text:
        annotations.append(Annotation(text, x, second_row))

    return annotations


# ------------------------------------------------------------------
# Bass: key name, intervals and chords below the stave
# ------------------------------------------------------------------

def _bass_position(stave: Stave) -> int:
    return stave.bottom_y + MARGIN_BOTTOM


def _bass_stave(context: NotationContext) -> list[Annotation]:
    if not context.stave.first_bar:
        return []
    name = context.key.short_name
    # the first character is the tonic letter, which may itself be "b"
    text = f"{name[0]}{convert_symbols(name[1:])}:"
    return [Annotation(text=text, x=_text_x(context), y=_bass_position(context.stave))]


def _bass_chord(context: NotationContext) -> list[Annotation]:
    notes = sorted(set(context.notes or []))
    key, settings = context.key, context.settings
    x, y = _text_x(context), _bass_position(context.stave)

    if len(notes) == 2 and settings.mode.intervals:
        interval = interval_of(notes, key, settings.convention)
        if interval is not None:
            return _lines(interval.name, x, y)
    elif len(notes) > 2 and settings.mode.roman_numerals:
        chord = find_chord(notes, key)
        if chord is not None:
            return _lines(convert_symbols(chord.label(key, settings.convention)), x, y)
    return []


NOTATERS: dict[str, Notater] = {
    TREBLE: Notater(
        clef=TREBLE,
        vertical_position=_treble_position,
        notate_stave=_treble_stave,
        notate_chord=_treble_chord,
    ),
    BASS: Notater(
        clef=BASS,
        vertical_position=_bass_position,
        notate_stave=_bass_stave,
        notate_chord=_bass_chord,
    ),
}


def create_notater(clef: str) -> Notater:
    """
    Notater for a clef.

    Raises:
        InvalidArgument: If there is no notater for *clef*.
    """
    try:
        return NOTATERS[clef]
    except KeyError:
        raise InvalidArgument(f"No notater for clef '{clef}'. Use one of: {', '.join(CLEFS)}.") from None
