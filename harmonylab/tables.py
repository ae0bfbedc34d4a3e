"""Static chord-shape and interval-shape lookup tables."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from harmonylab.key_signature import MAJOR, MINOR, MODE_STEPS


class Convention(str, Enum):
    """
    Labeling convention for chord and interval names.

    LETTER spells chords from their root letter ("G7/B") and writes intervals
    out in words ("major third"). DEGREE labels chords by Roman numeral
    relative to the tonic ("V65") and intervals by quality + number ("M3").
    """

    LETTER = "letter"
    DEGREE = "degree"


# ── Chord shapes (semitones above the root) ──────────────────────────────────

MAJOR_TRIAD = (0, 4, 7)
MINOR_TRIAD = (0, 3, 7)
DIMINISHED_TRIAD = (0, 3, 6)
AUGMENTED_TRIAD = (0, 4, 8)
MAJOR_SEVENTH = (0, 4, 7, 11)
DOMINANT_SEVENTH = (0, 4, 7, 10)
MINOR_SEVENTH = (0, 3, 7, 10)
HALF_DIMINISHED_SEVENTH = (0, 3, 6, 10)
DIMINISHED_SEVENTH = (0, 3, 6, 9)

CHORD_SHAPES: dict[str, tuple[int, ...]] = {
    "major": MAJOR_TRIAD,
    "minor": MINOR_TRIAD,
    "diminished": DIMINISHED_TRIAD,
    "augmented": AUGMENTED_TRIAD,
    "major seventh": MAJOR_SEVENTH,
    "dominant seventh": DOMINANT_SEVENTH,
    "minor seventh": MINOR_SEVENTH,
    "half-diminished seventh": HALF_DIMINISHED_SEVENTH,
    "diminished seventh": DIMINISHED_SEVENTH,
}

#: Suffix after the root letter in LETTER convention.
QUALITY_SYMBOLS: dict[str, str] = {
    "major": "",
    "minor": "m",
    "diminished": "dim",
    "augmented": "aug",
    "major seventh": "maj7",
    "dominant seventh": "7",
    "minor seventh": "m7",
    "half-diminished seventh": "m7b5",
    "diminished seventh": "dim7",
}

ROMAN_NUMERALS: tuple[str, ...] = ("i", "ii", "iii", "iv", "v", "vi", "vii")

THIRDS = frozenset({3, 4})
FIFTHS = frozenset({6, 7, 8})

#: Figured-bass suffix by chord member in the bass (0=root, 1=third, ...).
TRIAD_FIGURES: tuple[str, ...] = ("", "6", "64")
SEVENTH_FIGURES: tuple[str, ...] = ("7", "65", "43", "42")


@dataclass(frozen=True)
class ChordTableEntry:
    """
    One recognizable chord relative to a key.

    Attributes:
        root:      Semitones from the tonic up to the chord root.
        intervals: Semitones above the root, root first, in chord-member order.
        quality:   Key of CHORD_SHAPES, e.g. "minor seventh".
        numeral:   Roman numeral without figures, e.g. "ii", "vii°", "bVI".
        mode:      Mode of the key this entry applies to.
        applied:   Secondary-function suffix, e.g. "/V" (empty for none).
    """

    root: int
    intervals: tuple[int, ...]
    quality: str
    numeral: str
    mode: str
    applied: str = ""

    def __post_init__(self) -> None:
        members = set(self.intervals)
        if self.intervals[:1] != (0,) or not members & THIRDS or not members & FIFTHS:
            raise ValueError(f"Chord entry {self.numeral}{self.applied} has no triadic core.")

    @property
    def is_seventh(self) -> bool:
        return len(self.intervals) > 3

    @property
    def diatonic_root(self) -> bool:
        """True if the root lies on a step of the key's own scale."""
        return self.root in MODE_STEPS[self.mode]

    @property
    def degree(self) -> int:
        """
        Scale step (0-6) of the chord root, counting through any applied
        function: V/V sits on step 1 (the second degree).
        """
        steps = _numeral_step(self.numeral)
        if self.applied:
            steps += _numeral_step(self.applied.lstrip("/"))
        return steps % 7

    def figure(self, member: int) -> str:
        """Figured-bass suffix for the chord member (0-3) in the bass."""
        figures = SEVENTH_FIGURES if self.is_seventh else TRIAD_FIGURES
        return figures[member]

    def roman(self, figure: str) -> str:
        return f"{self.numeral}{figure}{self.applied}"


def _numeral_step(numeral: str) -> int:
    return ROMAN_NUMERALS.index(numeral.lower().lstrip("b#").rstrip("°ø+"))


def _entries(mode: str, rows: list[tuple]) -> tuple[ChordTableEntry, ...]:
    entries = []
    for row in rows:
        root, quality, numeral, *applied = row
        entries.append(
            ChordTableEntry(
                root=root,
                intervals=CHORD_SHAPES[quality],
                quality=quality,
                numeral=numeral,
                mode=mode,
                applied=applied[0] if applied else "",
            )
        )
    return tuple(entries)


# (root above tonic, quality, numeral[, applied])
_MAJOR_ROWS: list[tuple] = [
    # diatonic triads
    (0, "major", "I"),
    (2, "minor", "ii"),
    (4, "minor", "iii"),
    (5, "major", "IV"),
    (7, "major", "V"),
    (9, "minor", "vi"),
    (11, "diminished", "vii°"),
    # diatonic sevenths
    (0, "major seventh", "I"),
    (2, "minor seventh", "ii"),
    (4, "minor seventh", "iii"),
    (5, "major seventh", "IV"),
    (7, "dominant seventh", "V"),
    (9, "minor seventh", "vi"),
    (11, "half-diminished seventh", "viiø"),
    # borrowed from the parallel minor
    (0, "minor", "i"),
    (2, "diminished", "ii°"),
    (2, "half-diminished seventh", "iiø"),
    (3, "major", "bIII"),
    (5, "minor", "iv"),
    (5, "minor seventh", "iv"),
    (8, "major", "bVI"),
    (10, "major", "bVII"),
    (11, "diminished seventh", "vii°"),
    (1, "major", "bII"),
    # secondary dominants and leading-tone chords
    (0, "dominant seventh", "V", "/IV"),
    (2, "major", "V", "/V"),
    (2, "dominant seventh", "V", "/V"),
    (4, "major", "V", "/vi"),
    (4, "dominant seventh", "V", "/vi"),
    (9, "major", "V", "/ii"),
    (9, "dominant seventh", "V", "/ii"),
    (11, "major", "V", "/iii"),
    (11, "dominant seventh", "V", "/iii"),
    (6, "diminished", "vii°", "/V"),
    (6, "half-diminished seventh", "viiø", "/V"),
    (6, "diminished seventh", "vii°", "/V"),
    (1, "diminished seventh", "vii°", "/ii"),
    (8, "diminished seventh", "vii°", "/vi"),
]

_MINOR_ROWS: list[tuple] = [
    # natural-minor triads
    (0, "minor", "i"),
    (2, "diminished", "ii°"),
    (3, "major", "III"),
    (5, "minor", "iv"),
    (7, "minor", "v"),
    (8, "major", "VI"),
    (10, "major", "VII"),
    # harmonic and melodic minor triads
    (7, "major", "V"),
    (11, "diminished", "vii°"),
    (3, "augmented", "III+"),
    (5, "major", "IV"),
    (2, "minor", "ii"),
    # sevenths
    (0, "minor seventh", "i"),
    (2, "half-diminished seventh", "iiø"),
    (3, "major seventh", "III"),
    (5, "minor seventh", "iv"),
    (7, "minor seventh", "v"),
    (7, "dominant seventh", "V"),
    (8, "major seventh", "VI"),
    (10, "dominant seventh", "VII"),
    (11, "diminished seventh", "vii°"),
    (11, "half-diminished seventh", "viiø"),
    # chromatic
    (0, "major", "I"),
    (1, "major", "bII"),
    (0, "dominant seventh", "V", "/iv"),
    (2, "major", "V", "/V"),
    (2, "dominant seventh", "V", "/V"),
    (6, "diminished", "vii°", "/V"),
    (6, "diminished seventh", "vii°", "/V"),
]

CHORD_TABLES: dict[str, tuple[ChordTableEntry, ...]] = {
    MAJOR: _entries(MAJOR, _MAJOR_ROWS),
    MINOR: _entries(MINOR, _MINOR_ROWS),
}


def chord_table(mode: str) -> tuple[ChordTableEntry, ...]:
    """All chord entries that apply in *mode*."""
    return CHORD_TABLES[mode]


# ── Interval shapes ───────────────────────────────────────────────────────────

ORDINALS: tuple[str, ...] = ("unison", "second", "third", "fourth", "fifth", "sixth", "seventh")
QUALITY_ABBREVIATIONS: dict[str, str] = {
    "perfect": "P",
    "major": "M",
    "minor": "m",
    "augmented": "A",
    "diminished": "d",
}


@dataclass(frozen=True)
class IntervalTableEntry:
    """
    One interval shape, reduced to within an octave.

    Attributes:
        semitones: Semitone count mod 12.
        steps:     Letter-name (diatonic) steps mod 7.
        quality:   "perfect", "major", "minor", "augmented" or "diminished".
    """

    semitones: int
    steps: int
    quality: str

    def number(self, diatonic_steps: int) -> int:
        """Interval number as counted on the stave (third = 3, tenth = 10)."""
        return diatonic_steps + 1

    def ordinal(self, diatonic_steps: int, compound: bool = False) -> str:
        # an octave span pushed past 12 semitones reads as a compound unison
        if self.steps == 0 and diatonic_steps > 0 and (diatonic_steps > 7 or not compound):
            return "octave"
        return ORDINALS[self.steps]

    def name(
        self,
        diatonic_steps: int,
        convention: Convention = Convention.DEGREE,
        compound: bool = False,
    ) -> str:
        """
        Display name for an interval spanning *diatonic_steps* letter names.

        Compound intervals reuse the simple entry with a "compound" marker
        (LETTER, "compound augmented unison" for C4-C#5) or their full stave
        number (DEGREE, e.g. "M10").
        """
        if convention == Convention.DEGREE:
            return f"{QUALITY_ABBREVIATIONS[self.quality]}{self.number(diatonic_steps)}"
        simple = f"{self.quality} {self.ordinal(diatonic_steps, compound)}"
        return f"compound {simple}" if compound else simple


_INTERVAL_ROWS: list[tuple[int, int, str]] = [
    (0, 0, "perfect"),
    (1, 0, "augmented"),
    (11, 0, "diminished"),
    (1, 1, "minor"),
    (2, 1, "major"),
    (3, 1, "augmented"),
    (2, 2, "diminished"),
    (3, 2, "minor"),
    (4, 2, "major"),
    (4, 3, "diminished"),
    (5, 3, "perfect"),
    (6, 3, "augmented"),
    (6, 4, "diminished"),
    (7, 4, "perfect"),
    (8, 4, "augmented"),
    (7, 5, "diminished"),
    (8, 5, "minor"),
    (9, 5, "major"),
    (10, 5, "augmented"),
    (9, 6, "diminished"),
    (10, 6, "minor"),
    (11, 6, "major"),
]

INTERVAL_TABLE: dict[tuple[int, int], IntervalTableEntry] = {
    (semitones, steps): IntervalTableEntry(semitones, steps, quality)
    for semitones, steps, quality in _INTERVAL_ROWS
}


def lookup_interval(semitones: int, diatonic_steps: int) -> IntervalTableEntry | None:
    """Table entry for an unfolded interval, or None if the shape is not recognized."""
    return INTERVAL_TABLE.get((semitones % 12, diatonic_steps % 7))
