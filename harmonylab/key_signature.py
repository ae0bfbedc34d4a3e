"""KeySignature: tonic, mode and the seven-step diatonic frame of a key."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from harmonylab.errors import InvalidArgument, KeySignatureError

# ── Letter and accidental tables ──────────────────────────────────────────────

LETTERS: str = "CDEFGAB"
NATURAL_PITCH_CLASSES: dict[str, int] = {
    "C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11,
}
ACCIDENTAL_SYMBOLS: dict[int, str] = {-2: "bb", -1: "b", 0: "", 1: "#", 2: "##"}
SYMBOL_TO_ACCIDENTAL: dict[str, int] = {
    symbol: offset for offset, symbol in ACCIDENTAL_SYMBOLS.items()
}

MAJOR = "major"
MINOR = "minor"
MODES: tuple[str, ...] = (MAJOR, MINOR)

#: Semitone offsets of each scale step above the tonic.
MODE_STEPS: dict[str, tuple[int, ...]] = {
    MAJOR: (0, 2, 4, 5, 7, 9, 11),
    MINOR: (0, 2, 3, 5, 7, 8, 10),  # natural minor, as written by the key signature
}

#: Conventional key signatures (up to seven sharps or flats).
KEY_NAMES: dict[str, tuple[str, ...]] = {
    MAJOR: ("C", "G", "D", "A", "E", "B", "F#", "C#", "F", "Bb", "Eb", "Ab", "Db", "Gb", "Cb"),
    MINOR: ("A", "E", "B", "F#", "C#", "G#", "D#", "A#", "D", "G", "C", "F", "Bb", "Eb", "Ab"),
}


def signed_semitones(distance: int) -> int:
    """Fold a semitone distance into the range -6..5."""
    return (distance + 6) % 12 - 6


def accidental_symbol(accidental: int) -> str:
    """Text for an accidental offset, e.g. -1 -> "b", 2 -> "##"."""
    try:
        return ACCIDENTAL_SYMBOLS[accidental]
    except KeyError:
        raise InvalidArgument(f"Unsupported accidental offset: {accidental}.") from None


class TieBreak(str, Enum):
    """
    Which diatonic step wins when a chromatic tone sits exactly between two.

    BELOW treats the tone as a raised version of the step underneath it
    (F#/Gb in C major is #4); ABOVE treats it as a lowered version of the
    step above it (b5).
    """

    BELOW = "below"
    ABOVE = "above"


@dataclass(frozen=True)
class DiatonicStep:
    """
    One entry of a key's diatonic frame.

    Attributes:
        pitch_class: 0=C ... 11=B.
        letter:      Letter name "A"-"G".
        accidental:  Semitone offset from the natural letter (-1 = flat, 1 = sharp).
    """

    pitch_class: int
    letter: str
    accidental: int = 0

    @property
    def name(self) -> str:
        return f"{self.letter}{accidental_symbol(self.accidental)}"


@dataclass(frozen=True)
class KeySignature:
    """
    Immutable key context for every analysis call.

    A new key replaces the old value wholesale; nothing here is ever mutated.
    Construction fails with KeySignatureError if the frame is incomplete or
    does not agree with the tonic.
    """

    tonic_pitch_class: int
    mode: str
    diatonic_frame: tuple[DiatonicStep, ...]

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            raise KeySignatureError(f"Unknown mode '{self.mode}'.")
        if len(self.diatonic_frame) != 7:
            raise KeySignatureError(
                f"A diatonic frame needs 7 steps, got {len(self.diatonic_frame)}."
            )
        if not 0 <= self.tonic_pitch_class < 12:
            raise KeySignatureError(f"Tonic pitch class out of range: {self.tonic_pitch_class}.")
        if self.diatonic_frame[0].pitch_class != self.tonic_pitch_class:
            raise KeySignatureError("First step of the diatonic frame must be the tonic.")
        for step in self.diatonic_frame:
            if step.letter not in NATURAL_PITCH_CLASSES:
                raise KeySignatureError(f"Invalid letter name in diatonic frame: {step.letter!r}.")

        first = LETTERS.index(self.diatonic_frame[0].letter)
        for index, step in enumerate(self.diatonic_frame):
            if step.letter != LETTERS[(first + index) % 7]:
                raise KeySignatureError("Diatonic frame letters must be consecutive.")
            natural = NATURAL_PITCH_CLASSES[step.letter]
            if (natural + step.accidental) % 12 != step.pitch_class:
                raise KeySignatureError(f"Step {step.letter}{step.accidental:+d} does not match pitch class {step.pitch_class}.")

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_name(cls, tonic: str, mode: str = MAJOR) -> "KeySignature":
        """
        Build a conventional key signature from a tonic name.

        Args:
            tonic: Letter plus optional accidental, e.g. "C", "F#", "Bb".
            mode:  "major" or "minor".

        Raises:
            InvalidArgument: If the key is not one of the conventional 30.
        """
        mode = mode.strip().lower()
        if mode not in MODES:
            raise InvalidArgument(f"Unknown mode '{mode}'. Use one of: {', '.join(MODES)}.")
        tonic = _normalize_tonic(tonic)
        if tonic not in KEY_NAMES[mode]:
            raise InvalidArgument(f"Unknown key: {tonic} {mode}.")

        letter, accidental = tonic[0], SYMBOL_TO_ACCIDENTAL[tonic[1:]]
        tonic_pc = (NATURAL_PITCH_CLASSES[letter] + accidental) % 12
        first = LETTERS.index(letter)

        frame = []
        for index, offset in enumerate(MODE_STEPS[mode]):
            step_letter = LETTERS[(first + index) % 7]
            step_pc = (tonic_pc + offset) % 12
            frame.append(
                DiatonicStep(
                    pitch_class=step_pc,
                    letter=step_letter,
                    accidental=signed_semitones(step_pc - NATURAL_PITCH_CLASSES[step_letter]),
                )
            )
        return cls(tonic_pitch_class=tonic_pc, mode=mode, diatonic_frame=tuple(frame))

    @classmethod
    def parse(cls, text: str) -> "KeySignature":
        """
        Parse "Eb major", "c# minor", "Bb" or a lower-case short name like "g".

        A bare lower-case tonic means minor, matching ``short_name``.
        """
        parts = text.split()
        if len(parts) == 2:
            return cls.from_name(parts[0], parts[1])
        if len(parts) == 1 and parts[0]:
            mode = MINOR if parts[0][0].islower() else MAJOR
            return cls.from_name(parts[0], mode)
        raise InvalidArgument(f"Cannot parse key name: {text!r}.")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def tonic(self) -> DiatonicStep:
        return self.diatonic_frame[0]

    @property
    def short_name(self) -> str:
        """Display name: "Eb" for E-flat major, "c#" for C-sharp minor."""
        name = self.tonic.name
        return name.lower() if self.mode == MINOR else name

    @property
    def display_name(self) -> str:
        return f"{self.tonic.name} {self.mode}"

    @property
    def pitch_classes(self) -> tuple[int, ...]:
        return tuple(step.pitch_class for step in self.diatonic_frame)

    def step_index(self, pitch_class: int) -> int | None:
        """Index 0-6 of the diatonic step with this pitch class, or None if chromatic."""
        for index, step in enumerate(self.diatonic_frame):
            if step.pitch_class == pitch_class % 12:
                return index
        return None

    def nearest_step(self, pitch_class: int, tie_break: TieBreak = TieBreak.BELOW) -> tuple[int, int]:
        """
        Closest diatonic step to a pitch class.

        Returns:
            ``(step_index, distance)`` where distance is the signed number of
            semitones from the step up to *pitch_class* (0 when diatonic).
        """
        prefer_below = tie_break == TieBreak.BELOW
        candidates = []
        for index, step in enumerate(self.diatonic_frame):
            distance = signed_semitones(pitch_class - step.pitch_class)
            # step below the tone -> positive distance
            tie_rank = 0 if (distance > 0) == prefer_below else 1
            candidates.append((abs(distance), tie_rank, index, distance))
        _, _, index, distance = min(candidates)
        return index, distance

    def __str__(self) -> str:
        return self.display_name


def _normalize_tonic(tonic: str) -> str:
    text = tonic.strip().replace("♯", "#").replace("♭", "b")
    if not text or text[0].upper() not in LETTERS:
        raise InvalidArgument(f"Invalid tonic name: {tonic!r}.")
    suffix = text[1:]
    if suffix not in SYMBOL_TO_ACCIDENTAL:
        raise InvalidArgument(f"Invalid tonic name: {tonic!r}.")
    return text[0].upper() + suffix
