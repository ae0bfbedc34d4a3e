"""Analysis settings, built once at startup and passed to whoever needs them."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

from harmonylab.errors import InvalidArgument
from harmonylab.key_signature import KeySignature, TieBreak
from harmonylab.tables import Convention

logger = logging.getLogger(__name__)

#: Pairs the notaters never draw together; if both are on, neither is drawn.
EXCLUSIVE_PAIRS: tuple[tuple[str, str], ...] = (
    ("note_names", "helmholtz"),
    ("scale_degrees", "solfege"),
)


@dataclass(frozen=True)
class DisplayModes:
    """Which analyzer outputs are requested."""

    note_names: bool = False
    helmholtz: bool = False
    scale_degrees: bool = False
    solfege: bool = False
    intervals: bool = True
    roman_numerals: bool = True

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "DisplayModes":
        _reject_unknown(cls, data, "mode")
        for name, value in data.items():
            if not isinstance(value, bool):
                raise InvalidArgument(f"Display mode '{name}' must be true or false, got {value!r}.")
        return cls(**data)

    def exclusive(self, first: str, second: str) -> str | None:
        """
        The one option of a pair that is on, or None if neither or both are.

        Raises:
            InvalidArgument: If the two options are not one of EXCLUSIVE_PAIRS.
        """
        if (first, second) not in EXCLUSIVE_PAIRS:
            raise InvalidArgument(f"'{first}' and '{second}' are not an exclusive pair.")
        first_on, second_on = getattr(self, first), getattr(self, second)
        if first_on and not second_on:
            return first
        if second_on and not first_on:
            return second
        return None


@dataclass(frozen=True)
class AnalysisSettings:
    """
    Everything the analyzers and notaters read from configuration.

    Attributes:
        enabled:    Master switch for chord/note analysis.
        mode:       Per-output display flags.
        key:        Key name understood by ``KeySignature.parse``.
        convention: Chord and interval labeling convention.
        tie_break:  How chromatic tones between two steps are read.
        tempo:      Metronome mark shown on the first bar, if any.
    """

    enabled: bool = True
    mode: DisplayModes = field(default_factory=DisplayModes)
    key: str = "C major"
    convention: Convention = Convention.DEGREE
    tie_break: TieBreak = TieBreak.BELOW
    tempo: int | None = None

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "AnalysisSettings":
        """
        Validate and build settings from parsed JSON.

        Raises:
            InvalidArgument: On unknown keys or values of the wrong kind.
        """
        _reject_unknown(cls, data, "setting")
        values = dict(data)

        if "enabled" in values and not isinstance(values["enabled"], bool):
            raise InvalidArgument("Setting 'enabled' must be true or false.")
        if "mode" in values:
            if not isinstance(values["mode"], dict):
                raise InvalidArgument("Setting 'mode' must be an object.")
            values["mode"] = DisplayModes.from_mapping(values["mode"])
        if "key" in values:
            # Fail at load time rather than on first analysis.
            KeySignature.parse(str(values["key"]))
        if "convention" in values:
            values["convention"] = _enum_value(Convention, values["convention"], "convention")
        if "tie_break" in values:
            values["tie_break"] = _enum_value(TieBreak, values["tie_break"], "tie_break")
        tempo = values.get("tempo")
        if tempo is not None and (isinstance(tempo, bool) or not isinstance(tempo, int) or tempo <= 0):
            raise InvalidArgument(f"Setting 'tempo' must be a positive integer, got {tempo!r}.")

        return cls(**values)

    @classmethod
    def load(cls, path: str | Path) -> "AnalysisSettings":
        """
        Read settings from a JSON file.

        Raises:
            OSError: If the file cannot be read.
            InvalidArgument: If the file is not a JSON object of known settings.
        """
        text = Path(path).read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidArgument(f"Settings file '{path}' is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise InvalidArgument(f"Settings file '{path}' must contain a JSON object.")
        logger.info("Loaded analysis settings from %s", path)
        return cls.from_mapping(data)

    def key_signature(self) -> KeySignature:
        return KeySignature.parse(self.key)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["convention"] = self.convention.value
        data["tie_break"] = self.tie_break.value
        return data


def _reject_unknown(cls: type, data: dict[str, Any], kind: str) -> None:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise InvalidArgument(f"Unknown {kind}(s): {', '.join(unknown)}. Use: {', '.join(sorted(known))}.")


def _enum_value(enum_cls: type, value: Any, name: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise InvalidArgument(f"Setting '{name}' must be one of: {choices}.") from None
