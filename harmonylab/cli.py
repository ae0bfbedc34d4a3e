"""harmonylab CLI entry point."""

import logging
import sys
from dataclasses import fields, replace

import click

from harmonylab import __version__
from harmonylab.analysis import analyze as analyze_notes
from harmonylab.errors import HarmonyLabError
from harmonylab.key_signature import KEY_NAMES, KeySignature, TieBreak
from harmonylab.midi_replay import note_events, replay as replay_events
from harmonylab.notation import NOTATERS, NotationContext, Stave
from harmonylab.note_set import NoteSet
from harmonylab.pitch_speller import parse_note
from harmonylab.settings import AnalysisSettings, DisplayModes
from harmonylab.tables import Convention

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Nominal stave geometry for text output; only the first bar carries key/tempo.
_STAVES = {
    "treble": Stave(start_x=0, top_y=40, bottom_y=80),
    "bass": Stave(start_x=0, top_y=120, bottom_y=160),
}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)


def _fail(message: str) -> None:
    click.echo(f"  ERROR: {message}", err=True)
    sys.exit(1)


def _resolve_settings(
    settings_path: str | None,
    key: str | None,
    convention: str | None,
    tie_break: str | None,
) -> AnalysisSettings:
    """Load settings (or defaults), then apply command-line overrides."""
    data = AnalysisSettings.load(settings_path).to_dict() if settings_path else {}
    if key is not None:
        data["key"] = key
    if convention is not None:
        data["convention"] = convention
    if tie_break is not None:
        data["tie_break"] = tie_break
    return AnalysisSettings.from_mapping(data)


def _settings_options(func):
    func = click.option(
        "--tie-break",
        type=click.Choice([t.value for t in TieBreak], case_sensitive=False),
        default=None,
        help="How chromatic notes between two scale steps are read (default: below).",
    )(func)
    func = click.option(
        "--convention",
        type=click.Choice([c.value for c in Convention], case_sensitive=False),
        default=None,
        help="Chord/interval labels: Roman numerals (degree) or letter names (letter).",
    )(func)
    func = click.option(
        "--settings",
        "settings_path",
        type=click.Path(exists=True, dir_okay=False, readable=True),
        default=None,
        metavar="PATH",
        help="JSON settings file.",
    )(func)
    func = click.option(
        "--key",
        "-k",
        default=None,
        metavar="KEY",
        help='Key signature, e.g. "Eb major", "c# minor", "G" or "e" (default: C major).',
    )(func)
    return func


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="harmonylab")
@click.option("--verbose", "-v", is_flag=True, help="Log matching decisions.")
def main(verbose: bool) -> None:
    """harmonylab: music-theory labels for the notes you are playing."""
    _setup_logging(verbose)


# ── analyze subcommand ─────────────────────────────────────────────────────────

@main.command()
@click.argument("notes", nargs=-1, required=True)
@_settings_options
def analyze(
    notes: tuple[str, ...],
    key: str | None,
    settings_path: str | None,
    convention: str | None,
    tie_break: str | None,
) -> None:
    """
    Label a set of notes given as MIDI numbers or names.

    \b
    Examples:
      harmonylab analyze C4 E4 G4
      harmonylab analyze 64 67 72 --key "C major"
      harmonylab analyze B3 D4 F4 Ab4 --key "c minor" --convention letter
    """
    try:
        settings = _resolve_settings(settings_path, key, convention, tie_break)
        # a one-off query shows every label, whatever the display flags say
        settings = replace(
            settings,
            enabled=True,
            mode=DisplayModes(**{f.name: True for f in fields(DisplayModes)}),
        )
        key_signature = settings.key_signature()
        note_ids = sorted({parse_note(text) for text in notes})
        report = analyze_notes(note_ids, key_signature, settings)
    except (HarmonyLabError, OSError) as exc:
        _fail(str(exc))
        return

    click.echo(f"Key    : {key_signature.display_name}")
    click.echo(f"Notes  : {' '.join(str(n) for n in report.notes)}")
    items = report.items()
    if not items:
        click.echo("  (nothing recognized)")
    for label, value in items:
        click.echo(f"  {label:<13}: {value}")


# ── keys subcommand ────────────────────────────────────────────────────────────

@main.command()
def keys() -> None:
    """List the supported key signatures."""
    for mode, tonics in KEY_NAMES.items():
        names = [KeySignature.from_name(tonic, mode).short_name for tonic in tonics]
        click.echo(f"{mode:<6}: {' '.join(names)}")


# ── replay subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("midi_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@_settings_options
def replay(
    midi_file: str,
    key: str | None,
    settings_path: str | None,
    convention: str | None,
    tie_break: str | None,
) -> None:
    """
    Play a MIDI file through the analyzer and print what each stave shows.

    MIDI_FILE is the path to an existing .mid file.

    \b
    Examples:
      harmonylab replay chorale.mid --key "g minor"
      harmonylab replay exercise.mid --settings lesson.json
    """
    try:
        settings = _resolve_settings(settings_path, key, convention, tie_break)
        key_signature = settings.key_signature()
        events = note_events(midi_file)
    except (HarmonyLabError, OSError) as exc:
        _fail(str(exc))
        return

    click.echo(f"harmonylab v{__version__}")
    click.echo(f"  MIDI   : {midi_file}")
    click.echo(f"  Key    : {key_signature.display_name}")
    click.echo()

    note_set = NoteSet()
    first_bar = True
    for offset, changed in replay_events(events, note_set):
        if not changed and not first_bar:
            continue
        lines = []
        for clef, notater in NOTATERS.items():
            context = NotationContext(
                stave=replace(_STAVES[clef], first_bar=first_bar),
                key=key_signature,
                settings=settings,
                notes=note_set.sorted_ids() if note_set.has_any() else None,
            )
            lines.extend(annotation.text for annotation in notater.notate(context))
        first_bar = False
        notes = " ".join(str(n) for n in note_set.sorted_ids()) or "-"
        click.echo(f"  {offset:7.2f}  {notes:<20}  {' | '.join(lines)}")
