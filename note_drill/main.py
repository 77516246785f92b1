#!/usr/bin/env python3

import os
from typing import Optional

import click
import pyfiglet

from .core.config import ConfigManager
from .core.factory import DrillFactory
from .drill_session import DrillMode, DrillSession
from .errors import NoteDrillError
from .fretboard import TUNINGS, positions_for_pitch_class
from .logger import get_logger
from .logging_config import setup_logging
from .note_matcher import NoteMatcher
from .note_types import Pitch, Position, pitch_of
from .note_utils import (
    canonicalize,
    enharmonic_flat_spelling,
    parse_pitch,
    pitch_from_frequency,
    pitch_to_frequency,
)
from .staff import staff_placement
from .stats import STATS_FILENAME, JsonStatsStore
from .trainers import GUITAR, TREBLE, UKULELE, FretboardTrainer, choice_options

logger = get_logger(__name__)

LINE_NAMES = ["bottom", "second", "middle", "fourth", "top"]
SKIP = "next"


def describe_step(step: int) -> str:
    """Plain-language staff location for a diatonic step (E4 = 0)."""
    if 0 <= step <= 8:
        index = step // 2
        if step % 2 == 0:
            return f"{LINE_NAMES[index]} line"
        return f"space above the {LINE_NAMES[index]} line"
    if step < 0:
        return f"{-step} step(s) below the bottom line"
    return f"{step - 8} step(s) above the top line"


def banner(text: str, font: str) -> str:
    return pyfiglet.figlet_format(text, font=font)


def parse_position(text: str) -> Optional[Position]:
    """Parse 'string fret' (e.g. '6 3' or '6,3') into a Position."""
    parts = text.replace(",", " ").split()
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        return None
    return Position(int(parts[0]), int(parts[1]))


def default_stats_path(config: ConfigManager) -> str:
    return os.path.join(config.config_dir, STATS_FILENAME)


def parse_pitch_or_frequency(text: str) -> Pitch:
    """Parse a note name like 'C#4', or a frequency in Hz like '440'."""
    try:
        freq = float(text)
    except ValueError:
        try:
            return parse_pitch(text)
        except NoteDrillError as e:
            raise click.BadParameter(str(e))
    pitch = pitch_from_frequency(freq)
    if pitch is None:
        raise click.BadParameter(f"Frequency must be positive: {text}")
    return pitch


def status_line(session: DrillSession) -> str:
    line = f"Correct: {session.score.correct} / {session.score.attempts}  Streak: {session.streak}"
    if session.mode is DrillMode.TIMED:
        line += f"  Time remaining: {session.time_remaining}s"
    return line


def round_over(session: DrillSession) -> bool:
    return session.mode is DrillMode.TIMED and not session.is_timer_active


def run_treble(session: DrillSession, rounds: int, font: str) -> None:
    for _ in range(rounds):
        if round_over(session):
            break
        target = pitch_of(session.current_target)
        placement = staff_placement(target)
        options = choice_options(session.rng, target)
        click.echo(f"\nTreble staff: note on the {describe_step(placement.step)}")
        if placement.ledger_lines:
            click.echo(f"Ledger lines at steps {placement.ledger_lines}")
        while not round_over(session):
            answer = click.prompt(f"Name it {options} ('next' to skip)", type=str)
            if answer.strip().lower() == SKIP:
                click.echo(f"It was {canonicalize(target)}")
                break
            result = session.submit_answer(answer)
            if result["correct"]:
                click.echo(banner(str(result["canonical"]), font))
                click.echo("Correct!")
                click.echo(status_line(session))
                break
            click.echo("Try again!")
            click.echo(status_line(session))
        session.next_target()


def run_fretboard(trainer: FretboardTrainer, rounds: int, font: str, use_flats: bool) -> None:
    session = trainer.session
    for _ in range(rounds):
        if round_over(session):
            break
        target = pitch_of(trainer.target)
        shown = enharmonic_flat_spelling(target) if use_flats else target
        click.echo(banner(shown.name, font))
        if trainer.required_position is not None:
            click.echo(f"Find it on string {trainer.required_position.string}")

        while True:
            position = parse_position(click.prompt("Position (string fret)", type=str))
            if position is None:
                click.echo("Enter a string and a fret, e.g. '6 3'.")
                continue
            feedback = trainer.select(position)
            if feedback.status == "warn":
                click.echo(feedback.message)
                continue
            break

        feedback = trainer.submit()
        click.echo(feedback.message)
        if trainer.revealed:
            click.echo("Positions: " + ", ".join(str(p) for p in trainer.revealed))
        click.echo(status_line(session))
        trainer.next()


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.option("--config-dir", type=click.Path(file_okay=False), default=None, help="Configuration directory.")
@click.pass_context
def main(ctx, debug, config_dir):
    """Note Drill - practice reading and locating notes"""
    setup_logging(level="DEBUG" if debug else "WARNING")
    ctx.obj = ConfigManager(config_dir)


@main.command()
@click.option("--trainer", "-t", type=click.Choice([TREBLE, GUITAR, UKULELE]), default=TREBLE, help="Drill to run.")
@click.option("--hard", is_flag=True, help="Pin fretboard answers to one exact string and fret.")
@click.option("--timed", is_flag=True, help="Play a timed round instead of practice.")
@click.option("--seed", type=int, default=None, help="Seed for a reproducible drill.")
@click.option("--rounds", "-n", type=click.IntRange(min=1), default=10, help="Number of prompts.")
@click.option("--stats-file", type=click.Path(dir_okay=False), default=None, help="Where to keep statistics.")
@click.pass_obj
def drill(config, trainer, hard, timed, seed, rounds, stats_file):
    """Run an interactive drill"""
    display = config.get_config("display")
    font = display.get("figlet_font", "standard")
    factory = DrillFactory(config)
    store = JsonStatsStore(stats_file or default_stats_path(config))

    if trainer == TREBLE:
        fretboard = None
        session = factory.create_treble_session(seed=seed)
    else:
        fretboard = factory.create_fretboard_trainer(trainer, hard=hard, seed=seed)
        session = fretboard.session

    store.attach(session, trainer)
    with session:
        if timed:
            session.start_timed()
        try:
            if fretboard is None:
                run_treble(session, rounds, font)
            else:
                run_fretboard(fretboard, rounds, font, display.get("use_flats", False))
        except click.Abort:
            click.echo("\nStopped.")
        finally:
            logger.info("Drill finished: %s", status_line(session))

    click.echo(f"\nFinal score: {session.score.correct} / {session.score.attempts}")


@main.command()
@click.argument("pitch_class")
@click.option("--instrument", "-i", type=click.Choice(sorted(TUNINGS)), default=GUITAR)
def positions(pitch_class, instrument):
    """List every position (frets 0-12) of a pitch class"""
    normalized = NoteMatcher.normalize_to_sharp(pitch_class)
    if normalized is None:
        raise click.BadParameter(f"Unknown pitch class: {pitch_class}")
    for position in positions_for_pitch_class(TUNINGS[instrument], normalized):
        click.echo(f"string {position.string} fret {position.fret}")


@main.command()
@click.argument("pitch")
def staff(pitch):
    """Show where a pitch (name or frequency in Hz) sits on the treble staff"""
    parsed = parse_pitch_or_frequency(pitch)
    placement = staff_placement(parsed)
    click.echo(f"{parsed}: step {placement.step} ({describe_step(placement.step)})")
    click.echo(f"Ledger lines: {placement.ledger_lines or 'none'}")
    click.echo(f"Accidental: {placement.accidental or 'none'}")
    click.echo(f"Frequency: {pitch_to_frequency(parsed):.2f} Hz")


@main.command()
@click.option("--stats-file", type=click.Path(dir_okay=False), default=None)
@click.pass_obj
def stats(config, stats_file):
    """Show stored statistics"""
    store = JsonStatsStore(stats_file or default_stats_path(config))
    for trainer in (TREBLE, GUITAR, UKULELE):
        progress = store.load(trainer)
        click.echo(
            f"{trainer}: {progress.total_correct}/{progress.total_attempts} correct "
            f"({progress.accuracy * 100:.0f}%), best streak {progress.best_streak}"
        )


if __name__ == "__main__":
    main()
