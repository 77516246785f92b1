"""Trainer policies: candidate pools and answer predicates for each drill.

Three trainers share the same :class:`DrillSession` engine:

* ``treble`` - name the pitch class of a note shown on the treble staff
* ``guitar`` / ``ukulele`` - locate the pitch class on the fretboard; in hard
  mode the answer is pinned to one exact string and fret
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, List, Optional, Sequence

from .core.countdown import CountdownFactory
from .core.events import EventEmitter
from .drill_session import DEFAULT_HISTORY, DEFAULT_TIMER, DrillSession
from .fretboard import (
    FRET_RANGE,
    GUITAR_TUNING,
    UKULELE_TUNING,
    Tuning,
    pitch_at_position,
    positions_for_pitch_class,
    scope_pitches,
)
from .logger import get_logger
from .note_matcher import NoteMatcher
from .note_types import NATURAL_PITCH_CLASSES, DrillTarget, Pitch, Position, Target, pitch_of
from .note_utils import canonicalize, pitch_class_of
from .random_source import SeededRandom
from .staff import TREBLE_SCOPE_NATURAL_PITCHES

logger = get_logger(__name__)

TREBLE = "treble"
GUITAR = "guitar"
UKULELE = "ukulele"

TRAINER_TUNINGS: Dict[str, Tuning] = {
    GUITAR: GUITAR_TUNING,
    UKULELE: UKULELE_TUNING,
}


# Treble staff trainer


def evaluate_pitch_class_answer(target: Target, answer: str) -> Dict[str, Any]:
    """Correct when the answered spelling names the target's pitch class."""
    canonical = canonicalize(pitch_of(target))
    return {
        "correct": NoteMatcher.match(canonical.name, answer),
        "canonical": canonical,
    }


def choice_options(rng: SeededRandom, target: Target, count: int = 4) -> List[str]:
    """Multiple-choice answers: the target's class plus natural distractors."""
    correct = pitch_class_of(pitch_of(target))
    distractors = rng.shuffle([pitch for pitch in NATURAL_PITCH_CLASSES if pitch != correct])
    return rng.shuffle([correct] + distractors[: count - 1])


def treble_session(seed: Optional[int] = None, **kwargs) -> DrillSession:
    return DrillSession(
        TREBLE_SCOPE_NATURAL_PITCHES, evaluate_pitch_class_answer, seed=seed, **kwargs
    )


# Fretboard trainers


def easy_pool(tuning: Tuning) -> List[DrillTarget]:
    """One target per pitch class found on the board, lowest occurrence first."""
    seen: Dict[str, Pitch] = {}
    for pitch in scope_pitches(tuning):
        seen.setdefault(pitch.name, pitch)
    return [DrillTarget(pitch) for pitch in seen.values()]


def hard_pool(tuning: Tuning) -> List[DrillTarget]:
    """Per string, the first fret producing each pitch class, pinned to that spot."""
    entries: List[DrillTarget] = []
    for string in tuning:
        seen = set()
        for fret in FRET_RANGE:
            position = Position(string, fret)
            pitch = pitch_at_position(tuning, position)
            if pitch.name not in seen:
                seen.add(pitch.name)
                entries.append(DrillTarget(pitch, required_position=position))
    return entries


def make_fretboard_evaluator(tuning: Tuning) -> Callable[[Target, Position], Dict[str, Any]]:
    """Build the predicate for locating a target on ``tuning``.

    A target carrying a required position only accepts that position;
    otherwise every position of the target's pitch class is correct.
    """

    def evaluate(target: Target, answer: Position) -> Dict[str, Any]:
        canonical = canonicalize(pitch_of(target))
        required = target.required_position if isinstance(target, DrillTarget) else None
        positions = [required] if required else positions_for_pitch_class(tuning, canonical.name)
        return {
            "correct": answer in positions,
            "canonical": canonical,
            "positions": positions,
        }

    return evaluate


@dataclass(frozen=True)
class Feedback:
    status: str = "idle"  # idle, correct, incorrect or warn
    message: str = ""


IDLE = Feedback()


@dataclass
class FretboardTrainer:
    """Fretboard location drill with selection rules layered on the engine.

    In easy mode a position already answered correctly for the current pitch
    class cannot be reused; only the last ``history_size`` such positions are
    remembered per class, so some positions always stay open. In hard mode
    the selection must be on the target's required string.
    """

    tuning: Tuning
    seed: Optional[int] = None
    hard: bool = False
    timer_duration: int = DEFAULT_TIMER
    history_size: int = DEFAULT_HISTORY
    countdown_factory: Optional[CountdownFactory] = None
    events: Optional[EventEmitter] = None
    selected: Optional[Position] = field(default=None, init=False)
    feedback: Feedback = field(default=IDLE, init=False)
    revealed: List[Position] = field(default_factory=list, init=False)
    used_positions: Dict[str, Deque[Position]] = field(default_factory=dict, init=False)

    def __post_init__(self):
        self.session = DrillSession(
            self._pool(),
            make_fretboard_evaluator(self.tuning),
            seed=self.seed,
            timer_duration=self.timer_duration,
            history_size=self.history_size,
            countdown_factory=self.countdown_factory,
            events=self.events,
        )

    def _pool(self) -> Sequence[DrillTarget]:
        return hard_pool(self.tuning) if self.hard else easy_pool(self.tuning)

    @property
    def target(self) -> Target:
        return self.session.current_target

    @property
    def required_position(self) -> Optional[Position]:
        target = self.target
        return target.required_position if isinstance(target, DrillTarget) else None

    @property
    def disabled_positions(self) -> List[Position]:
        if self.hard:
            return []
        return list(self.used_positions.get(pitch_class_of(pitch_of(self.target)), []))

    def _clear_round(self) -> None:
        self.selected = None
        self.feedback = IDLE
        self.revealed = []

    def set_hard(self, hard: bool) -> None:
        """Switch difficulty: swap pools and forget used positions."""
        self.hard = hard
        self.used_positions = {}
        self._clear_round()
        self.session.set_pool(self._pool())
        logger.info("%s trainer switched to %s mode", self.tuning.name, "hard" if hard else "easy")

    def select(self, position: Position) -> Feedback:
        """Select a position; rejected selections leave a warning."""
        required = self.required_position
        if self.hard and required and position.string != required.string:
            self.feedback = Feedback(
                "warn", f"Hard mode: target is on string {required.string}."
            )
            return self.feedback
        if not self.hard and position in self.disabled_positions:
            self.feedback = Feedback(
                "warn", "Already used that position for this note. Try another spot."
            )
            return self.feedback
        self.selected = position
        self.feedback = IDLE
        return self.feedback

    def submit(self) -> Feedback:
        if self.selected is None:
            self.feedback = Feedback("warn", "Select a string and fret before submitting.")
            return self.feedback

        chosen = self.selected
        result = self.session.submit_answer(chosen)
        self.revealed = list(result["positions"])
        canonical = result["canonical"]

        if result["correct"]:
            self.selected = None
            self.feedback = Feedback("correct", f"Correct! {canonical.name}")
            if not self.hard:
                # At least one position of the class always stays selectable.
                limit = max(0, min(self.history_size, len(self.revealed) - 1))
                used = self.used_positions.setdefault(canonical.name, deque(maxlen=limit))
                if chosen not in used:
                    used.append(chosen)
        else:
            played = pitch_at_position(self.tuning, chosen)
            self.feedback = Feedback(
                "incorrect", f"Not quite: {chosen} is {played.name}, not {canonical.name}."
            )
        return self.feedback

    def next(self) -> Target:
        self._clear_round()
        return self.session.next_target()

    def close(self) -> None:
        self.session.close()


def fretboard_trainer(name: str, **kwargs) -> FretboardTrainer:
    """Create the guitar or ukulele trainer by name."""
    return FretboardTrainer(TRAINER_TUNINGS[name], **kwargs)
