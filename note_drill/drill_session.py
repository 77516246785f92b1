import threading
from collections import deque
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Any, Callable, Deque, Dict, Mapping, Optional, Sequence, Tuple, Union

from .core.countdown import Countdown, CountdownFactory
from .core.events import DrillEventType, EventEmitter
from .core.interfaces import ICountdown
from .errors import EmptySequence, InvalidArgument
from .logger import get_logger
from .note_types import Target, pitch_of
from .note_utils import canonicalize, pitches_equal
from .random_source import SeededRandom, pick_excluding

# Get logger for this module
logger = get_logger(__name__)

DEFAULT_HISTORY = 4
DEFAULT_TIMER = 60

Evaluator = Callable[[Any, Any], Mapping[str, Any]]


class DrillMode(str, Enum):
    PRACTICE = "practice"
    TIMED = "timed"


@dataclass(frozen=True)
class DrillScore:
    correct: int = 0
    attempts: int = 0


def targets_equal(a: Target, b: Target) -> bool:
    """Targets are interchangeable when they sound the same pitch."""
    return pitches_equal(pitch_of(a), pitch_of(b))


class DrillSession:
    """Prompt rotation, answer scoring and the practice/timed state machine.

    The session does not decide what a correct answer is: ``evaluate`` is
    called with the current target and the submitted answer and must return
    a mapping with at least a boolean ``correct`` entry. This keeps one
    engine usable for staff naming and fretboard location drills alike.
    """

    def __init__(
        self,
        pool: Sequence[Target],
        evaluate: Evaluator,
        *,
        seed: Optional[int] = None,
        timer_duration: int = DEFAULT_TIMER,
        history_size: int = DEFAULT_HISTORY,
        countdown_factory: Optional[CountdownFactory] = None,
        events: Optional[EventEmitter] = None,
    ) -> None:
        """Initialize the session.

        Args:
            pool: Candidate targets (pitches or drill targets)
            evaluate: Correctness predicate, ``evaluate(target, answer)``
            seed: Random seed; the current time is used when omitted
            timer_duration: Length of a timed round, in ticks
            history_size: How many recent targets to steer away from
            countdown_factory: Builds the periodic timer, ``factory(callback, interval)``
            events: Emitter to publish session events on
        """
        if timer_duration <= 0:
            raise InvalidArgument(f"timer_duration must be positive, got {timer_duration}")
        if history_size < 0:
            raise InvalidArgument(f"history_size must not be negative, got {history_size}")
        if len(pool) == 0:
            raise EmptySequence("A drill needs at least one candidate target")

        self._pool = list(pool)
        self._evaluate = evaluate
        self.rng = SeededRandom(seed)
        self.timer_duration = timer_duration
        self.history_size = history_size
        self.events = events if events is not None else EventEmitter()
        self._countdown_factory = countdown_factory or Countdown
        self._lock = threading.RLock()

        # Session state
        self.mode = DrillMode.PRACTICE
        self.time_remaining = timer_duration
        self.is_timer_active = False
        self.score = DrillScore()
        self.streak = 0
        self._history: Deque[Target] = deque(maxlen=history_size)
        self._countdown: Optional[ICountdown] = None
        self._timer_generation = 0
        self._closed = False

        self.current_target: Target = self._select_target(previous=None)
        self._remember(self.current_target)

        logger.debug(
            "DrillSession initialized with %d targets (seed %d, timer %d, history %d)",
            len(self._pool),
            self.rng.seed,
            timer_duration,
            history_size,
        )

    def __enter__(self) -> "DrillSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def pool(self) -> Tuple[Target, ...]:
        return tuple(self._pool)

    @property
    def recent_history(self) -> Tuple[Target, ...]:
        """Recently shown targets, most recent first."""
        return tuple(self._history)

    @property
    def countdown(self) -> Optional[ICountdown]:
        """The countdown currently armed for a timed round, if any."""
        return self._countdown

    @property
    def closed(self) -> bool:
        return self._closed

    # Target selection

    def _select_target(self, previous: Optional[Target]) -> Target:
        candidates = self._pool
        if previous is not None:
            # The previous target is never repeated while anything else is
            # available, even when the history covers the rest of the pool.
            others = [c for c in self._pool if not targets_equal(c, previous)]
            candidates = others or self._pool
        return pick_excluding(candidates, list(self._history), targets_equal, self.rng)

    def _remember(self, target: Target) -> None:
        if self.history_size:
            self._history.appendleft(target)

    def next_target(self) -> Target:
        """Pick a new target, steering away from the previous and recent ones."""
        with self._lock:
            old_target = self.current_target
            self.current_target = self._select_target(previous=old_target)
            self._remember(self.current_target)

        logger.debug("New target: %s (was: %s)", self.current_target, old_target)
        self.events.emit(DrillEventType.TARGET_CHANGED, self.current_target)
        return self.current_target

    def set_pool(self, pool: Sequence[Target]) -> Target:
        """Replace the candidate pool, forget history and pick a fresh target."""
        if len(pool) == 0:
            raise EmptySequence("A drill needs at least one candidate target")
        with self._lock:
            self._pool = list(pool)
            self._history.clear()
            self.current_target = self._select_target(previous=None)
            self._remember(self.current_target)

        logger.debug("Pool replaced with %d targets, target: %s", len(pool), self.current_target)
        self.events.emit(DrillEventType.TARGET_CHANGED, self.current_target)
        return self.current_target

    # Answers

    def submit_answer(self, answer: Any) -> Dict[str, Any]:
        """Evaluate an answer against the current target and update the score.

        Returns:
            The evaluator's result with ``canonical`` set to the target's
            canonical pitch
        """
        with self._lock:
            target = self.current_target
            result = dict(self._evaluate(target, answer))
            correct = bool(result.get("correct", False))

            self.score = DrillScore(
                correct=self.score.correct + (1 if correct else 0),
                attempts=self.score.attempts + 1,
            )
            self.streak = self.streak + 1 if correct else 0
            streak = self.streak

            result["correct"] = correct
            result["canonical"] = canonicalize(pitch_of(target))

        logger.debug(
            "Answer %r for %s -> %s (score %d/%d, streak %d)",
            answer,
            target,
            "correct" if correct else "incorrect",
            self.score.correct,
            self.score.attempts,
            streak,
        )
        self.events.emit(DrillEventType.RESULT_SUBMITTED, correct, streak)
        return result

    def reset_score(self) -> None:
        with self._lock:
            self.score = DrillScore()
            self.streak = 0

    # Mode and timer

    def set_mode(self, mode: Union[DrillMode, str]) -> None:
        """Switch mode; entering timed mode always restarts the round."""
        try:
            mode = DrillMode(mode)
        except ValueError:
            raise InvalidArgument(f"Unknown drill mode: {mode!r}") from None

        if mode is DrillMode.TIMED:
            self.start_timed()
            return

        with self._lock:
            self._stop_timer()
            self.mode = DrillMode.PRACTICE
        logger.info("Switched to practice mode")
        self.events.emit(DrillEventType.MODE_CHANGED, self.mode)

    def start_timed(self) -> None:
        """Start (or restart) a timed round with a fresh score."""
        with self._lock:
            if self._closed:
                raise InvalidArgument("Cannot start a timed round on a closed session")
            self._stop_timer()
            self.score = DrillScore()
            self.streak = 0
            self.mode = DrillMode.TIMED
            self.time_remaining = self.timer_duration
            self.is_timer_active = True

            self._timer_generation += 1
            self._countdown = self._countdown_factory(
                partial(self._on_countdown_tick, self._timer_generation), 1.0
            )
            self._countdown.start()

        logger.info("Timed round started: %d ticks", self.timer_duration)
        self.events.emit(DrillEventType.MODE_CHANGED, self.mode)

    def reset_timed(self) -> None:
        """Abandon timed mode: stop the clock, clear the score, back to practice."""
        with self._lock:
            self._stop_timer()
            self.score = DrillScore()
            self.streak = 0
            self.mode = DrillMode.PRACTICE
        logger.info("Timed round reset")
        self.events.emit(DrillEventType.MODE_CHANGED, self.mode)

    def tick(self) -> None:
        """Advance the countdown by one time unit."""
        self._advance(generation=None)

    def _advance(self, generation: Optional[int]) -> None:
        expired = False
        with self._lock:
            if generation is not None and generation != self._timer_generation:
                return
            if self._closed or self.mode is not DrillMode.TIMED or not self.is_timer_active:
                return
            self.time_remaining = max(0, self.time_remaining - 1)
            remaining = self.time_remaining
            if remaining == 0:
                self._cancel_countdown()
                self.is_timer_active = False
                expired = True

        self.events.emit(DrillEventType.TIMER_TICK, remaining)
        if expired:
            logger.info(
                "Time is up. Final score: %d/%d", self.score.correct, self.score.attempts
            )
            self.events.emit(DrillEventType.TIMER_EXPIRED, self.score)

    def close(self) -> None:
        """Cancel any running countdown; later ticks are ignored."""
        with self._lock:
            if self._closed:
                return
            self._cancel_countdown()
            self.is_timer_active = False
            self._closed = True
        logger.debug("DrillSession closed")

    def _on_countdown_tick(self, generation: int) -> None:
        self._advance(generation)

    def _cancel_countdown(self) -> None:
        # Bumping the generation invalidates ticks already in flight.
        self._timer_generation += 1
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None

    def _stop_timer(self) -> None:
        self._cancel_countdown()
        self.time_remaining = self.timer_duration
        self.is_timer_active = False
