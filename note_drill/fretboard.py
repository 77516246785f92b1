"""Mapping between fretted-instrument positions and pitches.

A tuning is plain configuration data: an ordered mapping from string number
(1 is the highest-pitched string) to the open-string pitch. Every function
here accepts any tuning with any number of strings.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Union

from .errors import InvalidArgument, InvalidPitchText
from .logger import get_logger
from .note_types import PITCH_TO_SEMITONE, Pitch, Position
from .note_utils import from_absolute_semitone, to_absolute_semitone

logger = get_logger(__name__)

MAX_FRET = 12
FRET_RANGE = range(0, MAX_FRET + 1)


@dataclass(frozen=True)
class Tuning:
    """Named, ordered open-string pitches of an instrument."""

    name: str
    strings: Dict[int, Pitch]

    def __len__(self):
        return len(self.strings)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self.strings))

    def __getitem__(self, string: int) -> Pitch:
        try:
            return self.strings[string]
        except KeyError:
            raise InvalidArgument(
                f"String {string} is not part of the {self.name} tuning"
            ) from None


def make_tuning(name: str, open_pitches: Sequence[Pitch]) -> Tuning:
    """Build a tuning from open pitches listed from string 1 upward."""
    return Tuning(name, {index: pitch for index, pitch in enumerate(open_pitches, start=1)})


# Standard-tuned guitar (E2-E4)
GUITAR_TUNING = make_tuning(
    "guitar",
    [
        Pitch("E", 4),
        Pitch("B", 3),
        Pitch("G", 3),
        Pitch("D", 3),
        Pitch("A", 2),
        Pitch("E", 2),
    ],
)

# Standard re-entrant ukulele (GCEA)
UKULELE_TUNING = make_tuning(
    "ukulele",
    [
        Pitch("A", 4),
        Pitch("E", 4),
        Pitch("C", 4),
        Pitch("G", 4),
    ],
)

TUNINGS: Dict[str, Tuning] = {
    GUITAR_TUNING.name: GUITAR_TUNING,
    UKULELE_TUNING.name: UKULELE_TUNING,
}


def _semitone_at(tuning: Tuning, position: Position) -> int:
    if position.fret < 0:
        raise InvalidArgument(f"Fret must be non-negative, got {position.fret}")
    return to_absolute_semitone(tuning[position.string]) + position.fret


def pitch_at_position(tuning: Tuning, position: Position) -> Pitch:
    """Canonical pitch sounded at a string/fret position."""
    return from_absolute_semitone(_semitone_at(tuning, position))


def all_positions(tuning: Tuning) -> List[Position]:
    """Every position in the fret range, sorted by string then fret."""
    return [Position(string, fret) for string in tuning for fret in FRET_RANGE]


def positions_for_pitch(tuning: Tuning, pitch: Pitch) -> List[Position]:
    """All positions within frets 0-12 sounding exactly ``pitch`` (octave included)."""
    target = to_absolute_semitone(pitch)
    return [
        position
        for position in all_positions(tuning)
        if _semitone_at(tuning, position) == target
    ]


def positions_for_pitch_class(
    tuning: Tuning, pitch_class: Union[str, Pitch]
) -> List[Position]:
    """All positions within frets 0-12 sounding ``pitch_class`` in any octave.

    Accepts any of the 17 spellings, or a Pitch whose octave is ignored.
    Results are ordered by string, then fret.
    """
    if isinstance(pitch_class, Pitch):
        semitone = pitch_class.semitone
    else:
        semitone = PITCH_TO_SEMITONE.get(pitch_class)
        if semitone is None:
            raise InvalidPitchText(pitch_class)

    positions = [
        position
        for position in all_positions(tuning)
        if _semitone_at(tuning, position) % 12 == semitone
    ]
    logger.debug(
        "%d %s positions for pitch class %s", len(positions), tuning.name, pitch_class
    )
    return positions


def scope_pitches(tuning: Tuning) -> List[Pitch]:
    """Every distinct pitch playable within frets 0-12, ascending."""
    semitones = {_semitone_at(tuning, position) for position in all_positions(tuning)}
    return [from_absolute_semitone(value) for value in sorted(semitones)]
