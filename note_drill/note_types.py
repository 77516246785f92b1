"""Type definitions for the Note Drill project."""

from typing import Dict, List, Optional, Union
from dataclasses import dataclass

from .errors import InvalidPitchText

# All accepted spellings, in chromatic order
NOTE_NAME_OPTIONS: List[str] = [
    "C",
    "C#",
    "Db",
    "D",
    "D#",
    "Eb",
    "E",
    "F",
    "F#",
    "Gb",
    "G",
    "G#",
    "Ab",
    "A",
    "A#",
    "Bb",
    "B",
]

PITCH_TO_SEMITONE: Dict[str, int] = {
    "C": 0,
    "C#": 1,
    "Db": 1,
    "D": 2,
    "D#": 3,
    "Eb": 3,
    "E": 4,
    "F": 5,
    "F#": 6,
    "Gb": 6,
    "G": 7,
    "G#": 8,
    "Ab": 8,
    "A": 9,
    "A#": 10,
    "Bb": 10,
    "B": 11,
}

CANONICAL_SHARPS: List[str] = [
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
]

CANONICAL_FLATS: List[str] = [
    "C",
    "Db",
    "D",
    "Eb",
    "E",
    "F",
    "Gb",
    "G",
    "Ab",
    "A",
    "Bb",
    "B",
]

NATURAL_PITCH_CLASSES: List[str] = ["C", "D", "E", "F", "G", "A", "B"]


@dataclass(frozen=True)
class Pitch:
    """A spelled pitch in scientific pitch notation (e.g. F#4)."""

    name: str  # One of NOTE_NAME_OPTIONS
    octave: int  # C4 is middle C

    def __post_init__(self):
        if self.name not in PITCH_TO_SEMITONE:
            raise InvalidPitchText(self.name)

    @property
    def letter(self) -> str:
        return self.name[0]

    @property
    def semitone(self) -> int:
        """Semitone class of the spelling, 0 (C) to 11 (B)."""
        return PITCH_TO_SEMITONE[self.name]

    def __str__(self):
        return f"{self.name}{self.octave}"


@dataclass(frozen=True)
class Position:
    """Represents a position on a fretted instrument."""

    string: int  # String number (1 is the highest-pitched string)
    fret: int  # Fret number (0 for open string)

    def __str__(self):
        return f"S{self.string}F{self.fret}"


@dataclass(frozen=True)
class DrillTarget:
    """A drill prompt, optionally pinned to one exact fretboard position."""

    pitch: Pitch
    required_position: Optional[Position] = None

    def __str__(self):
        if self.required_position is None:
            return str(self.pitch)
        return f"{self.pitch}@{self.required_position}"


Target = Union[Pitch, DrillTarget]


def pitch_of(target: Target) -> Pitch:
    """Return the pitch carried by a plain pitch or a drill target."""
    if isinstance(target, DrillTarget):
        return target.pitch
    return target
