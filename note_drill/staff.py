"""Treble staff geometry: diatonic steps, ledger lines and accidentals."""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .logger import get_logger
from .note_types import NATURAL_PITCH_CLASSES, Pitch
from .note_utils import generate_range

logger = get_logger(__name__)

# Letter order within an octave; octaves start at C, so this is not alphabetic
LETTER_INDEX: Dict[str, int] = {
    "C": 0,
    "D": 1,
    "E": 2,
    "F": 3,
    "G": 4,
    "A": 5,
    "B": 6,
}

# Bottom line of the treble staff
REFERENCE_TREBLE_PITCH = Pitch("E", 4)

# Step of the top staff line (F5)
TOP_LINE_STEP = 8

TREBLE_MIN = Pitch("C", 4)
TREBLE_MAX = Pitch("B", 5)


def _diatonic_index(pitch: Pitch) -> int:
    return pitch.octave * 7 + LETTER_INDEX[pitch.letter]


def diatonic_step(pitch: Pitch) -> int:
    """Staff step of a pitch relative to E4 (step 0).

    Each line or space is one step and positive values move upward. Only the
    letter counts: F4, F#4 share step 1, and Db4 sits on the D step (-1).
    """
    return _diatonic_index(pitch) - _diatonic_index(REFERENCE_TREBLE_PITCH)


def ledger_line_steps(step: int) -> List[int]:
    """Ledger line steps needed to draw a note at ``step``.

    Below the staff lines are drawn at -2, -4, ... down to ``step - 1``;
    above it at 10, 12, ... up to ``step + 1``.
    """
    ledgers: List[int] = []
    if step <= -1:
        ledgers.extend(range(-2, step - 2, -2))
    if step >= TOP_LINE_STEP + 1:
        ledgers.extend(range(TOP_LINE_STEP + 2, step + 2, 2))
    return ledgers


def accidental_for(pitch: Pitch) -> Optional[str]:
    """Accidental glyph to draw next to the note head, if any."""
    if "#" in pitch.name:
        return "sharp"
    if "b" in pitch.name:
        return "flat"
    return None


@dataclass(frozen=True)
class StaffPlacement:
    """Everything a renderer needs to place one note on the treble staff."""

    step: int
    ledger_lines: List[int]
    accidental: Optional[str]


def staff_placement(pitch: Pitch) -> StaffPlacement:
    step = diatonic_step(pitch)
    placement = StaffPlacement(step, ledger_line_steps(step), accidental_for(pitch))
    logger.debug("Staff placement for %s: %s", pitch, placement)
    return placement


# All pitches within the treble trainer scope (C4-B5) with sharps preferred
TREBLE_SCOPE_PITCHES: List[Pitch] = generate_range(TREBLE_MIN, TREBLE_MAX)

TREBLE_SCOPE_NATURAL_PITCHES: List[Pitch] = [
    pitch for pitch in TREBLE_SCOPE_PITCHES if pitch.name in NATURAL_PITCH_CLASSES
]

TREBLE_OCTAVE_OPTIONS: List[int] = sorted({pitch.octave for pitch in TREBLE_SCOPE_PITCHES})
