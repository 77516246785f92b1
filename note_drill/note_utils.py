"""Utility functions for working with pitches, spellings and frequencies."""

import re
from typing import List, Optional

import numpy as np

from .errors import InvalidPitchText
from .logger import get_logger
from .note_types import (
    CANONICAL_FLATS,
    CANONICAL_SHARPS,
    PITCH_TO_SEMITONE,
    Pitch,
)

# Get logger for this module
logger = get_logger(__name__)

# Compile regex to extract note name and octave
# This pattern matches:
# - Note letter (A-G, upper case only)
# - Optional accidental (# or b)
# - Octave number, possibly negative
PITCH_PATTERN = re.compile(r"^([A-G](?:#|b)?)(-?\d+)$")

A4_FREQUENCY = 440.0
A4_SEMITONE = 69


def to_absolute_semitone(pitch: Pitch) -> int:
    """Return the absolute semitone number of a pitch (C4 = 60, as in MIDI)."""
    return (pitch.octave + 1) * 12 + PITCH_TO_SEMITONE[pitch.name]


def from_absolute_semitone(value: int) -> Pitch:
    """Build the sharp-preferred pitch for an absolute semitone number."""
    return Pitch(CANONICAL_SHARPS[value % 12], value // 12 - 1)


def canonicalize(pitch: Pitch) -> Pitch:
    """Normalise enharmonic spellings so that sharps are preferred over flats.

    The octave is re-derived from the absolute semitone, so the result is
    always consistent with the sharp spelling.
    """
    return from_absolute_semitone(to_absolute_semitone(pitch))


def enharmonic_flat_spelling(pitch: Pitch) -> Pitch:
    """Return the flat-preferred spelling of the same pitch, for display."""
    value = to_absolute_semitone(pitch)
    return Pitch(CANONICAL_FLATS[value % 12], value // 12 - 1)


def pitches_equal(a: Pitch, b: Pitch) -> bool:
    """Check enharmonic equality between two pitches."""
    return to_absolute_semitone(a) == to_absolute_semitone(b)


def pitch_class_of(pitch: Pitch) -> str:
    """Return the canonical spelling of a pitch without its octave."""
    return CANONICAL_SHARPS[PITCH_TO_SEMITONE[pitch.name]]


def format_pitch(pitch: Pitch) -> str:
    """String representation such as "F#4"."""
    return f"{pitch.name}{pitch.octave}"


def parse_pitch(text: str) -> Pitch:
    """Parse a pitch written in scientific pitch notation (e.g. "F#4").

    Raises:
        InvalidPitchText: If the text does not match the notation or uses a
            spelling outside the 17 recognised ones (e.g. "E#4").
    """
    if not isinstance(text, str):
        raise InvalidPitchText(text)

    match = PITCH_PATTERN.match(text.strip())
    if not match:
        raise InvalidPitchText(text)

    name, octave_raw = match.groups()
    if name not in PITCH_TO_SEMITONE:
        raise InvalidPitchText(text)

    return Pitch(name, int(octave_raw))


def generate_range(start: Pitch, end: Pitch) -> List[Pitch]:
    """Generate an inclusive range of canonical pitches ordered bottom -> top."""
    return [
        from_absolute_semitone(value)
        for value in range(to_absolute_semitone(start), to_absolute_semitone(end) + 1)
    ]


def pitch_to_frequency(pitch: Pitch, a4: float = A4_FREQUENCY) -> float:
    """Equal-tempered frequency of a pitch in Hz."""
    half_steps = to_absolute_semitone(pitch) - A4_SEMITONE
    return float(a4 * np.power(2.0, half_steps / 12.0))


def pitch_from_frequency(freq: float, a4: float = A4_FREQUENCY) -> Optional[Pitch]:
    """Convert a frequency to the nearest pitch using Scientific Pitch Notation.

    Args:
        freq: Frequency in Hz
        a4: Reference frequency of A4

    Returns:
        The nearest canonical pitch, or None for a non-positive or
        non-finite frequency

    Note:
        - Middle C is C4 (261.63 Hz)
        - Octave numbers change between B and C (e.g., B3 -> C4)
    """
    if not np.isfinite(freq) or freq <= 0:
        return None

    half_steps = int(np.round(12 * np.log2(freq / a4)))
    pitch = from_absolute_semitone(A4_SEMITONE + half_steps)
    logger.debug("%.2f Hz -> %s", freq, pitch)
    return pitch
