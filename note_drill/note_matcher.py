import re
from typing import Optional, Union

from .logger import get_logger
from .note_types import CANONICAL_SHARPS, PITCH_TO_SEMITONE, Pitch
from .note_utils import pitches_equal

# Get logger for this module
logger = get_logger(__name__)

# Compile regex to extract note name and optional octave
# This pattern matches:
# - Note name (A-G, case insensitive)
# - Optional accidental (# or b)
# - Optional octave number (may be negative)
NOTE_PATTERN = re.compile(r"^([A-Ga-g][#b]?)(-?[0-9]*)$")

NoteLike = Union[str, Pitch]


class NoteMatcher:
    """
    Encapsulates logic for comparing submitted answers to target pitches,
    including normalization and enharmonic equivalence.
    """

    @staticmethod
    def normalize_to_sharp(note: str) -> Optional[str]:
        """Return the sharp-preferred pitch class of a spelling, or None.

        'Gb' -> 'F#', 'bb' -> 'A#', 'E' -> 'E'. Octave digits are ignored.
        """
        match = NOTE_PATTERN.match(note.strip())
        if not match:
            return None
        spelling = match.group(1)
        spelling = spelling[0].upper() + spelling[1:]
        semitone = PITCH_TO_SEMITONE.get(spelling)
        if semitone is None:
            return None
        return CANONICAL_SHARPS[semitone]

    @classmethod
    def match(cls, target: NoteLike, played: NoteLike, match_octave: bool = False) -> bool:
        """
        Check if the played note matches the target note.

        Args:
            target: The target pitch or spelling (e.g., Pitch('A', 4), 'Bb')
            played: The answer (e.g., 'A#', 'Bb3', Pitch('A#', 3))
            match_octave: Also require the same octave (both sides must
                carry one)
        Returns:
            bool: True if the notes match, False otherwise
        """
        if isinstance(target, Pitch) and isinstance(played, Pitch) and match_octave:
            return pitches_equal(target, played)

        target_text = str(target).strip() if target is not None else ""
        played_text = str(played).strip() if played is not None else ""

        if not target_text or not played_text:
            logger.debug("Empty input - target: %r, played: %r", target_text, played_text)
            return False

        target_match = NOTE_PATTERN.match(target_text)
        played_match = NOTE_PATTERN.match(played_text)
        if not target_match or not played_match:
            logger.debug(
                "Invalid note format - target: %r (%s), played: %r (%s)",
                target_text,
                bool(target_match),
                played_text,
                bool(played_match),
            )
            return False

        target_class = cls.normalize_to_sharp(target_match.group(1))
        played_class = cls.normalize_to_sharp(played_match.group(1))
        if target_class is None or played_class is None:
            return False

        if target_class != played_class:
            logger.debug("No match: %r != %r", played_class, target_class)
            return False

        if match_octave:
            target_octave = target_match.group(2)
            played_octave = played_match.group(2)
            if not target_octave or not played_octave:
                return False
            # Spellings inside the recognised 17 never cross an octave
            # boundary, so the written octave is the sounding one.
            if int(target_octave) != int(played_octave):
                logger.debug(
                    "Octave mismatch: %s != %s", played_octave, target_octave
                )
                return False

        logger.debug("Match: %r == %r", played_text, target_text)
        return True
