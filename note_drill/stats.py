import os
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .core.events import DrillEventType
from .core.interfaces import IStatsStore, TrainerProgress
from .logger import get_logger

# Get logger for this module
logger = get_logger(__name__)

STATS_FILENAME = "stats.json"
STATS_FILE = os.path.join(os.path.expanduser("~"), ".config", "note_drill", STATS_FILENAME)


class JsonStatsStore(IStatsStore):
    """Per-trainer cumulative statistics kept in a JSON file.

    The store only listens to sessions; nothing it holds is fed back into
    target selection or scoring.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path or STATS_FILE

    def _load_all(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading stats from {self.path}: {e}")
            return {}

    def _save_all(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(data, f, indent=2)

    def load(self, trainer: str) -> TrainerProgress:
        entry = self._load_all().get(trainer, {})
        last_updated = entry.get("last_updated")
        return TrainerProgress(
            total_attempts=entry.get("total_attempts", 0),
            total_correct=entry.get("total_correct", 0),
            best_streak=entry.get("best_streak", 0),
            last_updated=datetime.fromisoformat(last_updated) if last_updated else None,
        )

    def record_result(self, trainer: str, correct: bool, streak: int) -> TrainerProgress:
        data = self._load_all()
        existing = data.get(trainer, {})
        progress = TrainerProgress(
            total_attempts=existing.get("total_attempts", 0) + 1,
            total_correct=existing.get("total_correct", 0) + (1 if correct else 0),
            best_streak=max(existing.get("best_streak", 0), streak),
            last_updated=datetime.now(timezone.utc),
        )
        data[trainer] = {
            "total_attempts": progress.total_attempts,
            "total_correct": progress.total_correct,
            "best_streak": progress.best_streak,
            "last_updated": progress.last_updated.isoformat(),
        }
        self._save_all(data)
        logger.debug(
            "Recorded %s result for %s: %d/%d, best streak %d",
            "correct" if correct else "incorrect",
            trainer,
            progress.total_correct,
            progress.total_attempts,
            progress.best_streak,
        )
        return progress

    def attach(self, session, trainer: str):
        """Record every answer submitted to ``session`` under ``trainer``.

        Returns the listener so it can be detached with ``events.off``.
        """

        def on_result(correct: bool, streak: int) -> None:
            self.record_result(trainer, correct, streak)

        session.events.on(DrillEventType.RESULT_SUBMITTED, on_result)
        return on_result
