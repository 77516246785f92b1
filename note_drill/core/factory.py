"""Factory for creating Note Drill sessions and trainers from configuration."""

from typing import Optional

from ..logger import get_logger
from ..drill_session import DrillSession
from ..trainers import TREBLE, TRAINER_TUNINGS, FretboardTrainer, treble_session
from .config import ConfigManager
from .countdown import CountdownFactory

logger = get_logger(__name__)

DRILL_SETTINGS = ("seed", "timer_duration", "history_size")


class DrillFactory:
    """Factory for creating drills with the user's configured defaults."""

    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        countdown_factory: Optional[CountdownFactory] = None,
    ):
        """Initialize the drill factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
            countdown_factory: Timer implementation handed to every session
        """
        self.config_manager = config_manager or ConfigManager()
        self.countdown_factory = countdown_factory

    def _drill_settings(self, **overrides) -> dict:
        stored = self.config_manager.get_config("drill")
        config = {
            key: stored[key] for key in DRILL_SETTINGS if stored.get(key) is not None
        }
        # Explicit arguments win, but None means "use the configured value"
        config.update({key: value for key, value in overrides.items() if value is not None})
        config["countdown_factory"] = self.countdown_factory
        return config

    def create_treble_session(self, **overrides) -> DrillSession:
        """Create a treble staff naming session.

        Args:
            **overrides: seed, timer_duration or history_size to override

        Returns:
            Drill session instance
        """
        settings = self._drill_settings(**overrides)
        session = treble_session(**settings)
        logger.info(f"Created {TREBLE} session (seed {session.rng.seed})")
        return session

    def create_fretboard_trainer(
        self, instrument: str, hard: bool = False, **overrides
    ) -> FretboardTrainer:
        """Create a fretboard location trainer.

        Raises:
            ValueError: If the instrument has no registered tuning
        """
        if instrument not in TRAINER_TUNINGS:
            raise ValueError(f"Unknown instrument: {instrument}")

        settings = self._drill_settings(**overrides)
        trainer = FretboardTrainer(TRAINER_TUNINGS[instrument], hard=hard, **settings)
        logger.info(
            f"Created {instrument} trainer ({'hard' if hard else 'easy'}, "
            f"seed {trainer.session.rng.seed})"
        )
        return trainer
