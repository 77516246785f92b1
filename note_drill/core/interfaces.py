"""Defines the core interfaces for the Note Drill application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class TrainerProgress:
    """Cumulative statistics for one trainer."""

    total_attempts: int = 0
    total_correct: int = 0
    best_streak: int = 0
    last_updated: Optional[datetime] = None

    @property
    def accuracy(self) -> float:
        if not self.total_attempts:
            return 0.0
        return self.total_correct / self.total_attempts


class ICountdown(ABC):
    """Interface for the periodic timer driving a timed drill."""

    @abstractmethod
    def start(self) -> None:
        """Start ticking."""
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Stop ticking; no callback may run after this returns."""
        pass

    @property
    @abstractmethod
    def is_running(self) -> bool:
        """Check if the countdown is ticking."""
        pass


class IStatsStore(ABC):
    """Interface for the durable per-trainer statistics store."""

    @abstractmethod
    def load(self, trainer: str) -> TrainerProgress:
        """Read the stored progress for a trainer."""
        pass

    @abstractmethod
    def record_result(self, trainer: str, correct: bool, streak: int) -> TrainerProgress:
        """Fold one submission into the stored progress and return it."""
        pass
