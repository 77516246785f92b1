"""Core components for the Note Drill application."""

# Import interfaces for easier access
from .interfaces import (
    ICountdown,
    IStatsStore,
    TrainerProgress,
)

__all__ = ["ICountdown", "IStatsStore", "TrainerProgress"]
