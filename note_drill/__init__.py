"""Note Drill - music-theory drills for the treble staff and fretted instruments."""

__version__ = "0.1.0"
