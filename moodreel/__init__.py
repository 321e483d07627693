"""MoodReel: mood-based movie and TV discovery over multiple catalogs."""

__version__ = "1.0.0"
