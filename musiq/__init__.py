"""MusIQ - guess the song from progressively longer preview clips."""

__version__ = "0.1.0"
