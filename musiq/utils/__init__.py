"""Utility modules for MusIQ."""

from musiq.utils.text import guess_key, guess_matches, is_correct_guess, normalize_title

__all__ = ["normalize_title", "guess_key", "guess_matches", "is_correct_guess"]
