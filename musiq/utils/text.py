"""Text normalization utilities for guess matching."""

import re
import unicodedata

from slugify import slugify

from musiq.core.models import Song


def normalize_title(title: str) -> str:
    """Normalize a song title for matching.

    - Lowercase
    - Remove parenthetical content (remix info, etc.)
    - Normalize unicode characters
    - Strip extra whitespace
    """
    title = title.strip().lower()

    # Remove parenthetical content like "(Radio Edit)", "(Remastered)"
    title = re.sub(r"\s*\([^)]*\)", "", title)
    title = re.sub(r"\s*\[[^\]]*\]", "", title)

    # Remove common suffixes
    suffixes = [
        " - remastered",
        " - radio edit",
        " - single version",
        " - album version",
        " remastered",
        " remaster",
    ]
    for suffix in suffixes:
        if title.endswith(suffix):
            title = title[: -len(suffix)]

    # Normalize unicode
    title = unicodedata.normalize("NFKD", title)
    title = title.encode("ascii", "ignore").decode("ascii")

    # Collapse whitespace
    title = re.sub(r"\s+", " ", title)

    return title.strip()


def guess_key(text: str) -> str:
    """Reduce a guess or title to a punctuation-free key.

    Returns a slug like "dont-stop-believin". Apostrophes are dropped rather
    than turned into separators so "Don't" and "Dont" agree.
    """
    normalized = re.sub(r"['’`\"]", "", normalize_title(text))
    return slugify(normalized, lowercase=True)


def guess_matches(guess: str, song: Song) -> bool:
    """Check whether a typed guess names the given song."""
    key = guess_key(guess)
    if not key:
        return False
    return key == guess_key(song.name)


def is_correct_guess(song: Song, guess_text: str, matched_song: Song | None = None) -> bool:
    """Judge a guess. A picked catalog song is compared by id, free text by title."""
    if matched_song is not None:
        return matched_song.id == song.id
    return guess_matches(guess_text, song)
