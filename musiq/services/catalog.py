"""Song catalog sources for MusIQ.

The game only needs "give me the songs for this artist and tier". The HTTP
client talks to the web app's mobile API, which wraps Apple Music and tags
each song with a difficulty tier.
"""

import json
import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, Protocol, TypeVar

import httpx
from pydantic import ValidationError

from musiq.core.config import Settings
from musiq.core.exceptions import CatalogError
from musiq.core.models import Artist, Difficulty, Song, songs_for_difficulty

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SongCatalog(Protocol):
    """Source of songs for a game."""

    async def fetch_songs(self, artist_id: str, difficulty: Difficulty) -> list[Song]:
        """Fetch the songs eligible for a difficulty.

        Raises:
            CatalogError: If the songs could not be fetched or decoded.
        """
        ...

    async def search_artists(self, query: str) -> list[Artist]: ...


class HeardleCatalogClient:
    """Client for the web app's mobile catalog API."""

    SONGS_PATH = "/api/mobile/songs"
    ARTISTS_PATH = "/api/mobile/artists"

    def __init__(self, settings: Settings):
        self.settings = settings
        self.api_base = settings.catalog_api_url.rstrip("/")
        self.timeout = settings.http_timeout_seconds

    async def fetch_songs(self, artist_id: str, difficulty: Difficulty) -> list[Song]:
        """Fetch an artist's songs for a difficulty tier.

        The server already filters by ``difficulty``; the result is filtered
        again locally so older servers that ignore the parameter still work.
        """
        data = await self._api_request(
            self.SONGS_PATH,
            {"artistId": artist_id, "difficulty": difficulty},
        )
        songs = _parse_items(data, Song.from_api, "songs")

        if len(songs) < 5:
            logger.warning(f"Only {len(songs)} songs found for artist {artist_id}")

        return songs_for_difficulty(songs, difficulty)

    async def search_artists(self, query: str) -> list[Artist]:
        """Search artists and curated playlists by name."""
        if not query.strip():
            return []

        data = await self._api_request(self.ARTISTS_PATH, {"q": query})
        return _parse_items(data, Artist.from_api, "artists")

    async def _api_request(self, path: str, params: dict[str, Any]) -> Any:
        """Make a GET request against the catalog API."""
        url = f"{self.api_base}{path}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Catalog request to {path} failed: {e}")
            raise CatalogError(f"Network error: {e}") from e

        if response.status_code != 200:
            logger.error(f"Catalog API error {response.status_code}: {response.text}")
            raise CatalogError(f"Invalid response from server ({response.status_code})")

        try:
            return response.json()
        except ValueError as e:
            raise CatalogError("Failed to decode response") from e


class InMemorySongCatalog:
    """Catalog backed by a fixed list of songs.

    Every artist id maps to the same pool, which suits single-artist song
    files and tests.
    """

    def __init__(self, songs: Iterable[Song], artists: Iterable[Artist] = ()):
        self.songs = list(songs)
        self.artists = list(artists)

    @classmethod
    def from_json_file(cls, path: Path) -> "InMemorySongCatalog":
        """Load songs saved from the mobile songs endpoint.

        Raises:
            CatalogError: If the file is missing or malformed.
        """
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise CatalogError(f"Could not read songs file {path}: {e}") from e

        return cls(_parse_items(data, Song.from_api, "songs"))

    async def fetch_songs(self, artist_id: str, difficulty: Difficulty) -> list[Song]:
        return songs_for_difficulty(self.songs, difficulty)

    async def search_artists(self, query: str) -> list[Artist]:
        needle = query.strip().lower()
        if not needle:
            return []
        return [artist for artist in self.artists if needle in artist.name.lower()]


def _parse_items(data: Any, parse: Callable[[dict[str, Any]], T], kind: str) -> list[T]:
    """Parse a JSON array with ``parse``, turning bad payloads into CatalogError."""
    if not isinstance(data, list):
        raise CatalogError(f"Failed to decode {kind}: expected a list")

    try:
        return [parse(item) for item in data]
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        raise CatalogError(f"Failed to decode {kind}: {e}") from e
