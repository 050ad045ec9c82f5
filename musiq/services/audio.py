"""Preview clip playback for MusIQ."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

import httpx

from musiq.core.config import Settings
from musiq.core.exceptions import PlaybackError

logger = logging.getLogger(__name__)


class AudioPlayer(Protocol):
    """Plays a preview clip for a fixed number of seconds."""

    async def play(self, preview_url: str, duration_seconds: float) -> None:
        """Play the clip and return when it has finished.

        Raises:
            PlaybackError: If the clip cannot be loaded.
        """
        ...


class PreviewClipPlayer:
    """Loads preview clips over HTTP and holds for the requested duration.

    Clips are cached per URL so replaying a longer snippet of the same song
    does not download it again. Decoding and audio output are left to the
    platform shell; this player only guarantees the clip is reachable and
    paces the game.
    """

    def __init__(
        self,
        settings: Settings,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings
        self.load_timeout = settings.audio_load_timeout_seconds
        self._sleep = sleep
        self._cache: dict[str, bytes] = {}

    async def load(self, preview_url: str) -> bytes:
        """Download a preview clip.

        Raises:
            PlaybackError: Invalid URL, load timeout or load failure.
        """
        if not preview_url.startswith(("https://", "http://")):
            raise PlaybackError("Invalid audio URL")

        cached = self._cache.get(preview_url)
        if cached is not None:
            return cached

        try:
            async with httpx.AsyncClient(timeout=self.load_timeout) as client:
                response = await client.get(preview_url)
        except httpx.TimeoutException as e:
            raise PlaybackError("Audio loading timeout") from e
        except httpx.HTTPError as e:
            raise PlaybackError(f"Failed to load audio: {e}") from e

        if response.status_code != 200:
            raise PlaybackError(f"Failed to load audio ({response.status_code})")

        self._cache[preview_url] = response.content
        return response.content

    async def play(self, preview_url: str, duration_seconds: float) -> None:
        clip = await self.load(preview_url)
        logger.debug(f"Playing {duration_seconds}s of {len(clip)} byte clip")
        await self._sleep(duration_seconds)
