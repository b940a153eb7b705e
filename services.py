# services.py
import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ytmusicapi import YTMusic

# libmpv is a system library; without it playback is simply unavailable.
try:
    import mpv
except (ImportError, OSError):
    mpv = None

from models import (WATCH_URL, AuthorizationStatus, QueueDescriptor,
                    SongItem)

logger = logging.getLogger(__name__)


class MusicSearchService:
    """A service to handle catalog searches through ytmusicapi."""
    def __init__(self, auth_file: Optional[str] = None, artwork_size: int = 75):
        self.auth_file = auth_file
        self.artwork_size = artwork_size

    def search(self, term: str, limit: int = 15) -> List[SongItem]:
        """Searches the catalog for songs matching term. Errors degrade to an empty list."""
        if not term.strip():
            return []
        try:
            ytmusic = YTMusic(self.auth_file) if self.auth_file else YTMusic()
            search_items = ytmusic.search(query=term, filter="songs", limit=limit)
        except Exception:
            logger.exception("Catalog search for %r failed", term)
            return []

        unique_results: dict[str, SongItem] = {}
        for item in search_items or []:
            song = self._parse_item(item)
            if song and song.song_id not in unique_results:
                unique_results[song.song_id] = song
        logger.debug("Search for %r returned %d songs", term, len(unique_results))
        return list(unique_results.values())[:limit]

    def _parse_item(self, item: dict) -> Optional[SongItem]:
        """Parses a single raw API item into our SongItem data model."""
        if not item or not item.get("videoId"):
            return None

        album = item.get("album")
        return SongItem(
            song_id=item["videoId"],
            name=item.get("title") or "Unknown Title",
            artist=", ".join(a["name"] for a in item.get("artists") or [] if a.get("name")) or "Unknown Artist",
            album=album["name"] if album and album.get("name") else "",
            image_url=self._pick_artwork(item.get("thumbnails") or []),
            stream_url=WATCH_URL.format(item["videoId"]),
        )

    def _pick_artwork(self, thumbnails: List[dict]) -> Optional[str]:
        # Smallest thumbnail that still covers the row artwork, else the largest one.
        sized = sorted((t for t in thumbnails if t.get("url")), key=lambda t: t.get("width") or 0)
        if not sized:
            return None
        for thumbnail in sized:
            if (thumbnail.get("width") or 0) >= self.artwork_size:
                return thumbnail["url"]
        return sized[-1]["url"]


class AuthorizationCoordinator:
    """Owns the authorization status and decides whether the welcome sheet is shown.

    The status is persisted as JSON in ``state_path`` so consent survives
    restarts. Listeners registered with :meth:`subscribe` are called with the
    new status whenever it changes.
    """
    def __init__(self, state_path: str, auth_file: Optional[str] = None):
        self.state_path = Path(state_path)
        self.auth_file = auth_file
        self._listeners: List[Callable[[AuthorizationStatus], None]] = []
        self._status = self._load_status()
        # Last status known to be on disk; a failed save leaves it behind.
        self._persisted = self._status
        self.is_welcome_presented = self._status != AuthorizationStatus.AUTHORIZED

    @property
    def status(self) -> AuthorizationStatus:
        return self._status

    @status.setter
    def status(self, value: AuthorizationStatus) -> None:
        changed = value != self._status
        self._status = value
        self.is_welcome_presented = value != AuthorizationStatus.AUTHORIZED
        self._save_status()
        if changed:
            logger.info("Authorization status changed to %s", value.value)
            for listener in list(self._listeners):
                listener(value)

    def subscribe(self, listener: Callable[[AuthorizationStatus], None]) -> None:
        self._listeners.append(listener)

    async def request(self) -> AuthorizationStatus:
        """Records the user's consent, validating any configured credentials first."""
        valid = await asyncio.to_thread(self._credentials_valid)
        self.status = AuthorizationStatus.AUTHORIZED if valid else AuthorizationStatus.RESTRICTED
        return self.status

    def deny(self) -> None:
        self.status = AuthorizationStatus.DENIED

    def reset(self) -> None:
        self.status = AuthorizationStatus.NOT_DETERMINED

    async def refresh(self) -> None:
        """Picks up a status persisted outside this process."""
        status = await asyncio.to_thread(self._load_status)
        if status == self._persisted:
            return
        self._persisted = status
        if status != self._status:
            self.status = status

    def _credentials_valid(self) -> bool:
        if not self.auth_file:
            return True
        try:
            YTMusic(self.auth_file)
        except Exception:
            logger.warning("Credentials in %s were rejected", self.auth_file, exc_info=True)
            return False
        return True

    def _load_status(self) -> AuthorizationStatus:
        if not self.state_path.exists():
            return AuthorizationStatus.NOT_DETERMINED
        try:
            with open(self.state_path, "r", encoding="utf-8") as f:
                status = AuthorizationStatus(json.load(f)["status"])
        except (OSError, ValueError, KeyError, TypeError):
            logger.warning("Ignoring unreadable authorization state in %s", self.state_path)
            return AuthorizationStatus.NOT_DETERMINED

        if status == AuthorizationStatus.AUTHORIZED and self.auth_file and not os.path.exists(self.auth_file):
            return AuthorizationStatus.RESTRICTED
        return status

    def _save_status(self) -> None:
        try:
            with open(self.state_path, "w", encoding="utf-8") as f:
                json.dump({"status": self._status.value}, f, indent=4)
        except OSError:
            logger.warning("Could not save authorization state to %s", self.state_path, exc_info=True)
        else:
            self._persisted = self._status


class PlaybackUnavailableError(RuntimeError):
    """Raised when no playback backend can be created."""


class PlayerManager:
    """Wraps an mpv player and plays catalog tracks by identifier."""
    def __init__(self, player=None):
        self._player = player

    @property
    def is_available(self) -> bool:
        return self._player is not None or mpv is not None

    @property
    def player(self):
        if self._player is None:
            if mpv is None:
                raise PlaybackUnavailableError("libmpv is not installed.")
            self._player = mpv.MPV(vo="null", ytdl=True)
        return self._player

    def set_queue(self, descriptor: QueueDescriptor) -> None:
        """Replaces the current queue with the tracks named by descriptor."""
        player = self.player
        player.playlist_clear()
        for index, url in enumerate(descriptor.urls):
            player.loadfile(url, "replace" if index == 0 else "append")

    def play_song(self, song_id: str) -> Tuple[bool, str]:
        """Queues a single track and starts playback, returning success status and message."""
        try:
            self.set_queue(QueueDescriptor(store_ids=(song_id,)))
            self.player.pause = False
        except Exception as e:
            logger.warning("Playback of %s failed: %s", song_id, e)
            return False, f"Could not play '{song_id}': {e}"
        logger.info("Playing %s", song_id)
        return True, f"Playing '{song_id}'."

    def stop(self) -> None:
        if self._player is not None:
            self._player.stop()

    def close(self) -> None:
        if self._player is not None:
            self._player.terminate()
            self._player = None
