# models.py
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

WATCH_URL = "https://music.youtube.com/watch?v={}"


@dataclass(frozen=True)
class SongItem:
    """A single catalog search result, ready for display."""
    song_id: str
    name: str
    artist: str
    album: str
    image_url: Optional[str] = None
    stream_url: Optional[str] = None


class AuthorizationStatus(str, Enum):
    """User consent state for accessing the music service."""
    NOT_DETERMINED = "not_determined"
    DENIED = "denied"
    RESTRICTED = "restricted"
    AUTHORIZED = "authorized"


@dataclass(frozen=True)
class QueueDescriptor:
    """Names the track(s) the player should queue, in order."""
    store_ids: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.store_ids or not all(self.store_ids):
            raise ValueError("A queue descriptor needs at least one track identifier.")

    @property
    def urls(self) -> List[str]:
        return [WATCH_URL.format(store_id) for store_id in self.store_ids]


@dataclass
class AppState:
    """A single object to hold the search screen state."""
    songs: List[SongItem] = field(default_factory=list)
    selected_song: Optional[SongItem] = None
