"""Test configuration and fixtures"""

import json
import threading
from unittest.mock import Mock

import pytest

from config import Config
from models import AuthorizationStatus, SongItem
from services import AuthorizationCoordinator, PlayerManager


class FakeSearchService:
    """Stands in for MusicSearchService, answering from a fixed catalog."""

    def __init__(self, catalog):
        self.catalog = catalog
        self.terms = []

    def search(self, term, limit=15):
        self.terms.append(term)
        return list(self.catalog.get(term, []))[:limit]


class BlockingSearchService(FakeSearchService):
    """Holds searches for slow_term until release is set."""

    def __init__(self, catalog, slow_term):
        super().__init__(catalog)
        self.slow_term = slow_term
        self.started = threading.Event()
        self.release = threading.Event()

    def search(self, term, limit=15):
        if term == self.slow_term:
            self.started.set()
            self.release.wait(timeout=5)
        return super().search(term, limit)


@pytest.fixture
def sample_search_items():
    """Raw songs-filter search items as returned by ytmusicapi"""
    return [
        {
            'videoId': 'abc123',
            'title': 'Dancing Queen',
            'artists': [{'name': 'ABBA', 'id': 'UC1'}],
            'album': {'name': 'Arrival', 'id': 'MPRE1'},
            'thumbnails': [
                {'url': 'https://img/60.jpg', 'width': 60, 'height': 60},
                {'url': 'https://img/120.jpg', 'width': 120, 'height': 120},
                {'url': 'https://img/544.jpg', 'width': 544, 'height': 544},
            ],
        },
        {
            'videoId': 'def456',
            'title': 'Under Pressure',
            'artists': [{'name': 'Queen', 'id': 'UC2'}, {'name': 'David Bowie', 'id': 'UC3'}],
            'album': None,
            'thumbnails': [{'url': 'https://img/small.jpg', 'width': 40, 'height': 40}],
        },
        {
            'videoId': 'abc123',
            'title': 'Dancing Queen (duplicate)',
            'artists': [{'name': 'ABBA', 'id': 'UC1'}],
        },
        {
            'title': 'Episode without a video id',
            'artists': [],
        },
    ]


@pytest.fixture
def songs():
    return [
        SongItem('abc123', 'Dancing Queen', 'ABBA', 'Arrival',
                 'https://img/120.jpg', 'https://music.youtube.com/watch?v=abc123'),
        SongItem('ghi789', 'Waterloo', 'ABBA', 'Waterloo',
                 None, 'https://music.youtube.com/watch?v=ghi789'),
    ]


@pytest.fixture
def state_path(tmp_path):
    return tmp_path / "state.json"


@pytest.fixture
def authorized_state_path(state_path):
    state_path.write_text(json.dumps({'status': AuthorizationStatus.AUTHORIZED.value}), encoding="utf-8")
    return state_path


@pytest.fixture
def test_config(state_path):
    return Config(SEARCH_DEBOUNCE=0, AUTH_POLL_INTERVAL=0, STATE_FILENAME=str(state_path))


@pytest.fixture
def fake_player():
    return Mock()


@pytest.fixture
def player_manager(fake_player):
    return PlayerManager(player=fake_player)


@pytest.fixture
def search_service(songs):
    return FakeSearchService({'abba': songs, 'waterloo': songs[1:]})


@pytest.fixture
def make_app(search_service, player_manager, test_config):
    """Builds the app with fake services around the given state file"""
    from main import CombinedQueueApp

    def factory(path):
        coordinator = AuthorizationCoordinator(str(path))
        return CombinedQueueApp(search_service, player_manager, coordinator, test_config)
    return factory


@pytest.fixture
def blocking_search_service(songs):
    service = BlockingSearchService({'abba': songs, 'waterloo': songs[1:]}, slow_term='abba')
    yield service
    service.release.set()
