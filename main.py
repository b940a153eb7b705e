# main.py
import argparse
import logging
from typing import List, Optional

from textual.app import App
from textual.logging import TextualHandler
from textual.screen import Screen

from config import Config
from models import AuthorizationStatus
from screens import SearchScreen, WelcomeScreen
from services import AuthorizationCoordinator, MusicSearchService, PlayerManager


class CombinedQueueApp(App):
    TITLE = "Combined Queue"
    BINDINGS = [("q", "quit", "Quit")]
    CSS = """
    Screen {
        layout: vertical;
    }

    #main-container {
        height: 1fr;
        padding: 0 2;
    }

    #search-row {
        height: auto;
    }

    #search-input {
        width: 1fr;
    }

    #clear-button {
        min-width: 5;
        width: 5;
    }

    #search-title {
        text-style: bold;
        padding: 0 1;
    }

    #app-grid {
        height: 1fr;
    }

    #left-pane {
        width: 3fr;
    }

    #right-pane {
        width: 2fr;
    }

    #results-list {
        height: 1fr;
        padding: 0 3;
    }

    #results-list > ListItem {
        padding: 0 0 1 0;
    }

    #log {
        height: 6;
        border-top: solid $primary;
    }

    #player {
        align: center middle;
        padding: 1 2;
    }

    #now-playing-title {
        text-style: bold;
        padding: 1;
    }

    #now-playing-song {
        width: auto;
        padding: 1;
    }

    #playback-status {
        padding: 1;
    }

    WelcomeScreen {
        align: center middle;
    }

    #welcome {
        width: 70;
        height: auto;
        padding: 1 4;
        background: $panel;
        border: thick $error;
    }

    #welcome-title {
        text-style: bold;
        width: 100%;
        content-align: center middle;
    }

    #welcome-subtitle {
        width: 100%;
        content-align: center middle;
        padding: 0 0 1 0;
    }

    #welcome-explanatory, #welcome-secondary {
        text-align: center;
        padding: 0 0 1 0;
    }

    #welcome-buttons {
        height: auto;
        align: center middle;
    }
    """

    def __init__(self, search_service: MusicSearchService, player_manager: PlayerManager,
                 coordinator: AuthorizationCoordinator, config: Config):
        super().__init__()
        self.search_service = search_service
        self.player_manager = player_manager
        self.coordinator = coordinator
        self.config = config
        self.welcome_screen: Optional[WelcomeScreen] = None

    def get_default_screen(self) -> Screen:
        return SearchScreen(self.search_service, self.player_manager, self.config)

    def on_mount(self) -> None:
        self.coordinator.subscribe(self.on_authorization_changed)
        self.sync_welcome_sheet()
        if self.config.AUTH_POLL_INTERVAL > 0:
            self.set_interval(self.config.AUTH_POLL_INTERVAL, self.coordinator.refresh)

    def on_authorization_changed(self, status: AuthorizationStatus) -> None:
        self.sync_welcome_sheet()

    def sync_welcome_sheet(self) -> None:
        """Shows the welcome sheet iff the user is not authorized."""
        if self.coordinator.is_welcome_presented:
            if self.welcome_screen is None:
                self.welcome_screen = WelcomeScreen(self.coordinator)
                self.push_screen(self.welcome_screen)
            else:
                self.welcome_screen.refresh_content()
        elif self.welcome_screen is not None:
            if self.screen is self.welcome_screen:
                self.pop_screen()
            self.welcome_screen = None


def configure_logging(level: str, filename: Optional[str] = None) -> None:
    handlers: List[logging.Handler] = [TextualHandler()]
    if filename:
        handlers.append(logging.FileHandler(filename, encoding="utf-8"))
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    defaults = Config()
    parser = argparse.ArgumentParser(description="Search a music catalog and play tracks from one queue.")
    parser.add_argument("-n", "--limit", type=int, default=defaults.SEARCH_RESULT_LIMIT,
                        help=f"Number of results per search (default: {defaults.SEARCH_RESULT_LIMIT}).")
    parser.add_argument("--auth-file", default=defaults.AUTH_FILENAME,
                        help="ytmusicapi credentials file. Anonymous catalog access if omitted.")
    parser.add_argument("--state-file", default=defaults.STATE_FILENAME,
                        help="Where the authorization decision is stored.")
    parser.add_argument("--log-level", default=defaults.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=defaults.LOG_FILENAME)
    parser.add_argument("--search", metavar="TERM",
                        help="Print the results for TERM and exit without starting the interface.")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    return Config(
        SEARCH_RESULT_LIMIT=args.limit,
        STATE_FILENAME=args.state_file,
        AUTH_FILENAME=args.auth_file,
        LOG_LEVEL=args.log_level,
        LOG_FILENAME=args.log_file,
    )


def print_search(search_service: MusicSearchService, term: str, limit: int) -> int:
    songs = search_service.search(term, limit)
    if not songs:
        print("No music found for your search terms.")
        return 1
    for i, song in enumerate(songs, start=1):
        print(f"\n--- Result {i} ---")
        print(f"Title: {song.name}")
        print(f"Artist: {song.artist}")
        print(f"Album: {song.album or 'N/A'}")
        print(f"Link: {song.stream_url}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    app_config = build_config(args)
    configure_logging(app_config.LOG_LEVEL, app_config.LOG_FILENAME)
    search_service = MusicSearchService(app_config.AUTH_FILENAME, app_config.ARTWORK_SIZE)

    if args.search:
        return print_search(search_service, args.search, app_config.SEARCH_RESULT_LIMIT)

    # Services are created here and injected into the app.
    player_manager = PlayerManager()
    coordinator = AuthorizationCoordinator(app_config.STATE_FILENAME, app_config.AUTH_FILENAME)
    app = CombinedQueueApp(search_service, player_manager, coordinator, app_config)
    try:
        app.run()
    finally:
        player_manager.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
