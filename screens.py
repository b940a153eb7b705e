# screens.py
import asyncio
from typing import Optional

try:
    import pyperclip
except ImportError:
    pyperclip = None

from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.reactive import reactive
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, Footer, Header, Input, Label, Static

from config import Config
from models import AppState, AuthorizationStatus, SongItem
from services import (AuthorizationCoordinator, MusicSearchService,
                      PlayerManager)
from ui import DetailsPane, LogPane, ResultsList, SearchBar, SongRow


class SearchScreen(Screen):
    BINDINGS = [("c", "copy_link", "Copy Link")]

    app_state = reactive(AppState(), always_update=True)

    def __init__(self, search_service: MusicSearchService, player_manager: PlayerManager, config: Config):
        super().__init__()
        self.search_service = search_service
        self.player_manager = player_manager
        self.config = config

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="main-container"):
            yield SearchBar(id="search-bar")
            with Horizontal(id="app-grid"):
                with Vertical(id="left-pane"):
                    yield Label("Search", id="search-title")
                    yield ResultsList(id="results-list")
                with Vertical(id="right-pane"):
                    yield DetailsPane(id="details-pane")
            yield LogPane(id="log", wrap=True, highlight=True, markup=True)
        yield Footer()

    def on_mount(self) -> None:
        log = self.query_one(LogPane)
        self.query_one(Input).focus()
        if self.player_manager.is_available:
            log.add_message("[green]✅ mpv found.[/green]")
        else:
            log.add_message("[yellow]⚠️ libmpv not found, playback is unavailable.[/yellow]")
        if pyperclip:
            log.add_message("[green]✅ Clipboard found.[/green]")
        else:
            log.add_message("[yellow]⚠️ 'pyperclip' not installed.[/yellow]")

    async def watch_app_state(self, old_state: AppState, new_state: AppState) -> None:
        self.query_one(DetailsPane).update_details(new_state.selected_song)
        if old_state.songs != new_state.songs:
            await self.query_one(ResultsList).update_results(new_state.songs)

    def action_copy_link(self) -> None:
        log = self.query_one(LogPane)
        if not pyperclip:
            log.add_message("[red]❌ 'pyperclip' not installed.[/red]")
            return
        song = self.app_state.selected_song
        if song and song.stream_url:
            pyperclip.copy(song.stream_url)
            log.add_message(f"📋 Copied link for '[b]{song.name}[/b]'.")
        else:
            log.add_message("[yellow]⚠️ No song selected.[/yellow]")

    def open_player(self, song: SongItem) -> None:
        self.app.push_screen(PlayerScreen(self.player_manager, song))

    # --- Message Handlers ---
    def on_search_bar_search_changed(self, message: SearchBar.SearchChanged) -> None:
        self.workers.cancel_group(self, "search_worker")
        if not message.term:
            self.app_state = AppState()
            return
        self.run_worker(self.perform_search(message.term), group="search_worker", exclusive=True)

    def on_results_list_song_selected(self, message: ResultsList.SongSelected) -> None:
        self.open_player(message.song)

    def on_results_list_song_highlighted(self, message: ResultsList.SongHighlighted) -> None:
        self.app_state = AppState(songs=self.app_state.songs, selected_song=message.song)

    # --- Worker Methods ---
    async def perform_search(self, term: str) -> None:
        if self.config.SEARCH_DEBOUNCE > 0:
            await asyncio.sleep(self.config.SEARCH_DEBOUNCE)
        log = self.query_one(LogPane)
        log.add_message(f"🔎 Searching for '{term}'...")
        songs = await asyncio.to_thread(self.search_service.search, term, self.config.SEARCH_RESULT_LIMIT)
        self.app_state = AppState(songs=songs)
        if not songs:
            log.add_message(f"🤷 No music found for '{term}'.")
        else:
            log.add_message(f"🎶 Found {len(songs)} results for '{term}'.")


class PlayerScreen(Screen):
    """The now playing screen for the song chosen on the search screen."""
    BINDINGS = [("escape", "app.pop_screen", "Back")]

    def __init__(self, player_manager: PlayerManager, song: SongItem):
        super().__init__()
        self.player_manager = player_manager
        self.song = song

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="player"):
            yield Label("Now Playing", id="now-playing-title")
            yield SongRow(self.song, id="now-playing-song")
            yield Button("Play Song", id="play-button", variant="primary")
            yield Static("", id="playback-status")
        yield Footer()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "play-button":
            self.run_worker(self.perform_play(), group="player_worker", exclusive=True)

    async def perform_play(self) -> None:
        success, _ = await asyncio.to_thread(self.player_manager.play_song, self.song.song_id)
        if success:
            self.query_one("#playback-status", Static).update(f"▶ {self.song.name} - {self.song.artist}")


def explanatory_text(status: AuthorizationStatus) -> str:
    if status == AuthorizationStatus.RESTRICTED:
        return "You cannot use this app because you are not authorised to use YouTube Music."
    return "Combined Queue uses YouTube Music to provide a combined queue of songs from multiple streaming services."


def secondary_explanatory_text(status: AuthorizationStatus) -> Optional[str]:
    if status == AuthorizationStatus.NOT_DETERMINED:
        return "To continue, you must grant access to your YouTube Music library."
    if status == AuthorizationStatus.DENIED:
        return ("To continue, you must grant access to your YouTube Music library. "
                "You can change your decision in Settings.")
    return None


def button_text(status: AuthorizationStatus) -> str:
    if status == AuthorizationStatus.NOT_DETERMINED:
        return "Continue"
    if status == AuthorizationStatus.DENIED:
        return "Open Settings"
    raise ValueError(f"No button should be displayed for authorization status: {status.value}.")


class WelcomeScreen(ModalScreen):
    """Asks for access to the music service until the user is authorized.

    Shown by the app whenever the coordinator reports a status other than
    authorized. There is no binding to dismiss it.
    """
    def __init__(self, coordinator: AuthorizationCoordinator):
        super().__init__()
        self.coordinator = coordinator

    def compose(self) -> ComposeResult:
        with Vertical(id="welcome"):
            yield Label("Combined Queue", id="welcome-title")
            yield Label("Use multiple streaming services.", id="welcome-subtitle")
            yield Static(id="welcome-explanatory")
            yield Static(id="welcome-secondary")
            with Horizontal(id="welcome-buttons"):
                yield Button("Continue", id="welcome-primary", variant="primary")
                yield Button("Not Now", id="welcome-decline")

    def on_mount(self) -> None:
        self.refresh_content()

    def refresh_content(self) -> None:
        status = self.coordinator.status
        self.query_one("#welcome-explanatory", Static).update(explanatory_text(status))
        secondary = self.query_one("#welcome-secondary", Static)
        secondary_text = secondary_explanatory_text(status)
        secondary.update(secondary_text or "")
        secondary.display = secondary_text is not None

        primary = self.query_one("#welcome-primary", Button)
        has_button = status in (AuthorizationStatus.NOT_DETERMINED, AuthorizationStatus.DENIED)
        primary.display = has_button
        if has_button:
            primary.label = button_text(status)
        self.query_one("#welcome-decline", Button).display = status == AuthorizationStatus.NOT_DETERMINED

    def on_button_pressed(self, event: Button.Pressed) -> None:
        status = self.coordinator.status
        if event.button.id == "welcome-decline":
            self.coordinator.deny()
        elif status == AuthorizationStatus.NOT_DETERMINED:
            self.app.run_worker(self.coordinator.request(), group="authorization_worker", exclusive=True)
        elif status == AuthorizationStatus.DENIED:
            self.coordinator.reset()
