# ui.py
from typing import List, Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import (Button, Input, ListItem, ListView, Markdown,
                             RichLog, Static)

from models import SongItem

NO_ARTWORK = "♪"
ARTWORK = "▣"


def format_song_row(song: SongItem) -> Text:
    """Renders the artwork marker, title, artist and album of one song."""
    row = Text()
    row.append(f"{ARTWORK if song.image_url else NO_ARTWORK} ")
    row.append(song.name, style="bold")
    row.append(f"\n  {song.artist}")
    if song.album:
        row.append(f"\n  {song.album}", style="dim")
    return row


class SearchBar(Static):
    """Widget for the search field and its clear button."""
    class SearchChanged(Message):
        def __init__(self, term: str) -> None:
            self.term = term
            super().__init__()

    def compose(self) -> ComposeResult:
        with Horizontal(id="search-row"):
            yield Input(placeholder="Search for a song...", id="search-input")
            yield Button("✕", id="clear-button")

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        self.post_message(self.SearchChanged(event.value.strip()))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.query_one(Input).value = ""


class SongRow(Static):
    """Displays a single song."""
    def __init__(self, song: SongItem, **kwargs) -> None:
        super().__init__(format_song_row(song), **kwargs)
        self.song = song


class SongListItem(ListItem):
    def __init__(self, song: SongItem) -> None:
        super().__init__(SongRow(song))
        self.song = song


class ResultsList(ListView):
    """List of search results, one SongRow per song."""
    class SongSelected(Message):
        def __init__(self, song: SongItem) -> None:
            self.song = song
            super().__init__()

    class SongHighlighted(Message):
        def __init__(self, song: Optional[SongItem]) -> None:
            self.song = song
            super().__init__()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        event.stop()
        if isinstance(event.item, SongListItem):
            self.post_message(self.SongSelected(event.item.song))

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        event.stop()
        song = event.item.song if isinstance(event.item, SongListItem) else None
        self.post_message(self.SongHighlighted(song))

    async def update_results(self, songs: List[SongItem]) -> None:
        await self.clear()
        if songs:
            await self.extend([SongListItem(song) for song in songs])


class DetailsPane(Static):
    """Widget to display details of the highlighted song."""
    def on_mount(self) -> None:
        self.update_details(None)

    def update_details(self, song: Optional[SongItem]) -> None:
        if song:
            content = (
                f"## {song.name}\n\n- **Artist**: {song.artist}\n- **Album**: {song.album or 'N/A'}"
                f"\n- **Artwork**: `{song.image_url or 'N/A'}`\n- **Link**: `{song.stream_url or 'N/A'}`"
            )
        else:
            content = "## Details\n\n*Highlight a song to see its details.*"
        self.query_one(Markdown).update(content)

    def compose(self) -> ComposeResult:
        yield Markdown()


class LogPane(RichLog):
    """A dedicated widget for logging application events."""
    def add_message(self, message: str) -> None:
        self.write(message)
