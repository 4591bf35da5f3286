import logging
from typing import List, Optional

from words_rain.config import ACCENTS, DEFAULT_ACCENT
from words_rain.services.games.spawning import MAX_SPEED_LEVEL, MIN_SPEED_LEVEL
from .api import ApiError

logger = logging.getLogger(__name__)


class SetupScreen:
    """State behind the setup screen: wordbook, speed and accent choices.

    Failures never raise out of here; they end up in ``error`` for the
    player to read, and ``start_enabled`` says whether a game can begin.
    """

    def __init__(self, api, max_words: int = 0):
        self.api = api
        self.max_words = max_words
        self.books: List[str] = []
        self.selected: Optional[str] = None
        self.speed_level = MIN_SPEED_LEVEL
        self.accent = DEFAULT_ACCENT
        self.error = ''
        self.start_enabled = False

    def load(self) -> None:
        self.error = ''
        try:
            books = self.api.fetch_wordbooks()
        except ApiError as exc:
            self.error = str(exc)
            self.start_enabled = False
            return

        if not books:
            self.error = 'No .txt wordbooks found in the configured folder.'
            self.start_enabled = False
            return

        self.books = books
        self.selected = books[0]
        self.start_enabled = True

        try:
            settings = self.api.fetch_settings() or {}
        except ApiError as exc:
            # Keep the defaults when settings are unavailable
            logger.info(f"[setup] settings unavailable: {exc}")
            return

        if settings.get('accent') in ACCENTS:
            self.accent = settings['accent']
        saved = settings.get('wordbook')
        if isinstance(saved, str) and saved.strip():
            saved = saved.strip()
            if saved in books:
                self.selected = saved
            else:
                try:
                    self.api.save_wordbook(books[0])
                except ApiError as exc:
                    logger.info(f"[setup] could not replace stale wordbook {saved!r}: {exc}")

    def step_wordbook(self, delta: int) -> Optional[str]:
        if not self.books:
            return None
        index = self.books.index(self.selected) if self.selected in self.books else 0
        self.selected = self.books[(index + delta) % len(self.books)]
        return self.selected

    def save_wordbook(self, name: str) -> None:
        try:
            self.api.save_wordbook(name)
        except ApiError:
            self.error = 'Failed to save wordbook preference.'

    def select_wordbook(self, delta: int) -> None:
        name = self.step_wordbook(delta)
        if name is not None:
            self.save_wordbook(name)

    def change_speed(self, delta: int) -> None:
        self.speed_level = max(MIN_SPEED_LEVEL, min(MAX_SPEED_LEVEL, self.speed_level + delta))

    def step_accent(self) -> str:
        index = ACCENTS.index(self.accent) if self.accent in ACCENTS else 0
        self.accent = ACCENTS[(index + 1) % len(ACCENTS)]
        return self.accent

    def save_accent(self, accent: str) -> None:
        try:
            self.api.save_accent(accent)
        except ApiError:
            self.error = 'Failed to save accent preference.'

    def toggle_accent(self) -> None:
        self.save_accent(self.step_accent())

    def fetch_words(self) -> Optional[List[str]]:
        """Words of the selected wordbook, or None with ``error`` set."""
        self.error = ''
        if not self.start_enabled:
            return None
        if not self.selected:
            self.error = 'Please choose a wordbook.'
            return None
        try:
            words = self.api.fetch_wordbook_words(self.selected)
        except ApiError as exc:
            self.error = str(exc)
            return None
        if not words:
            self.error = 'Selected wordbook is empty.'
            return None
        return words
