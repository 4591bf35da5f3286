import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor

import pygame

from words_rain.services.games.engine import GameEngine
from words_rain.services.games.lifecycle import SessionSetupError
from words_rain.services.games.models import Playfield
from words_rain.services.games.targeting import KEY_BACKSPACE, KEY_ESCAPE
from .renderer import HUD_HEIGHT, PygameRenderer
from .setup import SetupScreen

logger = logging.getLogger(__name__)

DEFAULT_FPS = 60


class GameWindow:
    """The frame driver: one cooperative loop feeding the engine.

    Each frame drains pygame events, ticks the engine once and renders.
    The solve sequence runs as a task on the same event loop, resumed
    between frames. Server calls run on a single worker thread, in key
    order, so a slow server never stalls a frame.
    """

    def __init__(self, api, speaker=None, max_words: int = 0, fps: int = DEFAULT_FPS,
                 playfield: Playfield = None):
        self.api = api
        self.speaker = speaker
        self.fps = fps
        self.playfield = playfield or Playfield()
        self.setup = SetupScreen(api, max_words=max_words)
        self.in_game = False
        self.quit = False
        self.screen = None
        self.renderer = None
        self.engine = None
        self._io = ThreadPoolExecutor(max_workers=1, thread_name_prefix='api')
        self._starting = None

    def open(self) -> None:
        pygame.init()
        pygame.display.set_caption('Words Rain')
        self.screen = pygame.display.set_mode((self.playfield.width, self.playfield.height + HUD_HEIGHT))
        self.renderer = PygameRenderer(self.screen, self.playfield)
        self.engine = GameEngine(
            measure=self.renderer.measure_text_width,
            speaker=self.speaker,
            playfield=self.playfield,
            clock=time.monotonic,
        )

    def in_background(self, func, *args) -> asyncio.Future:
        return asyncio.get_running_loop().run_in_executor(self._io, func, *args)

    @property
    def starting(self) -> bool:
        return self._starting is not None and not self._starting.done()

    async def start_game(self) -> None:
        words = await self.in_background(self.setup.fetch_words)
        if words is None:
            return
        try:
            self.engine.start(
                words,
                speed_level=self.setup.speed_level,
                accent=self.setup.accent,
                max_words=self.setup.max_words,
            )
        except SessionSetupError as exc:
            self.setup.error = str(exc)
            return
        self.in_game = True

    def go_to_setup(self) -> None:
        self.engine.go_to_setup()
        self.in_game = False

    def handle_setup_key(self, event) -> None:
        # The setup choices stay put while a game is being fetched
        if self.starting:
            return
        if event.key in (pygame.K_UP, pygame.K_DOWN):
            name = self.setup.step_wordbook(-1 if event.key == pygame.K_UP else 1)
            if name is not None:
                self.in_background(self.setup.save_wordbook, name)
        elif event.key == pygame.K_LEFT:
            self.setup.change_speed(-1)
        elif event.key == pygame.K_RIGHT:
            self.setup.change_speed(1)
        elif event.key == pygame.K_TAB:
            self.in_background(self.setup.save_accent, self.setup.step_accent())
        elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self._starting = asyncio.ensure_future(self.start_game())

    def handle_game_key(self, event) -> None:
        session = self.engine.session
        if event.key == pygame.K_F10:
            self.go_to_setup()
        elif session.game_over:
            if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                self.go_to_setup()
        elif event.key == pygame.K_BACKSPACE:
            self.engine.handle_key(KEY_BACKSPACE)
        elif event.key == pygame.K_ESCAPE:
            self.engine.handle_key(KEY_ESCAPE)
        elif len(event.unicode) == 1 and event.unicode.isprintable():
            self.engine.handle_key(event.unicode)

    def handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.quit = True
            elif event.type == pygame.KEYDOWN:
                if self.in_game:
                    self.handle_game_key(event)
                else:
                    self.handle_setup_key(event)

    async def run(self) -> None:
        frame = 1.0 / self.fps
        try:
            self.open()
            self.in_background(self.setup.load)
            while not self.quit:
                started = time.monotonic()
                self.handle_events()
                if self.in_game:
                    self.engine.tick(started)
                    self.renderer.draw_game(self.engine.session, started)
                else:
                    self.renderer.draw_setup(self.setup)
                pygame.display.flip()
                await asyncio.sleep(max(0.0, frame - (time.monotonic() - started)))
        finally:
            if self._starting is not None:
                self._starting.cancel()
            if self.engine is not None:
                self.engine.go_to_setup()
            self._io.shutdown(wait=False)
            pygame.quit()
            logger.info('[client] window closed')
