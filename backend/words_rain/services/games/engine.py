import asyncio
import logging
import time
from typing import Callable, Optional

from .lifecycle import maybe_finish_game, setup_session, start_session
from .models import GameSession, Playfield
from .scheduler import SolveTimings, begin_solve, finish_solve, update_effects
from .spawning import Measure, advance_world
from .targeting import handle_key as route_key, validate_target

logger = logging.getLogger(__name__)

# Longest simulated step per frame, so a stalled window does not teleport words
MAX_FRAME_DT = 0.1


class GameEngine:
    """Drives one GameSession from frame ticks and key presses.

    The engine is single threaded: ``tick`` and ``handle_key`` each run to
    completion. The only background work is the solve sequence, scheduled as
    an asyncio task, so ``handle_key`` must be called from inside a running
    event loop.
    """

    def __init__(
        self,
        measure: Measure,
        speaker=None,
        playfield: Optional[Playfield] = None,
        timings: Optional[SolveTimings] = None,
        clock: Callable[[], float] = time.monotonic,
        rng=None,
    ):
        self.measure = measure
        self.speaker = speaker
        self.playfield = playfield or Playfield()
        self.timings = timings or SolveTimings()
        self.clock = clock
        self.rng = rng
        self.session: GameSession = setup_session()
        self._solve_task: Optional[asyncio.Task] = None

    def start(self, words, speed_level=1, accent='en-US', max_words=0) -> GameSession:
        """Start a new game, discarding whatever was running.

        Raises SessionSetupError for an unusable word list or setting.
        """
        session = start_session(
            words,
            self.measure,
            self.playfield,
            speed_level=speed_level,
            accent=accent,
            max_words=max_words,
            rng=self.rng,
        )
        self._cancel_solve()
        self.session = session
        return session

    def go_to_setup(self) -> None:
        self._cancel_solve()
        self.session = setup_session()

    def tick(self, now: Optional[float] = None) -> None:
        session = self.session
        now = self.clock() if now is None else now
        if session.last_frame_time is None:
            session.last_frame_time = now
        dt = min(MAX_FRAME_DT, max(0.0, now - session.last_frame_time))
        session.last_frame_time = now

        update_effects(session, now)
        validate_target(session)

        if session.running and not session.frozen and not session.game_over:
            advance_world(session, dt, self.measure, self.playfield)
            maybe_finish_game(session)

    def handle_key(self, key) -> None:
        """Feed one key to the session.

        Raises RuntimeError, before touching the session, when called outside
        a running event loop.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            raise RuntimeError('GameEngine.handle_key must be called from a running event loop') from None
        session = self.session
        solved = route_key(session, key)
        if solved is None:
            return
        self._solve_task = loop.create_task(
            finish_solve(session, solved, self.speaker, self.clock, self.timings)
        )
        begin_solve(session, solved, self.clock(), self.timings)

    async def wait_idle(self) -> None:
        """Wait for an in-flight solve sequence, if any."""
        task = self._solve_task
        if task is not None and not task.done():
            await task

    def _cancel_solve(self) -> None:
        task, self._solve_task = self._solve_task, None
        if task is not None and not task.done():
            task.cancel()
            logger.debug('[solve-cancel] abandoned in-flight solve sequence')
