import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .lifecycle import maybe_finish_game
from .models import EFFECT_DISSOLVE, EFFECT_SCORE, Effect, GameSession, Word
from .scoring import register_solve

logger = logging.getLogger(__name__)

SCORE_POPUP_OFFSET_X = 12
SCORE_POPUP_OFFSET_Y = -4


@dataclass
class SolveTimings:
    """Durations (seconds) of the post-solve freeze."""

    dissolve: float = 0.6
    score_popup: float = 0.85
    speech_timeout: float = 2.5
    # Pause used instead of narration when the host cannot speak
    missing_speech_delay: float = 0.5


def update_effects(session: GameSession, now: float) -> None:
    session.effects = [e for e in session.effects if e.is_alive(now)]


def begin_solve(session: GameSession, word: Word, now: float, timings: SolveTimings) -> int:
    """Score a solved word and freeze the world.

    This is the synchronous half of the solve sequence; the word must already
    be out of the active set.
    """
    points = register_solve(session)
    session.effects.append(Effect(
        kind=EFFECT_SCORE,
        text=f"+{points}",
        x=word.x + word.width + SCORE_POPUP_OFFSET_X,
        y=word.y + SCORE_POPUP_OFFSET_Y,
        duration=timings.score_popup,
        started_at=now,
    ))
    session.frozen = True
    logger.info(f"[solve] word={word.id} text={word.text} points={points} combo={session.combo}")
    return points


async def animate_dissolve(session: GameSession, word: Word, duration: float, clock: Callable[[], float]) -> None:
    session.effects.append(Effect(
        kind=EFFECT_DISSOLVE,
        text=word.text,
        x=word.x,
        y=word.y,
        duration=duration,
        started_at=clock(),
    ))
    await asyncio.sleep(duration)


async def speak_word(speaker, text: str, accent: str, timings: SolveTimings) -> None:
    """Narrate ``text``; never raises and never waits past the timeout."""
    if speaker is None:
        await asyncio.sleep(timings.missing_speech_delay)
        return
    try:
        await asyncio.wait_for(speaker.speak(text, accent), timeout=timings.speech_timeout)
    except asyncio.TimeoutError:
        logger.info(f"[speech-timeout] text={text} after={timings.speech_timeout}s")
        _stop_speech(speaker)
    except Exception as exc:
        logger.warning(f"[speech-error] text={text} error={exc!r}")


def _stop_speech(speaker) -> None:
    # An abandoned utterance must not hold up the next one
    stop = getattr(speaker, 'stop', None)
    if stop is None:
        return
    try:
        stop()
    except Exception as exc:
        logger.warning(f"[speech-error] stop failed: {exc!r}")


async def finish_solve(
    session: GameSession,
    word: Word,
    speaker,
    clock: Callable[[], float],
    timings: SolveTimings,
) -> None:
    """Wait for both the dissolve and the narration, then resume the game."""
    await asyncio.gather(
        animate_dissolve(session, word, timings.dissolve, clock),
        speak_word(speaker, word.text, session.accent, timings),
    )
    session.frozen = False
    logger.debug(f"[resume] word={word.id}")
    maybe_finish_game(session)


async def run_solve_sequence(
    session: GameSession,
    word: Word,
    speaker,
    clock: Callable[[], float],
    timings: Optional[SolveTimings] = None,
) -> int:
    timings = timings or SolveTimings()
    points = begin_solve(session, word, clock(), timings)
    await finish_solve(session, word, speaker, clock, timings)
    return points
