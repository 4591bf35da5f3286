import logging
import math
import random
from typing import Iterable, List, Optional

from words_rain.config import ACCENTS, DEFAULT_ACCENT
from .models import GameSession, Playfield
from .spawning import MAX_SPEED_LEVEL, MIN_SPEED_LEVEL, Measure, shuffled, spawn_word

logger = logging.getLogger(__name__)


class SessionSetupError(ValueError):
    """A game could not be started; the message is meant for the player."""


def normalize_words(words: Iterable) -> List[str]:
    normalized = []
    for w in words:
        text = str(w).strip().lower()
        if text:
            normalized.append(text)
    return normalized


def parse_max_words(raw) -> int:
    """Interpret a "max words" field: blank, invalid or negative means no limit."""
    text = str(raw if raw is not None else '').strip()
    if not text:
        return 0
    try:
        n = float(text)
    except ValueError:
        return 0
    if not math.isfinite(n):
        return 0
    return max(0, int(n))


def select_words(words: List[str], max_words: int, rng: random.Random) -> List[str]:
    if max_words > 0:
        return shuffled(words, rng)[:min(max_words, len(words))]
    return list(words)


def setup_session() -> GameSession:
    return GameSession()


def start_session(
    words,
    measure: Measure,
    playfield: Playfield,
    speed_level: int = MIN_SPEED_LEVEL,
    accent: str = DEFAULT_ACCENT,
    max_words: int = 0,
    rng: Optional[random.Random] = None,
) -> GameSession:
    """Build a running session from a wordbook's words.

    Raises SessionSetupError when there is nothing to play or a setting is
    out of range. One word is spawned right away so the screen never starts
    empty.
    """
    normalized = normalize_words(words or [])
    if not normalized:
        raise SessionSetupError('Selected wordbook is empty.')
    try:
        level = int(speed_level)
    except (TypeError, ValueError):
        raise SessionSetupError(f'Invalid speed level: {speed_level!r}') from None
    if not MIN_SPEED_LEVEL <= level <= MAX_SPEED_LEVEL:
        raise SessionSetupError(f'Speed level must be between {MIN_SPEED_LEVEL} and {MAX_SPEED_LEVEL}.')
    if accent not in ACCENTS:
        raise SessionSetupError(f'Unsupported accent: {accent!r}')

    session = GameSession(speed_level=level, accent=accent, rng=rng or random.Random())
    selected = select_words(normalized, parse_max_words(max_words), session.rng)
    session.pending_words = shuffled(selected, session.rng)
    session.running = True

    spawn_word(session, measure, playfield)
    logger.info(f"[start] words={len(selected)} speed={level} accent={accent}")
    return session


def maybe_finish_game(session: GameSession) -> bool:
    """Mark the game complete once every word has been solved.

    Safe to call repeatedly: it only ever sets the phase flags and the final
    score snapshot. A frozen session is left alone; the end of the solve
    sequence checks again.
    """
    if session.frozen:
        return False
    if not (session.running or session.game_over):
        return False
    if not session.pools_empty():
        return False
    if not session.game_over:
        logger.info(f"[finish] score={session.score}")
    session.running = False
    session.game_over = True
    session.final_score = session.score
    return True
