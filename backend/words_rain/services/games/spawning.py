import logging
from typing import Callable, List, Optional

from .models import GameSession, Playfield, Word
from .scoring import register_miss

logger = logging.getLogger(__name__)

MIN_SPEED_LEVEL = 1
MAX_SPEED_LEVEL = 10
MIN_FALL_SECONDS = 3.0
MAX_FALL_SECONDS = 10.0
SPEED_CURVE_EXPONENT = 1.6

SPAWN_INTERVAL_SEC = 1.0
MIN_WORD_WIDTH = 40
WORD_WIDTH_PADDING = 16

Measure = Callable[[str], float]


def clamp_speed_level(level) -> int:
    return max(MIN_SPEED_LEVEL, min(MAX_SPEED_LEVEL, int(level)))


def fall_seconds(level) -> float:
    """Seconds a word takes from the top line to the ground at ``level``.

    The power curve keeps the low levels close together and ramps up
    towards level 10.
    """
    t = (clamp_speed_level(level) - MIN_SPEED_LEVEL) / (MAX_SPEED_LEVEL - MIN_SPEED_LEVEL)
    curved = t ** SPEED_CURVE_EXPONENT
    return MAX_FALL_SECONDS - (MAX_FALL_SECONDS - MIN_FALL_SECONDS) * curved


def pixels_per_second(level, playfield: Playfield) -> float:
    return playfield.travel_distance / fall_seconds(level)


def shuffled(words, rng) -> List[str]:
    result = list(words)
    rng.shuffle(result)
    return result


def measure_word(text: str, measure: Measure) -> float:
    return max(MIN_WORD_WIDTH, measure(text) + WORD_WIDTH_PADDING)


def choose_spawn_x(session: GameSession, width: float, playfield: Playfield) -> float:
    min_x = playfield.side_padding
    max_x = playfield.width - playfield.side_padding - width
    # A word wider than the playfield is pinned to the left edge
    return min_x + session.rng.random() * max(0.0, max_x - min_x)


def spawn_word(session: GameSession, measure: Measure, playfield: Playfield) -> Optional[Word]:
    """Move the next pending text into the active set.

    Returns None when the active set is full or there is nothing left to
    show. An exhausted pending queue is refilled from a shuffled copy of the
    missed pool.
    """
    if len(session.active_words) >= session.max_active_words:
        return None

    if not session.pending_words:
        if not session.missed_words:
            return None
        session.pending_words = shuffled(session.missed_words, session.rng)
        session.missed_words = []
        logger.debug(f"[requeue] words={len(session.pending_words)}")

    text = session.pending_words.pop(0)
    width = measure_word(text, measure)
    word = Word(
        id=session.next_word_id,
        text=text,
        x=choose_spawn_x(session, width, playfield),
        y=playfield.top_y,
        width=width,
    )
    session.next_word_id += 1
    session.active_words.append(word)
    logger.debug(f"[spawn] word={word.id} text={word.text}")
    return word


def miss_word(session: GameSession, word: Word) -> None:
    session.missed_words.append(word.text)
    register_miss(session)
    if session.target_word_id == word.id:
        session.clear_input_tracking()
    logger.debug(f"[miss] word={word.id} text={word.text}")


def advance_world(session: GameSession, dt: float, measure: Measure, playfield: Playfield) -> List[Word]:
    """Spawn on cadence, let every active word fall, and collect misses."""
    session.spawn_timer += dt
    while session.spawn_timer >= SPAWN_INTERVAL_SEC:
        session.spawn_timer -= SPAWN_INTERVAL_SEC
        spawn_word(session, measure, playfield)

    speed = pixels_per_second(session.speed_level, playfield)
    survivors = []
    missed = []
    for word in session.active_words:
        word.y += speed * dt
        if word.y >= playfield.ground_y:
            missed.append(word)
            continue
        survivors.append(word)
    session.active_words = survivors

    for word in missed:
        miss_word(session, word)
    return missed
