import logging
from typing import Optional

from .models import GameSession, Word
from .scoring import register_chain_break

logger = logging.getLogger(__name__)

KEY_BACKSPACE = 'Backspace'
KEY_ESCAPE = 'Escape'
CONTROL_KEYS = (KEY_BACKSPACE, KEY_ESCAPE)


def choose_target(session: GameSession, prefix: str) -> Optional[Word]:
    """Pick the active word starting with ``prefix`` nearest to the ground.

    Ties on ``y`` go to the earliest spawned word (lowest id).
    """
    best = None
    for word in session.active_words:
        if not word.text.startswith(prefix):
            continue
        if best is None or word.y > best.y or (word.y == best.y and word.id < best.id):
            best = word
    return best


def validate_target(session: GameSession) -> None:
    """Drop the target if it left the active set or stopped matching the buffer."""
    if session.target_word_id is None:
        return
    word = session.find_active(session.target_word_id)
    if word is None or not session.input_buffer or not word.text.startswith(session.input_buffer):
        session.clear_input_tracking()


def handle_typed_character(session: GameSession, ch: str) -> Optional[Word]:
    """Feed one typed character to the session.

    Returns the solved word, already removed from the active set, when the
    character completes it; otherwise None.
    """
    if not session.accepts_input:
        return None

    lower = ch.lower()
    had_input = bool(session.input_buffer)
    next_buffer = session.input_buffer + lower
    target = choose_target(session, next_buffer)

    if target is None:
        # Chain broken: start a fresh attempt from this character alone
        if had_input:
            register_chain_break(session)
            logger.debug(f"[chain-break] buffer={session.input_buffer!r} char={lower!r}")
        next_buffer = lower
        target = choose_target(session, next_buffer)

    if target is None:
        session.clear_input_tracking()
        return None

    session.input_buffer = next_buffer
    session.target_word_id = target.id

    if session.input_buffer != target.text:
        return None

    solved = session.remove_active(target.id)
    session.clear_input_tracking()
    return solved


def handle_control_key(session: GameSession, key: str) -> None:
    if not session.accepts_input:
        return

    if key == KEY_BACKSPACE:
        if not session.input_buffer:
            return
        session.input_buffer = session.input_buffer[:-1]
        if not session.input_buffer:
            session.target_word_id = None
            return
        target = choose_target(session, session.input_buffer)
        session.target_word_id = target.id if target else None
        return

    if key == KEY_ESCAPE:
        session.clear_input_tracking()


def handle_key(session: GameSession, key) -> Optional[Word]:
    """Route a key name or character; anything unrecognised is a no-op."""
    if not isinstance(key, str):
        return None
    if key in CONTROL_KEYS:
        handle_control_key(session, key)
        return None
    if len(key) == 1 and key.isprintable():
        return handle_typed_character(session, key)
    return None
