from .models import GameSession


def register_solve(session: GameSession) -> int:
    """Apply scoring for a solved word and return the points awarded.

    Each solve extends the combo by one and is worth the new combo, so an
    unbroken run scores 1, 2, 3, ...
    """
    session.combo += 1
    points = session.combo
    session.score += points
    return points


def register_miss(session: GameSession) -> None:
    session.combo = 0


def register_chain_break(session: GameSession) -> None:
    session.combo = 0
