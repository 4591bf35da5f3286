import random
from dataclasses import dataclass, field
from typing import List, Optional

MAX_ACTIVE_WORDS = 8

PHASE_SETUP = 'setup'
PHASE_RUNNING = 'running'
PHASE_FROZEN = 'frozen'
PHASE_COMPLETE = 'complete'

EFFECT_DISSOLVE = 'dissolve'
EFFECT_SCORE = 'score'


@dataclass
class Word:
    id: int
    text: str
    x: float
    y: float
    width: float

    def to_dict(self):
        return {
            'id': self.id,
            'text': self.text,
            'x': self.x,
            'y': self.y,
            'width': self.width,
        }


@dataclass
class Effect:
    kind: str  # dissolve, score
    text: str
    x: float
    y: float
    duration: float
    started_at: float

    def progress(self, now: float) -> float:
        if self.duration <= 0:
            return 1.0
        return min(1.0, max(0.0, (now - self.started_at) / self.duration))

    def is_alive(self, now: float) -> bool:
        return now - self.started_at < self.duration


@dataclass
class Playfield:
    width: int = 960
    height: int = 600
    top_y: float = 26
    ground_margin: float = 42
    side_padding: float = 18

    @property
    def ground_y(self) -> float:
        return self.height - self.ground_margin

    @property
    def travel_distance(self) -> float:
        return self.ground_y - self.top_y


@dataclass
class GameSession:
    """All mutable state of one game, owned by a single engine."""

    speed_level: int = 1
    accent: str = 'en-US'
    max_active_words: int = MAX_ACTIVE_WORDS

    running: bool = False
    frozen: bool = False
    game_over: bool = False

    score: int = 0
    combo: int = 0
    final_score: Optional[int] = None

    input_buffer: str = ''
    # Lookup key into active_words, never a handle on the Word itself
    target_word_id: Optional[int] = None

    pending_words: List[str] = field(default_factory=list)
    active_words: List[Word] = field(default_factory=list)
    missed_words: List[str] = field(default_factory=list)
    effects: List[Effect] = field(default_factory=list)

    spawn_timer: float = 0.0
    next_word_id: int = 1
    last_frame_time: Optional[float] = None
    rng: random.Random = field(default_factory=random.Random, repr=False)

    @property
    def phase(self) -> str:
        if self.game_over:
            return PHASE_COMPLETE
        if not self.running:
            return PHASE_SETUP
        if self.frozen:
            return PHASE_FROZEN
        return PHASE_RUNNING

    @property
    def accepts_input(self) -> bool:
        return self.running and not self.frozen and not self.game_over

    def clear_input_tracking(self) -> None:
        self.input_buffer = ''
        self.target_word_id = None

    def find_active(self, word_id) -> Optional[Word]:
        for word in self.active_words:
            if word.id == word_id:
                return word
        return None

    def remove_active(self, word_id) -> Optional[Word]:
        for index, word in enumerate(self.active_words):
            if word.id == word_id:
                return self.active_words.pop(index)
        return None

    def pools_empty(self) -> bool:
        return not self.pending_words and not self.active_words and not self.missed_words

    def to_dict(self):
        return {
            'phase': self.phase,
            'running': self.running,
            'frozen': self.frozen,
            'game_over': self.game_over,
            'score': self.score,
            'combo': self.combo,
            'final_score': self.final_score,
            'input_buffer': self.input_buffer,
            'target_word_id': self.target_word_id,
            'speed_level': self.speed_level,
            'accent': self.accent,
            'pending_count': len(self.pending_words),
            'missed_count': len(self.missed_words),
            'active_words': [w.to_dict() for w in self.active_words],
        }
