import asyncio
import os

os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')

import pygame
import pytest

from words_rain.client.app import GameWindow
from words_rain.client.renderer import BACKGROUND
from words_rain.services.games.models import EFFECT_DISSOLVE, EFFECT_SCORE, Effect, GameSession, Word
from words_rain.services.games.scheduler import SolveTimings
from words_rain.services.games.spawning import spawn_word
from test_client import FakeApi

FAST = SolveTimings(dissolve=0.01, score_popup=0.02, speech_timeout=0.05, missing_speech_delay=0.01)


def key(code, text=''):
    return pygame.event.Event(pygame.KEYDOWN, key=code, unicode=text)


def type_text(window, text):
    for ch in text:
        window.handle_game_key(key(ord(ch), ch))


@pytest.fixture()
def window():
    win = GameWindow(FakeApi())
    win.open()
    win.engine.timings = FAST
    win.setup.load()
    yield win
    win._io.shutdown(wait=True)
    pygame.quit()


async def _start(window):
    window.handle_setup_key(key(pygame.K_RETURN))
    await window._starting
    session = window.engine.session
    while spawn_word(session, window.engine.measure, window.engine.playfield):
        pass
    return session


def test_setup_keys_change_choices_and_save_in_order(window):
    async def scenario():
        window.handle_setup_key(key(pygame.K_DOWN))
        window.handle_setup_key(key(pygame.K_RIGHT))
        window.handle_setup_key(key(pygame.K_RIGHT))
        window.handle_setup_key(key(pygame.K_LEFT))
        window.handle_setup_key(key(pygame.K_TAB))
        # choices show up before the server has answered
        assert (window.setup.selected, window.setup.speed_level, window.setup.accent) == ('colors', 2, 'en-GB')
        await window.in_background(lambda: None)

    asyncio.run(scenario())
    assert window.api.saved == [('wordbook', 'colors'), ('accent', 'en-GB')]


def test_enter_starts_game_with_setup_choices(window):
    async def scenario():
        window.handle_setup_key(key(pygame.K_UP))
        window.handle_setup_key(key(pygame.K_UP))
        window.handle_setup_key(key(pygame.K_RIGHT))
        return await _start(window)

    session = asyncio.run(scenario())
    assert window.in_game
    assert session.phase == 'running'
    assert session.speed_level == 2
    assert sorted(w.text for w in session.active_words) == ['cat', 'dog']


def test_empty_wordbook_keeps_setup_screen(window):
    async def scenario():
        window.handle_setup_key(key(pygame.K_DOWN))
        window.handle_setup_key(key(pygame.K_RETURN))
        await window._starting

    asyncio.run(scenario())
    assert not window.in_game
    assert window.setup.error == 'Selected wordbook is empty.'
    assert window.engine.session.phase == 'setup'


def test_game_keys_reach_the_engine(window):
    async def scenario():
        session = await _start(window)
        type_text(window, 'cat')
        assert session.frozen
        assert session.score == 1
        await window.engine.wait_idle()

        type_text(window, 'd')
        assert session.input_buffer == 'd'
        window.handle_game_key(key(pygame.K_BACKSPACE))
        assert session.input_buffer == ''
        type_text(window, 'do')
        window.handle_game_key(key(pygame.K_ESCAPE))
        assert session.input_buffer == ''
        assert session.target_word_id is None

        # modifier keys carry no text
        window.handle_game_key(key(pygame.K_LSHIFT))
        assert session.input_buffer == ''

        window.handle_game_key(key(pygame.K_F10))
        assert not window.in_game
        assert window.engine.session.phase == 'setup'

    asyncio.run(scenario())


def test_enter_after_completion_returns_to_setup(window):
    async def scenario():
        session = await _start(window)
        session.running = False
        session.game_over = True
        session.final_score = 5
        type_text(window, 'c')
        assert session.input_buffer == ''
        assert window.in_game
        window.handle_game_key(key(pygame.K_RETURN))
        assert not window.in_game

    asyncio.run(scenario())


def test_measure_text_width_grows_with_text(window):
    measure = window.renderer.measure_text_width
    assert measure('') == 0
    assert 0 < measure('a') < measure('apple')


def test_draw_game_with_target_effects_and_result(window):
    session = GameSession(running=False, game_over=True, score=7, combo=3, final_score=7)
    session.active_words = [
        Word(id=1, text='apple', x=40.0, y=200.0, width=80.0),
        Word(id=2, text='pear', x=300.0, y=120.0, width=60.0),
    ]
    session.target_word_id = 1
    session.input_buffer = 'ap'
    session.effects = [
        Effect(kind=EFFECT_SCORE, text='+3', x=132.0, y=196.0, duration=0.85, started_at=10.0),
        Effect(kind=EFFECT_DISSOLVE, text='plum', x=500.0, y=300.0, duration=0.6, started_at=10.0),
    ]

    window.renderer.draw_game(session, 10.3)

    assert window.screen.get_at((0, 0))[:3] == BACKGROUND


def test_draw_setup_with_error(window):
    window.setup.error = 'Failed to load wordbook list.'
    window.renderer.draw_setup(window.setup)
    assert window.screen.get_at((0, 0))[:3] == BACKGROUND
