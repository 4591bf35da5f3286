import asyncio
import threading
from types import SimpleNamespace

import pytest
import requests

from words_rain.client.api import ApiError, WordsRainApi
from words_rain.client.setup import SetupScreen
from words_rain.client.speech import Pyttsx3Speaker
from words_rain.services.games.scheduler import SolveTimings, speak_word


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.payload = payload

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self.payload is None:
            raise ValueError('no json')
        return self.payload


class FakeHttp:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        result = self.responses[(method, url)]
        if isinstance(result, Exception):
            raise result
        return result


def test_api_client_requests():
    http = FakeHttp({
        ('GET', 'http://srv/api/wordbooks'): FakeResponse(payload={'wordbooks': ['a', 'b']}),
        ('GET', 'http://srv/api/wordbooks/my%20words'): FakeResponse(payload={'name': 'my words', 'words': ['x']}),
        ('PUT', 'http://srv/api/settings/accent'): FakeResponse(payload={'accent': 'en-GB', 'wordbook': ''}),
    })
    api = WordsRainApi('http://srv/', session=http, timeout=2)
    assert api.fetch_wordbooks() == ['a', 'b']
    assert api.fetch_wordbook_words('my words') == ['x']
    assert api.save_accent('en-GB')['accent'] == 'en-GB'
    method, url, kwargs = http.calls[-1]
    assert kwargs == {'timeout': 2, 'json': {'accent': 'en-GB'}}


@pytest.mark.parametrize('result', [
    FakeResponse(status_code=500, payload={'error': 'boom'}),
    FakeResponse(status_code=200, payload=None),
    requests.ConnectionError('refused'),
])
def test_api_client_failures_become_api_errors(result):
    api = WordsRainApi('http://srv', session=FakeHttp({('GET', 'http://srv/api/wordbooks'): result}))
    with pytest.raises(ApiError, match='Failed to load wordbook list.'):
        api.fetch_wordbooks()


class FakeApi:
    def __init__(self, books=None, settings=None, words=None, fail=()):
        self.books = books if books is not None else ['animals', 'colors']
        self.settings = settings if settings is not None else {'accent': 'en-US', 'wordbook': ''}
        self.words = words if words is not None else {'animals': ['cat', 'dog'], 'colors': []}
        self.fail = set(fail)
        self.saved = []

    def _check(self, name, message):
        if name in self.fail:
            raise ApiError(message)

    def fetch_wordbooks(self):
        self._check('books', 'Failed to load wordbook list.')
        return self.books

    def fetch_settings(self):
        self._check('settings', 'Failed to load settings.')
        return self.settings

    def fetch_wordbook_words(self, name):
        self._check('words', 'Failed to load wordbook words.')
        return self.words[name]

    def save_accent(self, accent):
        self._check('save', 'Failed to save accent setting.')
        self.saved.append(('accent', accent))

    def save_wordbook(self, wordbook):
        self._check('save', 'Failed to save wordbook setting.')
        self.saved.append(('wordbook', wordbook))


def test_setup_applies_saved_settings():
    setup = SetupScreen(FakeApi(settings={'accent': 'en-GB', 'wordbook': 'colors'}))
    setup.load()
    assert setup.start_enabled
    assert (setup.selected, setup.accent, setup.error) == ('colors', 'en-GB', '')


def test_setup_replaces_stale_saved_wordbook():
    api = FakeApi(settings={'accent': 'xx', 'wordbook': 'deleted'})
    setup = SetupScreen(api)
    setup.load()
    assert setup.selected == 'animals'
    assert setup.accent == 'en-US'
    assert api.saved == [('wordbook', 'animals')]


def test_setup_listing_failure_disables_start():
    setup = SetupScreen(FakeApi(fail={'books'}))
    setup.load()
    assert not setup.start_enabled
    assert setup.error == 'Failed to load wordbook list.'
    assert setup.fetch_words() is None


def test_setup_without_wordbooks_disables_start():
    setup = SetupScreen(FakeApi(books=[]))
    setup.load()
    assert not setup.start_enabled
    assert 'No .txt wordbooks' in setup.error


def test_setup_ignores_unavailable_settings():
    setup = SetupScreen(FakeApi(fail={'settings'}))
    setup.load()
    assert setup.start_enabled
    assert setup.error == ''
    assert setup.accent == 'en-US'


def test_setup_save_failures_are_transient_messages():
    setup = SetupScreen(FakeApi(fail={'save'}))
    setup.load()
    setup.toggle_accent()
    assert setup.accent == 'en-GB'
    assert setup.error == 'Failed to save accent preference.'
    setup.select_wordbook(1)
    assert setup.selected == 'colors'
    assert setup.error == 'Failed to save wordbook preference.'
    # the next start attempt clears the message
    setup.select_wordbook(-1)
    assert setup.fetch_words() == ['cat', 'dog']
    assert setup.error == ''


def test_setup_rejects_empty_wordbook_and_fetch_errors():
    setup = SetupScreen(FakeApi())
    setup.load()
    setup.select_wordbook(1)
    assert setup.fetch_words() is None
    assert setup.error == 'Selected wordbook is empty.'

    setup.api.fail.add('words')
    setup.select_wordbook(1)
    assert setup.fetch_words() is None
    assert setup.error == 'Failed to load wordbook words.'


def test_setup_speed_is_clamped():
    setup = SetupScreen(FakeApi())
    setup.change_speed(-3)
    assert setup.speed_level == 1
    setup.change_speed(20)
    assert setup.speed_level == 10


class FakeTtsEngine:
    def __init__(self, voices):
        self.props = {'rate': 200, 'voices': voices}
        self.said = []

    def getProperty(self, name):
        return self.props.get(name)

    def setProperty(self, name, value):
        self.props[name] = value

    def say(self, text):
        self.said.append((text, self.props.get('voice'), self.props['rate']))

    def runAndWait(self):
        pass

    def stop(self):
        pass


def test_speaker_picks_voice_by_accent():
    voices = [
        SimpleNamespace(id='voice-us', languages=[b'\x05en-us']),
        SimpleNamespace(id='voice-gb', languages=['en_GB']),
    ]
    engine = FakeTtsEngine(voices)
    speaker = Pyttsx3Speaker(engine)
    try:
        assert speaker.pick_voice('en-GB').id == 'voice-gb'
        assert speaker.pick_voice('en-US').id == 'voice-us'
        asyncio.run(speaker.speak('apple', 'en-GB'))
    finally:
        speaker.close()
    assert engine.said == [('apple', 'voice-gb', 184)]


class BlockingTtsEngine(FakeTtsEngine):
    """Hangs inside runAndWait on the word 'first' until stopped."""

    def __init__(self):
        super().__init__([])
        self.released = threading.Event()
        self.stopped = 0

    def runAndWait(self):
        if self.said[-1][0] == 'first':
            self.released.wait(timeout=5)

    def stop(self):
        self.stopped += 1
        self.released.set()


def test_timed_out_utterance_does_not_hold_up_later_words():
    engine = BlockingTtsEngine()
    speaker = Pyttsx3Speaker(engine)
    timings = SolveTimings(speech_timeout=0.2)

    async def scenario():
        for text in ('first', 'second', 'third'):
            await speak_word(speaker, text, 'en-US', timings)

    try:
        asyncio.run(scenario())
    finally:
        speaker.close()
    assert [text for text, _, _ in engine.said] == ['first', 'second', 'third']
    assert engine.stopped >= 1
