import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import pyttsx3

logger = logging.getLogger(__name__)

SPEECH_RATE_FACTOR = 0.92


class Pyttsx3Speaker:
    """Text-to-speech through pyttsx3.

    pyttsx3 blocks while it talks and its engine is not thread safe, so every
    utterance runs on one dedicated worker thread. A new utterance cuts off
    one still playing, so a stuck driver never queues words behind it.
    """

    def __init__(self, engine):
        self.engine = engine
        self.base_rate = engine.getProperty('rate') or 200
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='speech')
        self._voice_cache = {}
        self._pending = None

    def pick_voice(self, accent: str):
        if accent in self._voice_cache:
            return self._voice_cache[accent]
        wanted = accent.lower().replace('-', '_')
        language = wanted.split('_')[0]
        exact = partial = None
        for voice in self.engine.getProperty('voices') or []:
            tags = [_language_tag(lang) for lang in (getattr(voice, 'languages', None) or [])]
            tags.append((getattr(voice, 'id', '') or '').lower().replace('-', '_'))
            if any(wanted in tag for tag in tags):
                exact = voice
                break
            if partial is None and any(tag.startswith(language) for tag in tags):
                partial = voice
        voice = exact or partial
        self._voice_cache[accent] = voice
        return voice

    def _say(self, text: str, accent: str) -> None:
        voice = self.pick_voice(accent)
        if voice is not None:
            self.engine.setProperty('voice', voice.id)
        self.engine.setProperty('rate', int(self.base_rate * SPEECH_RATE_FACTOR))
        self.engine.say(text)
        self.engine.runAndWait()

    def stop(self) -> None:
        """Cut the current utterance short and drop anything queued behind it."""
        if self._pending is not None and not self._pending.done():
            self.engine.stop()

    async def speak(self, text: str, accent: str) -> None:
        self.stop()
        self._pending = self._executor.submit(self._say, text, accent)
        await asyncio.wrap_future(self._pending)

    def close(self) -> None:
        self.stop()
        self._executor.shutdown(wait=False)


def _language_tag(lang) -> str:
    if isinstance(lang, bytes):
        # Some drivers report languages as b'\x05en-us'
        lang = ''.join(ch for ch in lang.decode('ascii', 'ignore') if ch.isprintable())
    return str(lang).lower().replace('-', '_')


def create_speaker() -> Optional[Pyttsx3Speaker]:
    """Return a speaker, or None when the host has no usable speech driver."""
    try:
        engine = pyttsx3.init()
    except Exception as exc:
        logger.warning(f"[speech] text-to-speech unavailable: {exc}")
        return None
    return Pyttsx3Speaker(engine)
