from typing import Dict, List
from urllib.parse import quote

import requests

DEFAULT_TIMEOUT = 5.0


class ApiError(Exception):
    """A request to the words-rain server failed; the message is user facing."""


class WordsRainApi:
    def __init__(self, base_url: str, session=None, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, failure: str, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            res = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise ApiError(failure) from exc
        if not res.ok:
            raise ApiError(failure)
        try:
            return res.json()
        except ValueError as exc:
            raise ApiError(failure) from exc

    def fetch_wordbooks(self) -> List[str]:
        data = self._request('GET', '/api/wordbooks', 'Failed to load wordbook list.')
        return list(data.get('wordbooks') or [])

    def fetch_wordbook_words(self, name: str) -> List[str]:
        data = self._request('GET', f"/api/wordbooks/{quote(name, safe='')}", 'Failed to load wordbook words.')
        return list(data.get('words') or [])

    def fetch_settings(self) -> Dict[str, str]:
        return self._request('GET', '/api/settings', 'Failed to load settings.')

    def save_accent(self, accent: str) -> Dict[str, str]:
        return self._request('PUT', '/api/settings/accent', 'Failed to save accent setting.', json={'accent': accent})

    def save_wordbook(self, wordbook: str) -> Dict[str, str]:
        return self._request('PUT', '/api/settings/wordbook', 'Failed to save wordbook setting.', json={'wordbook': wordbook})
