from typing import Dict

from words_rain.config import (
    ACCENTS,
    DEFAULT_ACCENT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    AppConfig,
    load_config_optional,
    write_config,
)
from words_rain.services.wordbooks import InvalidWordbookName, clean_wordbook_name


class InvalidSetting(ValueError):
    pass


def _snapshot(cfg: AppConfig, default_accent: str = DEFAULT_ACCENT) -> Dict[str, str]:
    return {
        'accent': cfg.accent.strip() or default_accent,
        'wordbook': cfg.wordbook.strip(),
    }


def load_settings(path: str, default_accent: str = DEFAULT_ACCENT) -> Dict[str, str]:
    """Current accent and last-selected wordbook; a missing file means defaults."""
    return _snapshot(load_config_optional(path), default_accent)


def _fill_defaults(cfg: AppConfig, wordbooks_dir: str) -> bool:
    """Fill the server keys of a config about to be written.

    Returns True when the file holds nothing but defaults, i.e. this is the
    first time the player saves a preference.
    """
    if not cfg.host:
        cfg.host = DEFAULT_HOST
    if not cfg.port:
        cfg.port = DEFAULT_PORT
    if not cfg.wordbooks_dir:
        cfg.wordbooks_dir = wordbooks_dir
    return (
        cfg.host == DEFAULT_HOST
        and cfg.port == DEFAULT_PORT
        and cfg.wordbooks_dir == wordbooks_dir
        and not cfg.accent
        and not cfg.open_browser
    )


def save_accent(path: str, accent, wordbooks_dir: str) -> Dict[str, str]:
    accent = accent.strip() if isinstance(accent, str) else ''
    if accent not in ACCENTS:
        raise InvalidSetting(f"invalid accent: {accent!r}")

    cfg = load_config_optional(path)
    if _fill_defaults(cfg, wordbooks_dir):
        cfg.open_browser = True
    cfg.accent = accent
    write_config(path, cfg)
    return _snapshot(cfg)


def save_wordbook(path: str, wordbook, wordbooks_dir: str) -> Dict[str, str]:
    try:
        wordbook = clean_wordbook_name(wordbook)
    except InvalidWordbookName:
        raise InvalidSetting(f"invalid wordbook: {wordbook!r}") from None

    cfg = load_config_optional(path)
    if _fill_defaults(cfg, wordbooks_dir) and not cfg.wordbook:
        cfg.open_browser = True
    if not cfg.accent:
        cfg.accent = DEFAULT_ACCENT
    cfg.wordbook = wordbook
    write_config(path, cfg)
    return _snapshot(cfg)
