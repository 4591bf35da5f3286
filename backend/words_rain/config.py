import os
from dataclasses import dataclass

DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 8080
DEFAULT_ACCENT = 'en-US'
ACCENTS = ('en-US', 'en-GB')

CONFIG_HEADER = '# words-rain default config'

_TRUE_VALUES = {'1', 't', 'T', 'TRUE', 'true', 'True'}
_FALSE_VALUES = {'0', 'f', 'F', 'FALSE', 'false', 'False'}


def default_config_path() -> str:
    return os.path.join(os.path.expanduser('~'), '.config', 'words-rain', 'config.env')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Directory holding the .txt wordbooks (required to serve)
    WORDBOOKS_DIR = os.environ.get('WORDS_RAIN_WORDBOOKS_DIR', '')
    # KEY=VALUE file that also persists the player's settings
    SETTINGS_PATH = os.environ.get('WORDS_RAIN_CONFIG') or default_config_path()
    DEFAULT_ACCENT = os.environ.get('WORDS_RAIN_ACCENT') or DEFAULT_ACCENT
    CORS_ORIGINS = [
        "http://localhost:8080",
        "http://127.0.0.1:8080",
    ]


class ConfigError(Exception):
    """Raised for a config file that cannot be parsed."""


@dataclass
class AppConfig:
    host: str = ''
    port: int = 0
    wordbooks_dir: str = ''
    open_browser: bool = False
    accent: str = ''
    wordbook: str = ''


def _parse_bool(value: str, key: str, line_no: int) -> bool:
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"invalid {key} at line {line_no}: {value!r} is not a boolean")


def parse_env_config(path: str) -> AppConfig:
    """Parse a words-rain config file.

    Blank lines and ``#`` comments are skipped, every other line must be
    ``KEY=VALUE``. Unknown keys are ignored. Raises ``FileNotFoundError``
    when the file does not exist and ``ConfigError`` on malformed content.
    """
    cfg = AppConfig()
    with open(path, encoding='utf-8') as fh:
        for line_no, raw in enumerate(fh, start=1):
            line = raw.strip()
            if not line or line.startswith('#'):
                continue
            if '=' not in line:
                raise ConfigError(f"invalid line {line_no}: expected KEY=VALUE")
            key, value = line.split('=', 1)
            key = key.strip()
            value = value.strip()
            if key == 'WORDS_RAIN_HOST':
                cfg.host = value
            elif key == 'WORDS_RAIN_PORT':
                try:
                    cfg.port = int(value)
                except ValueError:
                    raise ConfigError(f"invalid WORDS_RAIN_PORT at line {line_no}: {value!r}") from None
            elif key == 'WORDS_RAIN_WORDBOOKS_DIR':
                cfg.wordbooks_dir = value
            elif key == 'WORDS_RAIN_OPEN_BROWSER':
                cfg.open_browser = _parse_bool(value, key, line_no)
            elif key == 'WORDS_RAIN_ACCENT':
                cfg.accent = value
            elif key == 'WORDS_RAIN_WORDBOOK':
                cfg.wordbook = value
    return cfg


def load_config_optional(path: str) -> AppConfig:
    """Like parse_env_config, but a missing file yields an empty config."""
    try:
        return parse_env_config(path)
    except FileNotFoundError:
        return AppConfig()


def write_config(path: str, cfg: AppConfig) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    lines = [
        CONFIG_HEADER,
        f"WORDS_RAIN_HOST={cfg.host}",
        f"WORDS_RAIN_PORT={cfg.port}",
        f"WORDS_RAIN_OPEN_BROWSER={'true' if cfg.open_browser else 'false'}",
        f"WORDS_RAIN_WORDBOOKS_DIR={cfg.wordbooks_dir}",
        f"WORDS_RAIN_ACCENT={cfg.accent}",
        f"WORDS_RAIN_WORDBOOK={cfg.wordbook}",
        "",
    ]
    with open(path, 'w', encoding='utf-8') as fh:
        fh.write('\n'.join(lines))
