import asyncio
import logging
import os
from dataclasses import dataclass

import click
from click.core import ParameterSource

from words_rain import create_app
from words_rain.config import (
    ACCENTS,
    DEFAULT_ACCENT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    Config,
    ConfigError,
    load_config_optional,
    parse_env_config,
)
from words_rain.services.browser import open_browser_later, server_url

logger = logging.getLogger(__name__)


@dataclass
class ServerOptions:
    wordbooks_dir: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    open_browser: bool = False
    accent: str = DEFAULT_ACCENT


def options_from_config_file(path: str) -> ServerOptions:
    """Server options read from the default config file; any problem is fatal."""
    try:
        cfg = parse_env_config(path)
    except (OSError, ConfigError) as exc:
        raise click.ClickException(f'failed to load default config "{path}": {exc}')
    return ServerOptions(
        wordbooks_dir=cfg.wordbooks_dir,
        host=cfg.host or DEFAULT_HOST,
        port=cfg.port or DEFAULT_PORT,
        open_browser=cfg.open_browser,
        accent=cfg.accent or DEFAULT_ACCENT,
    )


def validate_options(options: ServerOptions) -> ServerOptions:
    if not options.wordbooks_dir.strip():
        raise click.ClickException(
            'missing required parameter: --wordbooks-dir (or WORDS_RAIN_WORDBOOKS_DIR in default config)'
        )
    if not os.path.exists(options.wordbooks_dir):
        raise click.ClickException(f'invalid wordbooks directory: {options.wordbooks_dir} does not exist')
    if not os.path.isdir(options.wordbooks_dir):
        raise click.ClickException(f'invalid wordbooks directory: {options.wordbooks_dir} is not a directory')
    if options.accent not in ACCENTS:
        raise click.ClickException(f'invalid accent: {options.accent} (expected one of {", ".join(ACCENTS)})')
    return options


def build_app(options: ServerOptions, settings_path: str):
    server_config = type('ServerConfig', (Config,), {
        'WORDBOOKS_DIR': options.wordbooks_dir,
        'SETTINGS_PATH': settings_path,
        'DEFAULT_ACCENT': options.accent,
    })
    return create_app(server_config)


def run_server(flask_app, host: str, port: int) -> None:
    flask_app.run(host=host, port=port)


@click.command('serve')
@click.option('--wordbooks-dir', default='', help='Directory containing .txt wordbook files.')
@click.option('--host', default=DEFAULT_HOST, show_default=True, help='HTTP host.')
@click.option('--port', default=DEFAULT_PORT, type=int, show_default=True, help='HTTP port.')
@click.option('--open-browser/--no-open-browser', default=False, help='Open a browser on startup.')
@click.option('--accent', default=DEFAULT_ACCENT, type=click.Choice(ACCENTS), show_default=True,
              help='Accent used until the player picks one.')
@click.pass_context
def serve(ctx, wordbooks_dir, host, port, open_browser, accent):
    """Serve wordbooks and settings over HTTP.

    Without any flag the options come from the default config file
    (~/.config/words-rain/config.env or $WORDS_RAIN_CONFIG).
    """
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    settings_path = Config.SETTINGS_PATH

    no_flags = all(ctx.get_parameter_source(name) == ParameterSource.DEFAULT for name in ctx.params)
    if no_flags:
        options = options_from_config_file(settings_path)
    else:
        options = ServerOptions(wordbooks_dir, host, port, open_browser, accent)
    validate_options(options)

    flask_app = build_app(options, settings_path)
    url = server_url(options.host, options.port)
    logger.info(f"[serve] serving on http://{options.host}:{options.port} wordbooks={options.wordbooks_dir}")
    if options.open_browser:
        open_browser_later(url)
    run_server(flask_app, options.host, options.port)


@click.command('play')
@click.option('--server', 'server', default=None,
              help='Base URL of the words-rain server (defaults to the configured host and port).')
@click.option('--max-words', default=0, type=click.IntRange(min=0), show_default=True,
              help='Play a random subset of this many words (0 plays them all).')
@click.option('--fps', default=60, type=click.IntRange(10, 240), show_default=True)
@click.option('--no-speech', is_flag=True, help='Do not narrate solved words.')
def play(server, max_words, fps, no_speech):
    """Open the game window."""
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    if server is None:
        try:
            cfg = load_config_optional(Config.SETTINGS_PATH)
        except (OSError, ConfigError) as exc:
            raise click.ClickException(f'failed to load default config "{Config.SETTINGS_PATH}": {exc}')
        server = server_url(cfg.host or DEFAULT_HOST, cfg.port or DEFAULT_PORT)

    from words_rain.client.api import WordsRainApi
    from words_rain.client.app import GameWindow
    from words_rain.client.speech import create_speaker

    speaker = None if no_speech else create_speaker()
    window = GameWindow(WordsRainApi(server), speaker=speaker, max_words=max_words, fps=fps)
    try:
        asyncio.run(window.run())
    finally:
        if speaker is not None:
            speaker.close()
