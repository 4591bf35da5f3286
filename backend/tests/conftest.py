import os
import sys
import pytest

# Ensure the backend root (containing the `words_rain` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from words_rain import create_app


@pytest.fixture()
def wordbooks_dir(tmp_path):
    books = tmp_path / 'wordbooks'
    books.mkdir()
    (books / 'animals.txt').write_text('Cat\n  dog  \n\nHORSE\n', encoding='utf-8')
    (books / 'Colors.TXT').write_text('red\ngreen\n', encoding='utf-8')
    (books / 'empty.txt').write_text('\n   \n', encoding='utf-8')
    (books / '.hidden.txt').write_text('secret\n', encoding='utf-8')
    (books / 'notes.md').write_text('ignored\n', encoding='utf-8')
    (books / 'folder.txt').mkdir()
    return books


@pytest.fixture()
def settings_path(tmp_path):
    return tmp_path / 'config' / 'config.env'


@pytest.fixture()
def flask_app(wordbooks_dir, settings_path):
    class TestConfig:
        TESTING = True
        SECRET_KEY = 'test-secret'
        WORDBOOKS_DIR = str(wordbooks_dir)
        SETTINGS_PATH = str(settings_path)
        DEFAULT_ACCENT = 'en-US'
        CORS_ORIGINS = []

    application = create_app(TestConfig)
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()
