from flask import Blueprint, jsonify, current_app
from words_rain.services.wordbooks import (
    InvalidWordbookName,
    WordbookNotFound,
    list_wordbooks,
    read_wordbook,
)

wordbooks = Blueprint('wordbooks', __name__)


@wordbooks.route('/wordbooks', methods=['GET'])
def get_wordbooks():
    directory = current_app.config['WORDBOOKS_DIR']
    try:
        books = list_wordbooks(directory)
    except OSError as exc:
        current_app.logger.error(f"[wordbooks-list] dir={directory} failed: {exc}")
        return jsonify({'error': 'failed to list wordbooks'}), 500
    return jsonify({'wordbooks': books})


@wordbooks.route('/wordbooks/<path:name>', methods=['GET'])
def get_wordbook_words(name):
    """
    Returns the normalized words of one wordbook. Names containing path
    separators are rejected before touching the filesystem.
    """
    directory = current_app.config['WORDBOOKS_DIR']
    try:
        words = read_wordbook(directory, name)
    except InvalidWordbookName:
        return jsonify({'error': 'invalid wordbook name'}), 400
    except WordbookNotFound:
        return jsonify({'error': 'wordbook not found'}), 404
    except (OSError, UnicodeDecodeError) as exc:
        current_app.logger.error(f"[wordbook-read] name={name} failed: {exc}")
        return jsonify({'error': 'failed to read wordbook'}), 500

    name = name.strip()
    current_app.logger.info(f"[wordbook-read] name={name} words={len(words)}")
    return jsonify({'name': name, 'words': words})
