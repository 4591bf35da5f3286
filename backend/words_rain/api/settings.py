from flask import Blueprint, jsonify, request, current_app
from words_rain.config import ConfigError
from words_rain.services.settings import (
    InvalidSetting,
    load_settings,
    save_accent,
    save_wordbook,
)

settings = Blueprint('settings', __name__)


def _settings_path():
    return current_app.config['SETTINGS_PATH']


@settings.route('/settings', methods=['GET'])
def get_settings():
    try:
        snapshot = load_settings(_settings_path(), current_app.config.get('DEFAULT_ACCENT', 'en-US'))
    except (OSError, ConfigError) as exc:
        current_app.logger.error(f"[settings-read] path={_settings_path()} failed: {exc}")
        return jsonify({'error': 'failed to read settings'}), 500
    return jsonify(snapshot)


def _put_setting(field, saver):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'invalid request body'}), 400
    try:
        snapshot = saver(_settings_path(), data.get(field), current_app.config['WORDBOOKS_DIR'])
    except InvalidSetting:
        return jsonify({'error': f'invalid {field}'}), 400
    except ConfigError as exc:
        current_app.logger.error(f"[settings-write] {field} failed: {exc}")
        return jsonify({'error': 'failed to read settings'}), 500
    except OSError as exc:
        current_app.logger.error(f"[settings-write] {field} failed: {exc}")
        return jsonify({'error': 'failed to write settings'}), 500

    current_app.logger.info(f"[settings-write] {field}={snapshot[field]}")
    return jsonify(snapshot)


@settings.route('/settings/accent', methods=['PUT'])
def put_accent():
    return _put_setting('accent', save_accent)


@settings.route('/settings/wordbook', methods=['PUT'])
def put_wordbook():
    return _put_setting('wordbook', save_wordbook)
