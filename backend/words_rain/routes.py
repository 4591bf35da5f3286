from flask import Blueprint, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({
        'message': 'Welcome to the Words Rain server!',
        'endpoints': [
            'GET /api/wordbooks',
            'GET /api/wordbooks/<name>',
            'GET /api/settings',
            'PUT /api/settings/accent',
            'PUT /api/settings/wordbook',
        ],
    })
