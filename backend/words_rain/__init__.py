from flask import Flask
from flask_cors import CORS
import click
from words_rain.config import Config


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    CORS(flask_app, origins=flask_app.config.get('CORS_ORIGINS', []))

    # Import and register blueprints here
    from words_rain.routes import main
    flask_app.register_blueprint(main)

    from words_rain.api.wordbooks import wordbooks
    from words_rain.api.settings import settings
    flask_app.register_blueprint(wordbooks, url_prefix='/api')
    flask_app.register_blueprint(settings, url_prefix='/api')

    @click.command('list-wordbooks')
    def list_wordbooks_command():
        """Prints the wordbooks found in the configured directory."""
        from words_rain.services.wordbooks import list_wordbooks
        directory = flask_app.config.get('WORDBOOKS_DIR')
        if not directory:
            raise click.ClickException('WORDS_RAIN_WORDBOOKS_DIR is not set')
        try:
            books = list_wordbooks(directory)
        except OSError as exc:
            raise click.ClickException(f"failed to list wordbooks: {exc}")
        for name in books:
            click.echo(name)
        if not books:
            click.echo('No .txt wordbooks found.')

    flask_app.cli.add_command(list_wordbooks_command)

    return flask_app
