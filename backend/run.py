from words_rain import create_app
from words_rain.cli import serve

app = create_app()

if __name__ == '__main__':
    # Flags (or the default config file) pick the wordbooks dir, host and port
    serve()
