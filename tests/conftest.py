import os
import tempfile

# Keep test logs out of the working tree; must run before the package is imported
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="wordle-daily-logs-"))

import pytest  # noqa: E402

from wordle_daily import create_app  # noqa: E402
from wordle_daily.config import TestingConfig  # noqa: E402
from wordle_daily.services.game_engine import GameEngine  # noqa: E402
from wordle_daily.services.game_service import initialize_game_service  # noqa: E402
from wordle_daily.services.storage import MemoryStore, StateWriter  # noqa: E402
from wordle_daily.services.word_provider import WordProvider  # noqa: E402

SECRET = "fiona"
WORDS = ["fiona", "crane", "slate"]


def play(engine, *words):
    """Type each word and submit it."""
    for word in words:
        for letter in word:
            engine.submit_letter(letter)
        engine.submit_row()


@pytest.fixture
def engine():
    return GameEngine(SECRET)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def game_service(store):
    writer = StateWriter(store, asynchronous=False)
    return initialize_game_service(writer, WordProvider(WORDS), strict=True)


@pytest.fixture
def app(game_service):
    app, socketio = create_app(TestingConfig)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def socket_client(app):
    client = app.socketio.test_client(app)
    yield client
    if client.is_connected():
        client.disconnect()
