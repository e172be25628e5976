"""
Shared fixtures for the game core and the HTTP / Socket.IO surfaces.
"""

import pytest
from cloudwordle.services.collaborators import Renderer
from cloudwordle.services.storage import MemoryStorage


class RecordingRenderer(Renderer):
    """Keeps every renderer call in order as (method, *args)."""

    def __init__(self):
        self.calls = []

    def update_tile(self, row, col, letter, status=None):
        self.calls.append(('update_tile', row, col, letter, status))

    def update_key(self, letter, status):
        self.calls.append(('update_key', letter, status))

    def show_message(self, text):
        self.calls.append(('show_message', text))

    def show_modal(self, title, message):
        self.calls.append(('show_modal', title, message))

    def render_board(self, board, keyboard):
        self.calls.append(('render_board',))

    def named(self, method):
        return [call for call in self.calls if call[0] == method]

    @property
    def messages(self):
        return [call[1] for call in self.named('show_message')]


class ScriptedValidator:
    """Accepts every word except the ones listed; raises for words in `failing`."""

    def __init__(self, rejected=(), failing=()):
        self.rejected = set(rejected)
        self.failing = set(failing)
        self.checked = []

    def is_valid_word(self, word):
        self.checked.append(word)
        if word in self.failing:
            raise ConnectionError("dictionary service unreachable")
        return word not in self.rejected


class FakeStatsStore:
    def __init__(self, remote=None, fail_load=False, fail_save=False):
        self.remote = remote
        self.fail_load = fail_load
        self.fail_save = fail_save
        self.saved = []

    def load_stats(self):
        if self.fail_load:
            raise ConnectionError("cloud down")
        return self.remote

    def save_stats(self, stats, target_word=None, won=None, attempts=None):
        if self.fail_save:
            raise ConnectionError("cloud down")
        self.saved.append((stats.to_dict(), target_word, won, attempts))
        return True


def sync_spawn(target, *args):
    """Runs the guess pipeline inline so tests see its effects immediately."""
    target(*args)


def no_sleep(seconds):
    pass


def type_word(gate, word):
    for letter in word:
        gate.handle_key(letter)


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def validator():
    return ScriptedValidator()


@pytest.fixture
def server():
    """App, Socket.IO server and HTTP client wired to in-memory player storage."""
    from cloudwordle import create_app, init_services
    from cloudwordle.config import TestingConfig

    app, socketio = create_app(TestingConfig)
    stores = {}

    def storage_factory(player_id):
        return stores.setdefault(player_id, MemoryStorage())

    init_services(
        TestingConfig, socketio,
        storage_factory=storage_factory,
        chooser=lambda words: "CRANE",
        sleep=no_sleep,
        spawn=sync_spawn,
    )

    class Server:
        pass

    bundle = Server()
    bundle.app = app
    bundle.socketio = socketio
    bundle.client = app.test_client()
    bundle.stores = stores
    return bundle


def auth(token):
    return {'Authorization': f'Bearer {token}'}
