"""
Shared fixtures and fakes for the ArtiDB test suite.

The fakes stand in for the platform capabilities (downloads, clipboard,
file picker, confirmation prompt) so the pipeline runs headless.
"""

import tempfile

import pytest

from artidb.errors import TransferIOError
from artidb.gate import ConfirmationGate
from artidb.service import DatabaseTransferService
from artidb.store.memory import InMemoryLiveStore
from artidb.transfer.adapter import TransferAdapter


class RecordingConfirmer:
    """Confirmer that answers a fixed value and records every prompt."""

    def __init__(self, answer):
        self.answer = answer
        self.messages = []

    def __call__(self, message):
        self.messages.append(message)
        return self.answer


class FakeDownloader:
    """Downloader that keeps files in a dict."""

    def __init__(self, fail=False):
        self.files = {}
        self.fail = fail

    def download(self, text, filename):
        if self.fail:
            raise TransferIOError("disk full", transport="download", target=filename)
        self.files[filename] = text


class FakeClipboard:
    """ClipboardWriter that keeps written texts."""

    def __init__(self, fail=False):
        self.texts = []
        self.fail = fail

    def write(self, text):
        if self.fail:
            raise TransferIOError("no clipboard helper", transport="clipboard")
        self.texts.append(text)


class FakeReader:
    """FileReader serving texts from a dict."""

    def __init__(self, files=None):
        self.files = dict(files or {})
        self.calls = []

    async def read_text(self, handle):
        self.calls.append(handle)
        if handle not in self.files:
            raise TransferIOError(f"missing {handle}", transport="upload", target=str(handle))
        return self.files[handle]


@pytest.fixture
def data_dir():
    """Create temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def store():
    """Store holding one character and one artifact."""
    return InMemoryLiveStore(
        characters={"c1": {"key": "Amber", "level": 20}},
        artifacts={"a1": {"setKey": "GladiatorsFinale", "level": 16}},
    )


@pytest.fixture
def downloader():
    return FakeDownloader()


@pytest.fixture
def clipboard():
    return FakeClipboard()


@pytest.fixture
def reader():
    return FakeReader()


@pytest.fixture
def adapter(downloader, clipboard, reader):
    return TransferAdapter(downloader, clipboard, reader)


@pytest.fixture
def approve():
    return RecordingConfirmer(True)


@pytest.fixture
def decline():
    return RecordingConfirmer(False)


@pytest.fixture
def make_service(adapter):
    """Build a service over the fake transports with a given confirmer."""

    def factory(store, confirmer):
        return DatabaseTransferService(store, adapter, ConfirmationGate(confirmer))

    return factory
