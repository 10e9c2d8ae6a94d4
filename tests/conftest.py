"""Test configuration and fixtures for img2latex tests."""

import pathlib

import pytest
from factories import ConfigFactory, FileFactory, ImageFactory, RecordingWriter

from img2latex.clipboard import Clipboard
from img2latex.constants import API_KEY_ENV_VAR, MAX_FILE_SIZE_ENV_VAR


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Automatically isolate XDG directories and credentials for all tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)
    monkeypatch.delenv(MAX_FILE_SIZE_ENV_VAR, raising=False)


@pytest.fixture
def png_file(tmp_path) -> pathlib.Path:
    """Create a test PNG file."""
    return FileFactory.create_png_file(tmp_path)


@pytest.fixture
def png_image():
    """Create an in-memory PNG upload."""
    return ImageFactory.create_png()


@pytest.fixture
def demo_config():
    return ConfigFactory.demo()


@pytest.fixture
def live_config():
    return ConfigFactory.live()


@pytest.fixture
def recording_clipboard():
    """Clipboard whose primary and fallback writers only record calls."""
    return Clipboard(primary=RecordingWriter(), fallback=RecordingWriter())
