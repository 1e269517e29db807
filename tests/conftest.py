"""Shared test fixtures for biblios."""

import os
import tempfile
from pathlib import Path

import pytest

# Keep log files out of the user's home before biblios.logger is imported
os.environ.setdefault("BIBLIOS_LOG_DIR", tempfile.mkdtemp(prefix="biblios-logs-"))

from biblios.backend import MemoryProvider  # noqa: E402
from biblios.navigator import Navigator, Session  # noqa: E402

JOHN_3_16 = "For God so loved the world, that he gave his only begotten Son."


def _texts(book: str, chapter: int, count: int) -> list[str]:
    return [f"Verse {i} of {book} {chapter}." for i in range(1, count + 1)]


def sample_chapters() -> dict:
    """A handful of chapters with gaps, so rollover has something to skip."""
    john_3 = _texts("John", 3, 21)
    john_3[15] = JOHN_3_16
    return {
        ("Gen", 1): _texts("Gen", 1, 5),
        ("Gen", 2): _texts("Gen", 2, 3),
        ("Exod", 1): _texts("Exod", 1, 2),
        ("John", 1): _texts("John", 1, 5),
        ("John", 3): john_3,
        ("John", 4): _texts("John", 4, 4),
        ("Rev", 22): _texts("Rev", 22, 3),
    }


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config and data directories at a temporary folder."""
    monkeypatch.setenv("BIBLIOS_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("BIBLIOS_DATA_DIR", str(tmp_path / "data"))
    return tmp_path


@pytest.fixture
def provider() -> MemoryProvider:
    return MemoryProvider(sample_chapters())


@pytest.fixture
def session() -> Session:
    return Session.load()


@pytest.fixture
def copied() -> list:
    """Collects text sent to the clipboard."""
    return []


@pytest.fixture
def navigator(provider: MemoryProvider, session: Session, copied: list) -> Navigator:
    """A navigator started at the default location with a 5 verse viewport."""

    def clipboard(text: str) -> bool:
        copied.append(text)
        return True

    nav = Navigator(provider, session, viewport_height=5, clipboard=clipboard)
    nav.start()
    return nav
