"""Tests for the command line entry point."""

import json

import pytest

from biblios.__main__ import build_parser, main
from biblios.app import BibliosApp
from biblios.backend import SqliteProvider, create_sample_database
from biblios.bookmarks import bookmarks_path
from biblios.config import settings_path
from biblios.data.types import Location
from biblios.state import ReadingState, state_path


class TestMain:
    def test_import_json(self, tmp_path, capsys):
        source = tmp_path / "bible.json"
        source.write_text(json.dumps({"books": [{"name": "Ruth", "chapters": [["Now it came to pass."]]}]}))
        db = tmp_path / "bible.db"

        assert main(["--import-json", str(source), "--db", str(db)]) == 0
        assert "Imported 1 verses" in capsys.readouterr().out

        provider = SqliteProvider(db)
        try:
            assert provider.load_chapter("Ruth", 1).verses[0].text == "Now it came to pass."
        finally:
            provider.close()

    def test_import_missing_file(self, tmp_path, capsys):
        assert main(["--import-json", str(tmp_path / "nope.json"), "--db", str(tmp_path / "x.db")]) == 1
        assert "Import failed" in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--version"])
        assert "biblios" in capsys.readouterr().out

    def test_missing_database(self, tmp_path, capsys):
        missing = tmp_path / "missing.db"
        assert main(["--db", str(missing)]) == 1
        assert "No Bible database" in capsys.readouterr().err
        assert not missing.exists()

    def test_shutdown_runs_when_app_crashes(self, tmp_path, monkeypatch):
        """Settings, bookmarks and position are flushed even if the app loop raises."""
        db = tmp_path / "bible.db"
        create_sample_database(db)

        def crash(self, *args, **kwargs):
            raise RuntimeError("terminal went away")

        monkeypatch.setattr(BibliosApp, "run", crash)
        with pytest.raises(RuntimeError):
            main(["--db", str(db)])

        assert state_path().exists()
        assert settings_path().exists()
        assert bookmarks_path().exists()
        assert ReadingState.load().location == Location("John", 1, 0)
