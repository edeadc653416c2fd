"""
Tests for the command-line interface.
"""

import json

import pytest

from knowledge_decay.cli import build_parser, format_time_ago, main, truncate
from knowledge_decay.models.entry import now_ms


class TestFormatting:
    """Tests for output helpers."""

    @pytest.mark.parametrize("age_ms,expected", [
        (0, "Just now"),
        (59_000, "Just now"),
        (5 * 60_000, "5m ago"),
        (3 * 3_600_000, "3h ago"),
        (2 * 86_400_000, "2d ago"),
    ])
    def test_format_time_ago(self, age_ms, expected):
        assert format_time_ago(1_000_000_000_000 - age_ms, 1_000_000_000_000) == expected

    def test_truncate(self):
        assert truncate("abcdef", 3) == "abc..."
        assert truncate("abc", 3) == "abc"
        assert truncate("", 3) == ""


class TestParser:
    """Tests for argument parsing."""

    def test_import_defaults_to_replace(self):
        args = build_parser().parse_args(["import", "backup.json"])
        assert args.merge is False

    def test_list_filter_choices(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["list", "--filter", "fading"])


class TestMain:
    """Tests running commands against a SQLite history."""

    @pytest.fixture
    def db(self, temp_directory):
        return str(temp_directory / "history.db")

    @pytest.fixture
    def backup(self, temp_directory):
        path = temp_directory / "backup.json"
        path.write_text(json.dumps({
            "version": "1.0",
            "exportDate": "2024-01-01T00:00:00.000Z",
            "totalTopics": 1,
            "data": [{
                "id": "learn_cli_1",
                "title": "Intro to Python",
                "url": "https://www.coursera.org/learn/python",
                "concepts": ["variables"],
                "summary": "Basics",
                "domain": "programming",
                "complexity": 4,
                "timeSpent": 60,
                "learnedAt": now_ms(),
            }],
        }))
        return path

    def test_empty_stats(self, db, capsys):
        assert main(["--db", db, "stats"]) == 0
        assert "Topics learned: 0" in capsys.readouterr().out

    def test_import_list_export(self, db, backup, temp_directory, capsys):
        assert main(["--db", db, "import", str(backup)]) == 0
        assert main(["--db", db, "list"]) == 0

        out = capsys.readouterr().out
        assert "Intro to Python" in out
        assert "id=learn_cli_1" in out

        exported = temp_directory / "out.json"
        assert main(["--db", db, "export", str(exported)]) == 0
        assert json.loads(exported.read_text())["totalTopics"] == 1

    def test_remember_and_forget(self, db, backup, capsys):
        main(["--db", db, "import", str(backup)])

        assert main(["--db", db, "remember", "learn_cli_1"]) == 0
        assert main(["--db", db, "forget", "learn_cli_1"]) == 0
        assert main(["--db", db, "forget", "learn_cli_1"]) == 1

    def test_clear_requires_confirmation(self, db, backup):
        main(["--db", db, "import", str(backup)])

        assert main(["--db", db, "clear"]) == 1
        assert main(["--db", db, "clear", "--yes"]) == 0

    def test_import_bad_file(self, db, temp_directory, capsys):
        bad = temp_directory / "bad.json"
        bad.write_text("{oops")

        assert main(["--db", db, "import", str(bad)]) == 1
        assert "Import failed" in capsys.readouterr().out

    def test_import_missing_file(self, db, temp_directory, capsys):
        missing = temp_directory / "missing.json"

        assert main(["--db", db, "import", str(missing)]) == 1
        assert "Import failed" in capsys.readouterr().out
