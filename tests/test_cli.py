"""Tests for the command-line interface."""

import json

import pytest

from shortlinks.cli import main


@pytest.fixture(autouse=True)
def cli_env(monkeypatch, tmp_path):
    """Point the CLI at a throwaway file store."""
    monkeypatch.setenv("STORAGE_BACKEND", "file")
    monkeypatch.setenv("STORAGE_PATH", str(tmp_path / "store"))
    monkeypatch.setenv("LOCATION_BACKEND", "static")
    monkeypatch.setenv("LOCATION_LABEL", "Test City")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    return tmp_path


def run_cli(capsys, *argv):
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


class TestCLI:
    """Test CLI commands against a file store."""

    def test_shorten_and_get(self, capsys):
        code, out, _ = run_cli(capsys, "shorten", "https://example.com", "--custom-code", "promo1")
        assert code == 0
        result = json.loads(out)
        assert result["success"]
        assert result["short_url"] == "http://localhost:3000/promo1"

        code, out, _ = run_cli(capsys, "get", "promo1")
        assert code == 0
        record = json.loads(out)
        assert record["originalURL"] == "https://example.com"
        assert record["totalClicks"] == 0
        assert record["expired"] is False
        assert record["status"].endswith("remaining")

    def test_conflict_reported(self, capsys):
        run_cli(capsys, "shorten", "https://example.com", "--custom-code", "promo1")

        code, out, err = run_cli(capsys, "shorten", "https://example.org", "--custom-code", "promo1")

        assert code == 1
        assert out == ""
        assert '"kind": "ShortcodeConflict"' in err

    def test_invalid_url_reported(self, capsys):
        code, _, err = run_cli(capsys, "shorten", "not-a-url")
        assert code == 1
        assert '"kind": "InvalidURL"' in err

    def test_visit_records_click(self, capsys):
        run_cli(capsys, "shorten", "https://example.com/page", "--custom-code", "promo1", "--validity", "5")

        code, out, _ = run_cli(capsys, "visit", "promo1", "--source", "email")
        assert code == 0
        assert json.loads(out)["original_url"] == "https://example.com/page"

        _, out, _ = run_cli(capsys, "get", "promo1")
        record = json.loads(out)
        assert record["totalClicks"] == 1
        assert record["clicks"][0]["source"] == "email"
        assert record["clicks"][0]["location"] == "Test City"

    def test_visit_unknown(self, capsys):
        code, _, err = run_cli(capsys, "visit", "missing")
        assert code == 1
        assert '"kind": "NotFound"' in err

    def test_get_unknown(self, capsys):
        code, _, err = run_cli(capsys, "get", "missing")
        assert code == 1
        assert "not found" in err

    def test_list_stats_sweep(self, capsys):
        run_cli(capsys, "shorten", "https://example.com/a")
        run_cli(capsys, "shorten", "https://example.com/b")

        _, out, _ = run_cli(capsys, "list")
        assert json.loads(out)["count"] == 2

        _, out, _ = run_cli(capsys, "stats")
        stats = json.loads(out)
        assert stats["total_urls"] == 2
        assert stats["active_urls"] == 2

        _, out, _ = run_cli(capsys, "sweep")
        assert json.loads(out)["deleted"] == 0

    def test_logs_and_clear(self, capsys):
        run_cli(capsys, "get", "missing")

        code, out, _ = run_cli(capsys, "logs", "--limit", "50")
        assert code == 0
        logs = json.loads(out)
        assert logs["count"] == 1
        assert logs["logs"][0]["message"] == "URL not found by short code"
        assert logs["logs"][0]["level"] == "warning"

        code, out, _ = run_cli(capsys, "clear-logs")
        assert code == 0
        assert json.loads(out)["success"]

    def test_health(self, capsys):
        code, out, _ = run_cli(capsys, "health")
        assert code == 0
        assert json.loads(out)["storage"] is True
