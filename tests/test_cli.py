"""Tests for the command line interface."""

import pytest
import yaml
from typer.testing import CliRunner

from faceoff import __version__
from faceoff.cli import app
from faceoff.core.config import DATABASE_URL_ENV

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    monkeypatch.delenv(DATABASE_URL_ENV, raising=False)
    path = tmp_path / "faceoff.yaml"
    path.write_text(
        yaml.dump(
            {
                "store": {"database_url": f"sqlite:///{tmp_path / 'cli.db'}"},
                "directory": {"dry_run": True},
            }
        )
    )
    return path


class TestCli:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_validate(self, config_path):
        result = runner.invoke(app, ["validate", str(config_path)])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output

    def test_validate_missing_file(self, tmp_path):
        result = runner.invoke(app, ["validate", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 1

    def test_add_then_rank(self, config_path):
        added = runner.invoke(app, ["add", "Mira Tal", "female", "-c", str(config_path)])
        assert added.exit_code == 0
        assert "Mira Tal has been added successfully" in added.output

        duplicate = runner.invoke(app, ["add", "Mira Tal", "female", "-c", str(config_path)])
        assert duplicate.exit_code == 1
        assert "already in the database" in duplicate.output

        board = runner.invoke(app, ["leaderboard", "-c", str(config_path)])
        assert board.exit_code == 0
        assert "Mira Tal" in board.output

        stats = runner.invoke(app, ["stats", "-c", str(config_path)])
        assert stats.exit_code == 0
        assert "- Profiles: 1" in stats.output
