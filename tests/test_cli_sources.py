"""Tests for the sources CLI commands."""

import pytest
from typer.testing import CliRunner

from antnews.cli.app import app
from antnews.cli.init import create_default_sources
from antnews.config import load_sources, save_sources

runner = CliRunner()


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("ANTNEWS_CONFIG", str(tmp_path / "config.yaml"))
    save_sources(create_default_sources(), tmp_path / "sources.yaml")
    return tmp_path


def test_default_sources():
    sources = create_default_sources()
    decoded = [s for s in sources if s.config.needs_decoding]

    assert sorted(s.language for s in decoded) == ["de", "en", "es", "fr"]
    assert all(s.config.feed_url for s in sources)
    assert len({s.name for s in sources}) == len(sources)


def test_list(config_dir):
    result = runner.invoke(app, ["sources", "list"])

    assert result.exit_code == 0
    assert "Configured Sources" in result.output


def test_add_and_remove(config_dir):
    result = runner.invoke(
        app,
        ["sources", "add", "--name", "Ant Wiki", "--feed-url", "https://antwiki.test/feed", "--language", "en"],
    )
    assert result.exit_code == 0
    added = [s for s in load_sources(config_dir / "sources.yaml") if s.name == "Ant Wiki"]
    assert added[0].config.feed_url == "https://antwiki.test/feed"

    duplicate = runner.invoke(
        app, ["sources", "add", "--name", "Ant Wiki", "--feed-url", "https://other.test/feed"]
    )
    assert duplicate.exit_code == 1

    removed = runner.invoke(app, ["sources", "remove", "Ant Wiki"])
    assert removed.exit_code == 0
    assert "Ant Wiki" not in {s.name for s in load_sources(config_dir / "sources.yaml")}


def test_remove_unknown_source(config_dir):
    result = runner.invoke(app, ["sources", "remove", "Nope"])
    assert result.exit_code == 1
