from typer.testing import CliRunner

from portfolio_site.cli import app
from tests.conftest import write_json

runner = CliRunner()


def _site(tmp_path):
    root = tmp_path / "site"
    write_json(root / "data" / "blog.json", [{"title": "Hello", "date": "2024-01-01"}])
    write_json(root / "data" / "projects.json", [])
    write_json(root / "data" / "research.json", [])
    return root


def test_build_command(tmp_path):
    out = tmp_path / "out"

    result = runner.invoke(
        app, ["build", "--source", str(_site(tmp_path)), "--output", str(out), "--no-log-file"]
    )

    assert result.exit_code == 0, result.output
    assert "Built" in result.output
    assert (out / "blog" / "hello.html").exists()
    assert (out / "blog" / "rss.xml").exists()


def test_build_reads_source_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("PORTFOLIO_SOURCE", str(_site(tmp_path)))
    out = tmp_path / "out"

    result = runner.invoke(app, ["build", "--output", str(out)])

    assert result.exit_code == 0, result.output
    assert (out / "projects" / "index.html").exists()


def test_rss_command(tmp_path):
    target = tmp_path / "feed.xml"

    result = runner.invoke(app, ["rss", "--source", str(_site(tmp_path)), "--output", str(target)])

    assert result.exit_code == 0, result.output
    assert "<title>Hello</title>" in target.read_text(encoding="utf-8")


def test_rss_fails_when_manifest_is_missing(tmp_path):
    result = runner.invoke(
        app, ["rss", "--source", str(tmp_path / "missing"), "--output", str(tmp_path / "feed.xml")]
    )

    assert result.exit_code == 1
    assert not (tmp_path / "feed.xml").exists()


def test_invalid_config_exits_with_usage_error(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("site:\n  colour: blue\n", encoding="utf-8")

    result = runner.invoke(app, ["build", "--config", str(config), "--output", str(tmp_path / "out")])

    assert result.exit_code == 2
    assert "Invalid configuration" in result.output


def test_rss_with_removed_feed_collection_exits_with_usage_error(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("collections:\n  blog: null\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["rss", "--source", str(_site(tmp_path)), "--config", str(config), "--output", str(tmp_path / "feed.xml")],
    )

    assert result.exit_code == 2
    assert "Invalid configuration" in result.output


def test_rss_with_disabled_feed_exits_with_usage_error(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("feed:\n  collection: null\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["rss", "--source", str(_site(tmp_path)), "--config", str(config), "--output", str(tmp_path / "feed.xml")],
    )

    assert result.exit_code == 2
    assert not (tmp_path / "feed.xml").exists()
