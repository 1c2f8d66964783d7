from click.testing import CliRunner

from outline import __version__
from outline.cli import cli


def write_site(root):
    (root / "index.md").write_text("---\ntitle: Home\n---\n# Hello\n", encoding="utf-8")
    (root / "notes.txt").write_text("skip", encoding="utf-8")


def test_cli_build(monkeypatch, tmp_path):
    write_site(tmp_path)
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    result = runner.invoke(cli, ["build"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "Built 1 pages" in result.output
    html = (tmp_path / "index.html").read_text(encoding="utf-8")
    assert "<title>Home</title>" in html


def test_cli_build_reports_failure(monkeypatch, tmp_path):
    (tmp_path / "bad.md").write_text("---\nlayout: missing\n---\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli, ["build"])

    assert result.exit_code == 1
    assert "Build failed" in result.output
    assert "bad.md" in result.output


def test_cli_build_keep_going(monkeypatch, tmp_path):
    write_site(tmp_path)
    (tmp_path / "bad.md").write_text("---\nlayout: missing\n---\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli, ["build", "--keep-going"])

    assert result.exit_code == 1
    assert "Built 1 pages, 1 failed" in result.output
    assert (tmp_path / "index.html").exists()


def test_cli_build_strict_frontmatter(monkeypatch, tmp_path):
    (tmp_path / "bad.md").write_text("---\ntitle: [oops\n---\nbody\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    assert runner.invoke(cli, ["build"]).exit_code == 0
    result = runner.invoke(cli, ["build", "--strict-frontmatter"])
    assert result.exit_code == 1
    assert "Build failed" in result.output


def test_cli_clean(monkeypatch, tmp_path):
    (tmp_path / "a.html").write_text("a", encoding="utf-8")
    (tmp_path / "b.md").write_text("b", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli, ["clean"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "Removed 1 files" in result.output
    assert not (tmp_path / "a.html").exists()
    assert (tmp_path / "b.md").exists()


def test_cli_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
