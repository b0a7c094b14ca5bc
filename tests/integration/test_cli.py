import pytest
from typer.testing import CliRunner

from robo_avatar import cli
from tests.test_utils import PNG_SIGNATURE, built_in_generator

runner = CliRunner()


def test_inspect_prints_selectors_and_origins() -> None:
    result = runner.invoke(cli.app, ["inspect", "hello"])
    assert result.exit_code == 0, result.output
    assert "digest: 5d41402abc4b2a76b9719d911017c592" in result.output
    assert "selectors: 3 6 3 0 3 7 9 8" in result.output
    assert "origin=(900, 11400)" in result.output
    assert "origin=(900, 12600)" in result.output


def test_generate_writes_png(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setattr(cli, "default_generator", built_in_generator)
    out = tmp_path / "hello.png"
    result = runner.invoke(cli.app, ["generate", "hello", "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert "robo-hello" in result.output
    assert out.read_bytes() == built_in_generator().generate("hello")


def test_identicon_writes_png(tmp_path) -> None:
    out = tmp_path / "id.png"
    result = runner.invoke(cli.app, ["identicon", "/hello", "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert out.read_bytes().startswith(PNG_SIGNATURE)


def test_build_atlas(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    saved = []
    monkeypatch.setattr(cli, "save_atlas", saved.append)
    out = tmp_path / "robo.png"
    result = runner.invoke(cli.app, ["--log-level", "info", "build-atlas", str(out)])
    assert result.exit_code == 0, result.output
    assert saved == [str(out)]
