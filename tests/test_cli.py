from __future__ import annotations

import io
from typing import TYPE_CHECKING

from html_squeeze.cli import main

if TYPE_CHECKING:
	from pathlib import Path

	import pytest


def test_files_with_options(tmp_path: Path) -> None:
	source = tmp_path / "in.html"
	target = tmp_path / "out.html"
	source.write_text('<p title="blah" id="moo">foo</p><!-- c -->', encoding="utf-8")

	assert main([str(source), str(target), "--remove-attribute-quotes"]) == 0
	assert target.read_text(encoding="utf-8") == "<p title=blah id=moo>foo</p><!-- c -->"


def test_default_profile_without_options(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	source = tmp_path / "in.html"
	source.write_text("<!DOCTYPE html>\n<p>  a  </p><!-- c -->", encoding="utf-8")

	assert main([str(source)]) == 0
	assert capsys.readouterr().out == "<!doctype html><p>a</p>"


def test_default_profile_with_extra_options(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	source = tmp_path / "in.html"
	source.write_text('<p id="x">  a  </p>', encoding="utf-8")

	assert main([str(source), "-d", "--remove-attribute-quotes"]) == 0
	assert capsys.readouterr().out == "<p id=x>a</p>"


def test_stdin_to_stdout(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
	monkeypatch.setattr("sys.stdin", io.StringIO("<p>foo</p><!-- c --><div>bar</div>"))

	assert main(["--remove-comments"]) == 0
	assert capsys.readouterr().out == "<p>foo</p><div>bar</div>"


def test_encoding(tmp_path: Path) -> None:
	source = tmp_path / "in.html"
	target = tmp_path / "out.html"
	source.write_text("<p>  café  </p>", encoding="latin-1")

	assert main([str(source), str(target), "--collapse-whitespace", "-e", "latin-1"]) == 0
	assert target.read_text(encoding="latin-1") == "<p>café</p>"


def test_empty_input(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	source = tmp_path / "empty.html"
	source.write_text("", encoding="utf-8")

	assert main([str(source)]) == 1
	captured = capsys.readouterr()
	assert captured.out == ""
	assert "html-squeeze:" in captured.err
