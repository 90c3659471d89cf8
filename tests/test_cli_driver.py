"""Tests for the command-line driver."""

from pathlib import Path

import pytest

import cli_driver
import core


@pytest.fixture
def case_files(tmp_path: Path, board_text: str) -> tuple:
    input_path = tmp_path / "in.txt"
    output_path = tmp_path / "out.txt"
    input_path.write_text(board_text, encoding="utf-8")
    output_path.write_text("1\n0 1 2\n", encoding="utf-8")
    return str(input_path), str(output_path)


class TestGen:
    def test_prints_board(self, capsys: pytest.CaptureFixture) -> None:
        assert cli_driver.main(["gen", "3"]) == 0
        assert core.parse_board(capsys.readouterr().out) == core.generate(3)

    def test_writes_files(self, tmp_path: Path) -> None:
        assert cli_driver.main(["gen", "3", "12", "-o", str(tmp_path / "cases")]) == 0
        text = (tmp_path / "cases" / "0012.txt").read_text(encoding="utf-8")
        assert core.parse_board(text) == core.generate(12)
        assert (tmp_path / "cases" / "0003.txt").exists()


class TestScore:
    def test_valid(self, case_files: tuple, capsys: pytest.CaptureFixture) -> None:
        assert cli_driver.main(["score", *case_files]) == 0
        assert capsys.readouterr().out.strip() == "Score = 2"

    def test_error(self, case_files: tuple, capsys: pytest.CaptureFixture) -> None:
        Path(case_files[1]).write_text("1\n3 3 2\n", encoding="utf-8")
        assert cli_driver.main(["score", *case_files]) == 1
        captured = capsys.readouterr()
        assert captured.out.strip() == "Score = 0"
        assert captured.err.strip() == "Out of range"

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        assert cli_driver.main(["score", str(tmp_path / "nope.txt"), str(tmp_path / "nope.txt")]) == 2
        assert "File error" in capsys.readouterr().err


class TestVis:
    def test_writes_svg(self, case_files: tuple, tmp_path: Path) -> None:
        svg_path = tmp_path / "vis" / "turn.svg"
        assert cli_driver.main(["vis", *case_files, "--turn", "0", "-o", str(svg_path)]) == 0
        assert svg_path.read_text(encoding="utf-8").startswith("<svg")

    def test_malformed_board(self, case_files: tuple, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        Path(case_files[0]).write_text("4\n0 1", encoding="utf-8")
        assert cli_driver.main(["vis", *case_files, "-o", str(tmp_path / "x.svg")]) == 2
        assert "Unexpected EOF" in capsys.readouterr().err


class TestPlay:
    def test_session(self, case_files: tuple, monkeypatch: pytest.MonkeyPatch,
                     capsys: pytest.CaptureFixture) -> None:
        moves = iter(["0 1 2", "3 3 2", "a b", "q"])
        monkeypatch.setattr("builtins.input", lambda _prompt: next(moves))
        assert cli_driver.main(["play", case_files[0]]) == 0
        out = capsys.readouterr().out
        assert "Turn: 1  Score: 2" in out
        assert "Out of range" in out
        assert "Invalid input" in out
        assert out.rstrip().endswith("1\n0 1 2")


class TestArguments:
    def test_unknown_command(self, capsys: pytest.CaptureFixture) -> None:
        with pytest.raises(SystemExit) as info:
            cli_driver.main(["solve"])
        assert info.value.code == 2
        assert "invalid choice" in capsys.readouterr().err

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit) as info:
            cli_driver.main([])
        assert info.value.code == 2
