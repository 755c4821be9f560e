# tests/test_cli.py
"""
Command-line entry point: one-shot expressions, commands and the REPL.

Run: pytest -v
"""

from __future__ import annotations

import io
import sys
import threading

import pytest

from limbnum import config as CONFIG
from limbnum import runtime
from limbnum.cli import main
from limbnum.demo import encode_message, split_digits
from limbnum.fmt import strip_ansi
from limbnum.workspace import workspace_dir

# ---------- helpers -----------------------------------------------------------


def _run(capsys, *argv: str) -> tuple[int, str, str]:
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, strip_ansi(captured.out), strip_ansi(captured.err)


# ---------- expressions -------------------------------------------------------


def test_expression(capsys):
    code, out, _ = _run(capsys, "2**100")
    assert code == 0
    assert "2**100 =" in out
    assert str(2**100) in out
    assert "digits=31, limbs=4" in out


def test_expression_split_over_arguments(capsys):
    code, out, _ = _run(capsys, "--no-details", "6", "*", "7")
    assert code == 0
    assert out.strip() == "42"


def test_negative_result_is_a_user_error(capsys):
    code, _, err = _run(capsys, "2", "-", "3")
    assert code == 2
    assert "Invalid input:" in err
    assert "negative" in err


def test_unknown_name_is_a_user_error(capsys):
    code, _, err = _run(capsys, "foo + 1")
    assert code == 2
    assert "Invalid input:" in err


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert "limbnum" in capsys.readouterr().out


# ---------- profiles / output -------------------------------------------------


def test_profiles_command(capsys):
    code, out, _ = _run(capsys, "profiles")
    assert code == 0
    assert "default" in out
    assert "schoolbook" in out


def test_unknown_profile(capsys):
    code, _, err = _run(capsys, "--profile", "nope", "1")
    assert code == 2
    assert "Unknown profile" in err


def test_profile_changes_formatting(capsys):
    code, out, _ = _run(capsys, "--profile", "schoolbook", "--no-details", "10**100")
    assert code == 0
    assert out.strip() == "1" + "0" * 14 + "…" + "0" * 15


def test_where(capsys, isolated_workspace):
    code, out, _ = _run(capsys, "where")
    assert code == 0
    assert f"Workspace: {isolated_workspace.resolve()}" in out


def test_output_file(capsys):
    code, out, _ = _run(capsys, "--output", "results/run.txt", "--quiet", "5 + 5")
    assert code == 0
    assert out == ""
    text = (workspace_dir() / "results" / "run.txt").read_text(encoding="utf-8")
    assert "5 + 5 =" in text
    assert "\x1b[" not in text


def test_forbidden_output_file(capsys):
    code, _, err = _run(capsys, "--output", "notes.md", "1")
    assert code == 1
    assert "--output" in err


# ---------- encode ------------------------------------------------------------


def test_encode_with_flags(capsys):
    code, out, err = _run(capsys, "encode", "--prime", "1000003", "--generator", "2", "--key", "3",
                          "--seed", "1", "Hello", "world.")
    assert code == 0
    lines = out.strip().splitlines()
    assert len(lines) == len(split_digits(encode_message("Hello world."), 1000003))
    for line in lines:
        c1, c2 = line.split()
        assert 0 <= int(c1) < 1000003
        assert 0 <= int(c2) < 1000003
    assert "Warning" not in err


def test_encode_is_reproducible_with_seed(capsys):
    argv = ("encode", "--prime", "101", "--generator", "2", "--key", "3", "--seed", "5", "abc")
    _, first, _ = _run(capsys, *argv)
    _, second, _ = _run(capsys, *argv)
    assert first == second


def test_encode_from_stdin(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("100 2 37\nHi\n"))
    code, out, err = _run(capsys, "encode", "--seed", "3")
    assert code == 0
    assert out.strip()
    assert "not prime" in err


def test_encode_needs_all_flags(capsys):
    code, _, err = _run(capsys, "encode", "--prime", "101", "hi")
    assert code == 2
    assert "together" in err


# ---------- bench -------------------------------------------------------------


def test_bench(capsys):
    code, out, _ = _run(capsys, "bench", "--sizes", "1,4", "--repeat", "1", "--seed", "1")
    assert code == 0
    assert "schoolbook" in out
    assert "CROSSOVER_FACTOR" in out


@pytest.mark.parametrize("sizes", ["a,b", "0,4", ","])
def test_bench_bad_sizes(capsys, sizes):
    code, _, err = _run(capsys, "bench", "--sizes", sizes)
    assert code == 2
    assert "--sizes" in err


# ---------- REPL --------------------------------------------------------------


def test_repl_session(capsys, monkeypatch):
    answers = iter(["2 + 2", "hist", "debug status", "schoolbook", "bogus ((", "1 - 5", "q"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    code, out, err = _run(capsys)

    assert code == 0
    assert "2 + 2 =" in out
    assert "Debug is currently OFF." in out
    assert "Applied profile: schoolbook" in out
    assert "Invalid input: 'bogus (('" in out
    assert "negative" in err
    assert CONFIG.read_current_profile() == "schoolbook"


def test_repl_remembers_profile(capsys, monkeypatch):
    CONFIG.write_current_profile("schoolbook")
    monkeypatch.setattr("builtins.input", lambda prompt="": "q")
    code, _, _ = _run(capsys)
    assert code == 0
    assert runtime.current().profile_name == "schoolbook"


def test_debug_flag_lists_settings(capfd, monkeypatch):
    # --debug installs process-wide hooks; restore them afterwards
    monkeypatch.setattr("sys.excepthook", sys.excepthook)
    monkeypatch.setattr("threading.excepthook", threading.excepthook)
    code, _, err = _run(capfd, "--debug", "--no-details", "1")
    assert code == 0
    assert "[debug] active profile: default" in err
    assert "MULTIPLICATION.CROSSOVER_FACTOR" in err
