# tests/test_output.py
"""
Result formatting, output files and small utilities.

Run: pytest -v
"""

from __future__ import annotations

import os

import pytest

from limbnum.fmt import abbr_digits, format_value, render_result, strip_ansi
from limbnum.output_manager import OutputManager, resolve_output_path
from limbnum.runtime import APPLY
from limbnum.uint import UInt
from limbnum.utility import dec_digits, validate_output_setting

# ---------- formatting --------------------------------------------------------


def test_abbr_digits():
    assert abbr_digits("1234567890", head=2, tail=2, threshold=5, ellipsis="...") == "12...90"
    assert abbr_digits("12345", head=2, tail=2, threshold=5) == "12345"
    assert abbr_digits("1234567890", head=2, tail=2, threshold=0) == "1234567890"
    assert abbr_digits("123456", head=3, tail=3, threshold=1) == "123456"


def test_format_value_uses_settings():
    value = UInt(10**50)
    assert format_value(value) == str(10**50)
    APPLY({"FORMATTING": {"ELLIPSIS": "~", "NUM_ABBR_HEAD": 3, "NUM_ABBR_TAIL": 2, "NUM_ABBR_THRESHOLD": 10}})
    assert format_value(value) == "100~00"
    assert format_value(value, abbreviate=False) == str(10**50)


def test_render_result():
    lines = [strip_ansi(s) for s in render_result("2**64", UInt(2**64))]
    assert lines == ["2**64 =", "18446744073709551616", "  digits=20, limbs=3"]
    assert [strip_ansi(s) for s in render_result("x", UInt(5), show_details=False)] == ["5"]


@pytest.mark.parametrize("n", [0, 9, 10, 999_999_999, 10**9, 10**45, 10**45 - 1])
def test_dec_digits(n):
    assert dec_digits(UInt(n)) == len(str(n))
    assert dec_digits(n) == len(str(n))


# ---------- output manager ----------------------------------------------------


def test_resolve_output_path(tmp_path):
    root = str(tmp_path)
    assert resolve_output_path("a/b.txt", root) == os.path.join(root, "a", "b.txt")
    assert resolve_output_path(str(tmp_path / "abs.txt"), "/elsewhere") == str(tmp_path / "abs.txt")
    with pytest.raises(ValueError):
        resolve_output_path("", root)


def test_output_manager_appends_without_ansi(tmp_path, capsys):
    target = tmp_path / "log.txt"
    for run in ("one", "two"):
        om = OutputManager(output_file=str(target))
        om.write("\x1b[33m" + run + "\x1b[0m")
        assert run in om.getvalue()
        om.close()
        assert om.getvalue() == ""
    assert target.read_text(encoding="utf-8") == "one\n\ntwo\n\n"
    assert "one" in capsys.readouterr().out


def test_output_manager_quiet(capsys):
    om = OutputManager(quiet=True)
    om.write("hidden", 1)
    assert om.getvalue() == "hidden 1\n"
    assert om.path is None
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize("name", ["out/", "LICENSE", "con.txt", "x.py", "x.TOML", "notes.md"])
def test_validate_output_setting_rejects(name):
    with pytest.raises(ValueError):
        validate_output_setting(name)


@pytest.mark.parametrize("name", [None, "", "results.txt", "runs/all.log"])
def test_validate_output_setting_accepts(name):
    assert validate_output_setting(name) == name
