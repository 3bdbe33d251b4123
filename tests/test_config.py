# version 0.1
"""
Tests for command-line parsing into Config.
"""

import os
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Config, parse_args
from constants import DEFAULT_DETECTORS, LIBRARY_ENV, InputMode


def test_default_mode_is_mfa():
    cfg = parse_args([])
    assert cfg.mode is InputMode.MFA
    assert cfg.detectors == list(DEFAULT_DETECTORS)
    assert not cfg.custom_halo


@pytest.mark.parametrize("argv, mode", [
    (["--mG"], InputMode.MG),
    (["--mfa"], InputMode.MFA),
    (["--mG", "--mfa"], InputMode.MFA),
    (["--mfa", "--mG"], InputMode.MG),
])
def test_mode_flags(argv, mode):
    assert parse_args(argv).mode is mode


def test_unknown_arguments_warn(capsys):
    cfg = parse_args(["--bogus", "--mG", "stray"])
    err = capsys.readouterr().err
    assert cfg.mode is InputMode.MG
    assert "WARNING:  Ignoring unknown argument '--bogus'." in err
    assert "WARNING:  Ignoring unknown argument 'stray'." in err


def test_help_exits_zero(capsys):
    with pytest.raises(SystemExit) as exc:
        parse_args(["--help"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert out.startswith("Usage:")
    assert "[--mG|--mfa]" in out


def test_halo_options_fill_defaults():
    cfg = parse_args(["--rho=0.3", "--vesc", "600"])
    assert cfg.custom_halo
    assert cfg.halo_params() == (0.3, 235.0, 235.0, 600.0)


def test_detector_selection():
    cfg = parse_args(["--detectors=LUX_2013, DummyExp", "--emin=3"])
    assert cfg.detectors == ["LUX_2013", "DummyExp"]
    assert cfg.emin == 3.0


def test_library_from_environment(monkeypatch):
    monkeypatch.setenv(LIBRARY_ENV, "/opt/ddcalc/lib/libDDCalc.so")
    assert parse_args([]).library == Path("/opt/ddcalc/lib/libDDCalc.so")
    assert parse_args(["--ddcalc-lib", "other.so"]).library == Path("other.so")


@pytest.mark.parametrize("kwargs", [
    {"rho": -1.0},
    {"v0": 0.0},
    {"emin": -2.0},
    {"detectors": []},
    {"detectors": ["NOT_AN_EXPERIMENT"]},
])
def test_validate_rejects(kwargs):
    with pytest.raises(ValueError):
        Config(**kwargs).validate()


@pytest.mark.parametrize("token", ["--mG=yes", "--mfa=1", "--help=x"])
def test_switch_with_value_warns(token, capsys):
    cfg = parse_args([token])
    assert cfg.mode is InputMode.MFA
    assert f"WARNING:  Ignoring unknown argument '{token}'." in capsys.readouterr().err


def test_switch_with_value_keeps_other_flags(capsys):
    cfg = parse_args(["--mG=yes", "--mG"])
    assert cfg.mode is InputMode.MG
    assert "'--mG=yes'" in capsys.readouterr().err
