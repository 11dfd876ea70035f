import subprocess
from pathlib import Path

import pytest

from cargo_downgrade import applier
from cargo_downgrade.applier import apply_target, apply_targets, format_pin
from cargo_downgrade.errors import ApplyError
from cargo_downgrade.models import DowngradeTarget


def test_format_pin():
    assert format_pin(DowngradeTarget("rand", "0.8.3")) == 'rand = "=0.8.3"'


def test_apply_target_runs_cargo_update(monkeypatch, capsys):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="    Updating rand v0.8.5 -> v0.8.3\n")

    monkeypatch.setattr(applier.subprocess, "run", fake_run)

    apply_target(DowngradeTarget("rand", "0.8.3"), manifest_path=Path("app/Cargo.toml"))

    assert calls == [[
        "cargo", "update", "-p", "rand", "--precise", "0.8.3",
        "--manifest-path", str(Path("app/Cargo.toml")),
    ]]
    assert "Updating rand" in capsys.readouterr().err


def test_apply_target_failure(monkeypatch):
    def fake_run(cmd, **kwargs):
        return subprocess.CompletedProcess(cmd, 101, stdout="", stderr="error: failed to select a version\n")

    monkeypatch.setattr(applier.subprocess, "run", fake_run)

    with pytest.raises(ApplyError, match="status 101"):
        apply_target(DowngradeTarget("rand", "0.1.0"))


def test_apply_target_without_cargo(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError("cargo")

    monkeypatch.setattr(applier.subprocess, "run", fake_run)

    with pytest.raises(ApplyError):
        apply_target(DowngradeTarget("rand", "0.1.0"))


def test_apply_targets_continues_after_failure():
    applied = []

    def fake_apply(target):
        if target.name == "bad":
            raise ApplyError(target.name, target.version, "cargo exited with status 101")
        applied.append(target.name)

    targets = [DowngradeTarget("a", "1.0.0"), DowngradeTarget("bad", "0.1.0"), DowngradeTarget("b", "2.0.0")]

    failures = apply_targets(targets, fake_apply)

    assert applied == ["a", "b"]
    assert list(failures) == ["bad"]
