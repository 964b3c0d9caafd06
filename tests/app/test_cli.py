from __future__ import annotations

from uuid import uuid4

import pytest

from guildsync.domain.model import Guild, Region
from guildsync.domain.reconciliation import SyncCycleResult
from guildsync.ui import cli as cli_module


def test_sync_command_runs_one_cycle(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[object] = []

    def fake_run_sync(**kwargs: object) -> SyncCycleResult:
        calls.append(kwargs)
        return SyncCycleResult()

    monkeypatch.setattr(cli_module, "run_sync", fake_run_sync)

    cli_module.main(["sync"])

    assert calls == [{}]


def test_guild_add_registers_and_prints(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}

    def fake_register(**kwargs: object) -> Guild:
        captured.update(kwargs)
        return Guild(id=uuid4(), name="Raiders", realm="area-52", region=Region.EU)

    monkeypatch.setattr(cli_module, "register_guild", fake_register)

    cli_module.main(["guild", "add", "Raiders", "--realm", "Area 52", "--region", "eu"])

    assert captured == {"name": "Raiders", "realm": "Area 52", "region": Region.EU}
    assert "Raiders\tarea-52\teu" in capsys.readouterr().out


def test_list_stale_prints_never_for_unsynced(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def fake_list(**kwargs: object) -> list[Guild]:
        assert kwargs == {"limit": 5}
        return [Guild(name="Raiders", realm="area-52", region=Region.US)]

    monkeypatch.setattr(cli_module, "list_stale_guilds", fake_list)

    cli_module.main(["guild", "list-stale", "--limit", "5"])

    assert capsys.readouterr().out.rstrip().endswith("never")


def test_watch_rejects_non_positive_interval(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail_watch(_interval: float) -> None:
        raise AssertionError("watch must not start")

    monkeypatch.setattr(cli_module, "_watch", fail_watch)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["watch", "--interval-minutes", "0"])

    assert excinfo.value.code == 2


def test_watch_uses_interval_in_seconds(monkeypatch: pytest.MonkeyPatch) -> None:
    intervals: list[float] = []
    monkeypatch.setattr(cli_module, "_watch", intervals.append)

    cli_module.main(["watch", "--interval-minutes", "1.5"])

    assert intervals == [90.0]


def test_bad_interval_env_is_a_usage_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GUILDSYNC_SYNC_INTERVAL_MINUTES", "soon")
    monkeypatch.setattr(cli_module, "_watch", lambda _interval: None)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["watch"])

    assert excinfo.value.code == 2


def test_runtime_failure_exits_with_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(**_: object) -> SyncCycleResult:
        raise RuntimeError("database unreachable")

    monkeypatch.setattr(cli_module, "run_sync", broken)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["sync"])

    assert excinfo.value.code == 1


def test_unknown_region_is_rejected_by_parser() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["guild", "add", "Raiders", "--realm", "area-52", "--region", "cn"])

    assert excinfo.value.code == 2
