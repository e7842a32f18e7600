from __future__ import annotations

import uvicorn

from influencer_admin.__main__ import main
from influencer_admin.config import settings


def _capture_run(monkeypatch) -> list[tuple[tuple, dict]]:
    calls: list[tuple[tuple, dict]] = []
    monkeypatch.setattr(uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))
    return calls


def test_main_serves_admin_app(monkeypatch):
    calls = _capture_run(monkeypatch)
    monkeypatch.setattr(settings, "LOG_LEVEL", "WARNING")

    main(["--port", "9000", "--workers", "3"])

    assert calls == [
        (
            ("influencer_admin.main:app",),
            {"host": "0.0.0.0", "port": 9000, "reload": False, "workers": 3, "log_level": "warning"},
        )
    ]


def test_reload_runs_single_worker(monkeypatch):
    calls = _capture_run(monkeypatch)

    main(["--reload", "--workers", "4", "--host", "127.0.0.1"])

    (_, kwargs), = calls
    assert kwargs["reload"] is True
    assert kwargs["workers"] == 1
    assert kwargs["host"] == "127.0.0.1"
