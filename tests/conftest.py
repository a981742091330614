from __future__ import annotations

from collections.abc import Callable, Generator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from backend.app.core import config
from backend.app.schemas.flow import Flow
from backend.app.stats import StatsEngine

FIXED_NOW = datetime(2024, 1, 10, 12, 0, tzinfo=UTC)


@pytest.fixture()
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def engine(fixed_now: datetime) -> StatsEngine:
    return StatsEngine(clock=lambda: fixed_now)


@pytest.fixture()
def make_flow() -> Callable[..., Flow]:
    """Build a validated flow from camelCase keyword overrides."""

    def _make(status: dict[str, dict[str, Any]] | None = None, **overrides: Any) -> Flow:
        payload: dict[str, Any] = {
            "id": overrides.pop("id", 1),
            "title": overrides.pop("title", "Read"),
            "everyDay": overrides.pop("everyDay", True),
            "status": status or {},
        }
        payload.update(overrides)
        return Flow.model_validate(payload)

    return _make


@pytest.fixture()
def test_client(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    fixed_now: datetime,
) -> Generator[TestClient, None, None]:
    monkeypatch.setenv("VERSION", "0.1.0-test")
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "flowstats.log"))
    monkeypatch.delenv("STATS_DEFAULT_TIMEFRAME", raising=False)
    monkeypatch.delenv("STATS_MAX_FLOWS", raising=False)
    config.get_settings.cache_clear()

    from backend.app.main import app

    with TestClient(app) as client:
        app.state.stats_engine = StatsEngine(clock=lambda: fixed_now)
        yield client
    config.get_settings.cache_clear()
