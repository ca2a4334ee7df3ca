from __future__ import annotations

import pytest

from pyrobovac.config import RobovacConfig
from pyrobovac.exceptions import RobovacConfigError


def test_defaults_use_mock_without_base_url() -> None:
    config = RobovacConfig()
    assert config.use_mock is True
    assert config.scan_timeout is None
    assert config.rect_tolerance == 1.0


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROBOVAC_BASE_URL", "https://example.test")
    monkeypatch.setenv("ROBOVAC_API_KEY", "anon")
    monkeypatch.setenv("ROBOVAC_USER_ID", "user-1")
    monkeypatch.setenv("ROBOVAC_SCAN_TIMEOUT", "15")
    monkeypatch.setenv("ROBOVAC_STALE_AFTER", "120")
    monkeypatch.setenv("ROBOVAC_MOCK_ENABLED", "no")

    config = RobovacConfig.from_env()

    assert config.base_url == "https://example.test"
    assert config.api_key == "anon"
    assert config.user_id == "user-1"
    assert config.scan_timeout == 15.0
    assert config.stale_after == 120.0
    assert config.use_mock is False


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROBOVAC_MOCK_ENABLED", "false")
    monkeypatch.setenv("ROBOVAC_MOCK_DELAY", "2.5")

    config = RobovacConfig.from_env(mock_enabled=True, mock_delay=0.0)

    assert config.mock_enabled is True
    assert config.mock_delay == 0.0


def test_invalid_number_raises_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROBOVAC_STALE_AFTER", "soon")
    with pytest.raises(RobovacConfigError):
        RobovacConfig.from_env()


def test_non_positive_tolerance_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROBOVAC_RECT_TOLERANCE", "0")
    with pytest.raises(RobovacConfigError):
        RobovacConfig.from_env()
