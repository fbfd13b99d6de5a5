import pytest

from dispatch_dashboard.config import Settings


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.setenv("DISPATCH_API_BASE_URL", "http://dispatch.local:9000/")
    monkeypatch.setenv("DISPATCH_GRID_WIDTH", "32")
    monkeypatch.setenv("DISPATCH_POLL_INTERVAL_MS", "250")
    monkeypatch.setenv("DISPATCH_LOG_LEVEL", "debug")
    monkeypatch.setenv("DISPATCH_OUTPUT_ROOT", str(tmp_path))

    loaded = Settings(_env_file=None)

    assert loaded.api_base_url == "http://dispatch.local:9000"
    assert loaded.grid_width == 32
    assert loaded.poll_interval_ms == 250
    assert loaded.log_level == "DEBUG"
    assert loaded.output_root == tmp_path.resolve()
    assert loaded.request_timeout_seconds is None


def test_defaults_match_reference_dashboard(monkeypatch: pytest.MonkeyPatch):
    for name in ("DISPATCH_API_BASE_URL", "DISPATCH_POLL_INTERVAL_MS", "DISPATCH_ALLOW_OVERLAPPING_TICKS"):
        monkeypatch.delenv(name, raising=False)

    loaded = Settings(_env_file=None)

    assert loaded.api_base_url == "http://localhost:8080"
    assert loaded.poll_interval_ms == 500
    assert loaded.allow_overlapping_ticks is False
