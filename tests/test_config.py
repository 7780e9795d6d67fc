"""Tests for settings."""

from faceoff_arena.config import Settings


def test_settings_defaults(monkeypatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "service-key")
    monkeypatch.setenv("ADMIN_TOKEN", "token")

    settings = Settings(_env_file=None)

    assert settings.candidate_pool_limit == 10
    assert settings.next_battle_delay_seconds == 1.0
    assert settings.leaderboard_limit == 20
    assert settings.session_idle_timeout_seconds == 1800.0


def test_debug_errors_only_locally(settings) -> None:
    assert settings.show_debug_errors is False
    assert settings.model_copy(update={"environment": "local"}).show_debug_errors
