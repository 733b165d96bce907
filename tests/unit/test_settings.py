"""Unit tests for application settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from baby_affinity.settings.app import AppSettings, get_settings


class TestAppSettings:
    """Tests for AppSettings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Defaults match the rating model's constants."""
        monkeypatch.chdir(tmp_path)
        settings = AppSettings()

        assert settings.db_path == Path("data/baby_affinity.sqlite")
        assert settings.k_factor == 50
        assert settings.max_selections == 5
        assert settings.round_size == 10
        assert settings.log_level == "INFO"
        assert settings.log_json is True
        assert settings.is_premium is False

    def test_environment_overrides(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """Prefixed environment variables override defaults."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("BABY_AFFINITY_K_FACTOR", "32")
        monkeypatch.setenv("BABY_AFFINITY_DB_PATH", str(tmp_path / "names.sqlite"))
        monkeypatch.setenv("BABY_AFFINITY_LOG_JSON", "false")

        settings = get_settings()

        assert settings.k_factor == 32
        assert settings.db_path == tmp_path / "names.sqlite"
        assert settings.log_json is False

    def test_dotenv_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Settings are read from a .env file in the working directory."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("BABY_AFFINITY_MAX_SELECTIONS=3\n", encoding="utf-8")

        assert AppSettings().max_selections == 3

    @pytest.mark.parametrize(
        ("field", "value"),
        [("k_factor", 0), ("max_selections", 0), ("round_size", 0)],
    )
    def test_rejects_non_positive(self, field: str, value: int) -> None:
        """Numeric limits must be positive."""
        with pytest.raises(ValidationError):
            AppSettings(**{field: value})
