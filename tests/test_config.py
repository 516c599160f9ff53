"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from docoutline.config import Settings, load_settings


def test_settings_defaults() -> None:
    """It should default to markdown handling and a short analyzer budget."""

    settings = Settings()

    assert settings.analyzer_ready_budget_s == pytest.approx(0.35)
    assert settings.markdown_type_tags == ["markdown", "emd"]
    assert settings.suffix_type_tags[".md"] == "markdown"


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """It should read DOCOUTLINE_ prefixed variables."""

    monkeypatch.setenv("DOCOUTLINE_ANALYZER_READY_BUDGET_S", "1.5")
    monkeypatch.setenv("DOCOUTLINE_FALLBACK_SKIP_CODE_FENCES", "false")

    settings = Settings()

    assert settings.analyzer_ready_budget_s == pytest.approx(1.5)
    assert settings.fallback_skip_code_fences is False


def test_load_settings_env_file_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """It should load the env file named by DOCOUTLINE_ENV_FILE."""

    env_file = tmp_path / "custom.env"
    env_file.write_text("DOCOUTLINE_LOG_LEVEL=DEBUG\n", encoding="utf-8")
    monkeypatch.setenv("DOCOUTLINE_ENV_FILE", str(env_file))

    assert load_settings().log_level == "DEBUG"
