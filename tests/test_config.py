"""Tests für das Konfigurationssystem (Pydantic-Schema + YAML-Manager)."""

from pathlib import Path

import pytest

from config.manager import ConfigManager
from config.schema import AppConfig, LoggingConfig, ShareConfig
from models.document import TemplateKind


# ─── SCHEMA ───────────────────────────────────────────────────────────────────

class TestSchema:
    def test_defaults(self):
        config = AppConfig()
        assert config.share.base_url.startswith("https://")
        assert config.share.fallback_template == TemplateKind.JUNIOR_HIGH
        assert config.logging.level == "WARNING"

    def test_base_url_must_be_http(self):
        with pytest.raises(ValueError):
            ShareConfig(base_url="ftp://example.com/tt")

    def test_fallback_template_validated(self):
        assert ShareConfig(fallback_template="university").fallback_template == TemplateKind.UNIVERSITY
        with pytest.raises(ValueError):
            ShareConfig(fallback_template="kindergarten")

    def test_log_level_normalized(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValueError):
            LoggingConfig(level="LOUD")


# ─── MANAGER ──────────────────────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path):
        mgr = ConfigManager()
        path = tmp_path / "app_config.yaml"
        config = AppConfig(
            share=ShareConfig(base_url="https://schule.example.jp/plan",
                              fallback_template="elementary"),
            logging=LoggingConfig(level="info"),
        )
        mgr.save(config, path)
        assert mgr.load(path) == config

    def test_saved_file_has_comments(self, tmp_path):
        path = tmp_path / "app_config.yaml"
        ConfigManager().save(AppConfig(), path)
        text = path.read_text(encoding="utf-8")
        assert text.startswith("# ====")
        assert "─── Teilen ───" in text
        assert "base_url:" in text

    def test_save_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "a" / "b" / "app_config.yaml"
        ConfigManager().save(AppConfig(), path)
        assert path.exists()

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigManager().load(tmp_path / "fehlt.yaml")

    def test_load_or_default_missing_file(self, tmp_path):
        assert ConfigManager().load_or_default(tmp_path / "fehlt.yaml") == AppConfig()

    def test_load_invalid_file(self, tmp_path):
        path = tmp_path / "app_config.yaml"
        path.write_text("logging:\n  level: LOUD\n", encoding="utf-8")
        with pytest.raises(ValueError, match="ungültig"):
            ConfigManager().load(path)

    def test_partial_file_uses_defaults(self, tmp_path):
        path = tmp_path / "app_config.yaml"
        path.write_text("share:\n  fallback_template: custom\n", encoding="utf-8")
        config = ConfigManager().load(path)
        assert config.share.fallback_template == TemplateKind.CUSTOM
        assert config.logging.level == "WARNING"

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "app_config.yaml"
        path.write_text("", encoding="utf-8")
        assert ConfigManager().load(path) == AppConfig()

    def test_first_run_check(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        mgr = ConfigManager()
        assert mgr.first_run_check()
        mgr.save(AppConfig())
        assert not mgr.first_run_check()
        assert Path("config/app_config.yaml").exists()
