"""Ayar yükleyici unit testleri."""

import logging

import pytest

from data_layer.settings import (
    Settings,
    load_planning_thresholds,
    load_settings,
    thresholds_from_mapping,
)
from inventory_engine.models.inventory import DEFAULT_PLANNING_THRESHOLDS


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "AWS_DEFAULT_REGION",
        "INVENTORY_TABLE_PREFIX",
        "INVENTORY_CACHE_TTL_SECONDS",
        "PLANNING_THRESHOLDS_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestLoadSettings:
    """.env tabanlı ayar yükleme testleri."""

    def test_reads_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "AWS_DEFAULT_REGION=eu-west-1\n"
            "INVENTORY_TABLE_PREFIX=dev-\n"
            "INVENTORY_CACHE_TTL_SECONDS=30\n",
            encoding="utf-8",
        )
        settings = load_settings(env_file)
        assert settings.region_name == "eu-west-1"
        assert settings.table_name("Skus") == "dev-Skus"
        assert settings.cache_ttl_seconds == 30.0

    def test_environment_wins_over_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("AWS_DEFAULT_REGION=eu-west-1\n", encoding="utf-8")
        clean_env.setenv("AWS_DEFAULT_REGION", "us-west-2")
        assert load_settings(env_file).region_name == "us-west-2"

    def test_defaults(self, clean_env, tmp_path):
        settings = load_settings(tmp_path / "missing.env")
        assert settings == Settings()

    def test_invalid_ttl(self, clean_env, tmp_path):
        clean_env.setenv("INVENTORY_CACHE_TTL_SECONDS", "soon")
        with pytest.raises(ValueError):
            load_settings(tmp_path / "missing.env")


class TestThresholdFile:
    """YAML eşik dosyası testleri."""

    def test_no_path_returns_defaults(self):
        assert load_planning_thresholds(None) is DEFAULT_PLANNING_THRESHOLDS

    def test_missing_file_returns_defaults(self, tmp_path):
        assert load_planning_thresholds(str(tmp_path / "nope.yaml")) is DEFAULT_PLANNING_THRESHOLDS

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "thresholds.yaml"
        path.write_text(
            "planning_thresholds:\n  slow_moving_days: 60\n  non_moving_days: 120\n",
            encoding="utf-8",
        )
        thresholds = load_planning_thresholds(str(path))
        assert thresholds.slow_moving_days == 60
        assert thresholds.non_moving_days == 120
        assert thresholds.slow_moving_min_qty == 5

    def test_invalid_yaml_thresholds_fall_back(self, tmp_path, caplog):
        path = tmp_path / "thresholds.yaml"
        path.write_text("slowMovingDays: 200\nnonMovingDays: 100\n", encoding="utf-8")
        with caplog.at_level(logging.WARNING):
            thresholds = load_planning_thresholds(str(path))
        assert thresholds is DEFAULT_PLANNING_THRESHOLDS
        assert "non_moving_days (100)" in caplog.text

    def test_wrong_types_fall_back(self, caplog):
        with caplog.at_level(logging.WARNING):
            thresholds = thresholds_from_mapping({"slow_moving_days": "ninety"})
        assert thresholds is DEFAULT_PLANNING_THRESHOLDS
        assert "slow_moving_days must be a number" in caplog.text
