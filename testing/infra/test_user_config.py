"""测试配置系统。"""

import pytest
from pydantic import ValidationError

from autohunt.infra.config import (
    CharacterConfig,
    CombatConfig,
    ConfigManager,
    DeviceConfig,
    LogConfig,
    UserConfig,
)
from autohunt.types import CharacterClass


# ── DeviceConfig ──


class TestDeviceConfig:
    def test_uri_from_window_title(self):
        cfg = DeviceConfig(window_title="Diablo II: Resurrected")
        assert cfg.resolved_uri == "Windows:///?title_re=Diablo II: Resurrected.*"

    def test_explicit_uri_wins(self):
        cfg = DeviceConfig(uri="Windows:///123456")
        assert cfg.resolved_uri == "Windows:///123456"

    def test_frozen(self):
        cfg = DeviceConfig()
        with pytest.raises(ValidationError):
            cfg.screen_width = 1920  # type: ignore[misc]


# ── LogConfig ──


class TestLogConfig:
    def test_dir_auto_generated(self):
        cfg = LogConfig()
        assert cfg.dir is not None
        assert str(cfg.root) in str(cfg.dir)


# ── CombatConfig ──


class TestCombatConfig:
    def test_defaults(self):
        cfg = CombatConfig()
        assert cfg.max_attack_loops == 40
        assert (cfg.min_distance, cfg.max_distance) == (25, 30)
        assert (cfg.close_min_distance, cfg.close_max_distance) == (1, 5)
        assert cfg.reduce_distance_after == 12
        assert cfg.blizzard_cooldown == 4.0
        assert cfg.nearby_radius == 4.0
        assert cfg.boss_timeout == 20.0

    def test_invalid_band(self):
        with pytest.raises(ValidationError, match="max_distance"):
            CombatConfig(min_distance=31, max_distance=30)

    def test_invalid_close_band(self):
        with pytest.raises(ValidationError):
            CombatConfig(close_min_distance=6, close_max_distance=5)

    def test_non_positive_cap(self):
        with pytest.raises(ValidationError):
            CombatConfig(max_attack_loops=0)


# ── CharacterConfig ──


class TestCharacterConfig:
    def test_from_value(self):
        cfg = CharacterConfig.model_validate({"class_name": "sorceress"})
        assert cfg.class_name == CharacterClass.blizzard_sorceress

    def test_unknown_class(self):
        with pytest.raises(ValidationError):
            CharacterConfig.model_validate({"class_name": "paladin"})


# ── UserConfig / ConfigManager ──


class TestUserConfig:
    def test_from_yaml(self, tmp_yaml):
        content = """\
device:
  window_title: "D2R"
  screen_width: 1920
  screen_height: 1080
combat:
  max_attack_loops: 30
  boss_timeout: 25
log:
  level: "INFO"
"""
        path = tmp_yaml("config.yaml", content)
        cfg = UserConfig.from_yaml(path)
        assert cfg.device.screen_width == 1920
        assert cfg.combat.max_attack_loops == 30
        assert cfg.combat.boss_timeout == 25.0
        assert cfg.combat.min_distance == 25
        assert cfg.log.level == "INFO"

    def test_from_yaml_invalid(self, tmp_yaml):
        path = tmp_yaml("bad.yaml", "combat:\n  min_distance: 40\n")
        with pytest.raises(ValidationError):
            UserConfig.from_yaml(path)


class TestConfigManager:
    def test_missing_file_returns_defaults(self, tmp_path):
        cfg = ConfigManager.load(tmp_path / "nope.yaml")
        assert cfg.combat == CombatConfig()

    def test_overrides_merged(self, tmp_yaml):
        path = tmp_yaml("config.yaml", "combat:\n  max_attack_loops: 30\n  max_distance: 28\n")
        cfg = ConfigManager.load(path, overrides={"combat": {"max_attack_loops": 10}})
        assert cfg.combat.max_attack_loops == 10
        assert cfg.combat.max_distance == 28

    def test_overrides_without_file(self, tmp_path):
        cfg = ConfigManager.load(tmp_path / "nope.yaml", overrides={"device": {"screen_width": 800}})
        assert cfg.device.screen_width == 800
