"""Tests for engine configuration loading and startup initialization."""

import os

import pytest

from hotel_standards.config import (
    CONFIG_ENV_VAR,
    ConfigError,
    EngineConfig,
    get_engine_config,
    load_engine_config,
)
from hotel_standards.rules import RuleEffect
from hotel_standards.startup import ensure_initialized


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadEngineConfig:
    """Tests for load_engine_config."""

    def test_defaults_without_file(self):
        config = load_engine_config()
        assert len(config.annotation_rules) == 4
        assert config.default_accommodation_type == "hotels_and_similar"

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_engine_config(tmp_path / "nope.yaml")
        assert config == EngineConfig()

    def test_custom_rules(self, tmp_path):
        path = _write(
            tmp_path / "engine.yaml",
            "default_facility_type: hostels\n"
            "annotation_rules:\n"
            "  - code: a20\n"
            "    accommodation_type: hostels\n"
            "    effect: include\n",
        )
        config = load_engine_config(path)
        assert config.default_facility_type == "hostels"
        table = config.build_rule_table()
        assert len(table) == 1
        assert table.codes_for("hostels", RuleEffect.INCLUDE) == ["A20"]

    def test_empty_rule_list_disables_overrides(self, tmp_path):
        path = _write(tmp_path / "engine.yaml", "annotation_rules: []\n")
        table = load_engine_config(path).build_rule_table()
        assert len(table) == 0
        assert table.apply(True, ["A8"], "aparthotels") is True

    def test_empty_file_uses_defaults(self, tmp_path):
        path = _write(tmp_path / "engine.yaml", "")
        assert len(load_engine_config(path).annotation_rules) == 4

    def test_invalid_yaml(self, tmp_path):
        path = _write(tmp_path / "engine.yaml", "annotation_rules: [\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_engine_config(path)

    def test_non_mapping_root(self, tmp_path):
        path = _write(tmp_path / "engine.yaml", "- A8\n- A9\n")
        with pytest.raises(ConfigError, match="must be a mapping"):
            load_engine_config(path)

    def test_validation_error(self, tmp_path):
        path = _write(
            tmp_path / "engine.yaml",
            "annotation_rules:\n  - code: A8\n    accommodation_type: aparthotels\n    effect: ignore\n",
        )
        with pytest.raises(ConfigError, match="Invalid engine config"):
            load_engine_config(path)

    def test_env_var(self, tmp_path, monkeypatch):
        path = _write(tmp_path / "engine.yaml", "default_accommodation_type: specialized\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert load_engine_config().default_accommodation_type == "specialized"

    def test_explicit_path_beats_env_var(self, tmp_path, monkeypatch):
        env_path = _write(tmp_path / "env.yaml", "default_accommodation_type: specialized\n")
        explicit = _write(tmp_path / "explicit.yaml", "default_accommodation_type: aparthotels\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(env_path))
        assert load_engine_config(explicit).default_accommodation_type == "aparthotels"


class TestEngineConfigCache:
    """Tests for the cached accessor."""

    def test_cached(self):
        assert get_engine_config() is get_engine_config()

    def test_force_reload(self, tmp_path, monkeypatch):
        first = get_engine_config()
        path = _write(tmp_path / "engine.yaml", "default_facility_type: hostels\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert get_engine_config() is first
        assert get_engine_config(force_reload=True).default_facility_type == "hostels"


class TestStartup:
    """Tests for ensure_initialized."""

    @pytest.fixture
    def restore_env(self):
        yield
        os.environ.pop(CONFIG_ENV_VAR, None)

    def test_env_file_points_to_config(self, tmp_path, restore_env):
        config_path = _write(tmp_path / "engine.yaml", "default_accommodation_type: specialized\n")
        _write(tmp_path / ".env", f"{CONFIG_ENV_VAR}={config_path}\n")

        state = ensure_initialized(tmp_path)
        assert state.env_loaded is True
        assert state.project_root == tmp_path.resolve()
        assert state.config.default_accommodation_type == "specialized"

    def test_project_root_from_pyproject(self, tmp_path):
        _write(tmp_path / "pyproject.toml", "[project]\nname = 'x'\n")
        nested = tmp_path / "pkg" / "mod"
        nested.mkdir(parents=True)

        state = ensure_initialized(nested)
        assert state.project_root == tmp_path.resolve()
        assert state.env_loaded is False
        assert state.config == EngineConfig()

    def test_idempotent(self, tmp_path):
        _write(tmp_path / "pyproject.toml", "")
        assert ensure_initialized(tmp_path) is ensure_initialized(tmp_path)
