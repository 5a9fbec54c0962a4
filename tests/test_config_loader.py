"""Tests for layered configuration loading"""

from pathlib import Path

import pytest

from aria_kb.core.config_loader import ConfigLoader, PipelineSettings, load_settings
from aria_kb.core.exceptions import ConfigurationError


def _loader(path) -> ConfigLoader:
    return ConfigLoader(str(path), load_env_file=False)


class TestConfigLoader:

    def test_defaults_when_file_missing(self, tmp_path):
        settings = _loader(tmp_path / "missing.yaml").load_settings()
        assert settings == PipelineSettings()
        assert settings.paths.aria_dir == Path("data") / "aria"
        assert settings.metadata.version == "1.3"
        assert list(settings.extensions) == ["dpub", "graphics"]

    def test_file_overrides_defaults(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text(
            "paths:\n  data_dir: /srv/data\n"
            "metadata:\n  version: '1.4'\n"
            "output:\n  indent: 4\n",
            encoding="utf-8",
        )
        settings = _loader(config).load_settings()
        assert settings.paths.data_dir == Path("/srv/data")
        assert settings.paths.output_file == Path("data/aria-data.json")
        assert settings.metadata.version == "1.4"
        assert settings.output.indent == 4

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        config = tmp_path / "config.yaml"
        config.write_text("output:\n  indent: 4\n", encoding="utf-8")
        monkeypatch.setenv("ARIA_KB_OUTPUT__INDENT", "0")
        monkeypatch.setenv("ARIA_KB_OUTPUT__VALIDATE_SCHEMA", "false")
        monkeypatch.setenv("ARIA_KB_PATHS__DATA_DIR", "/env/data")

        settings = _loader(config).load_settings()
        assert settings.output.indent == 0
        assert settings.output.validate_schema is False
        assert settings.paths.data_dir == Path("/env/data")

    def test_single_level_env_names_are_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ARIA_KB_LOG_LEVEL", "DEBUG")
        settings = _loader(tmp_path / "missing.yaml").load_settings()
        assert settings.logging.level == "INFO"

    def test_extension_modules_from_file(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text(
            "extensions:\n  mathml:\n    label: mathml-aria\n    path: mathml/index.html\n",
            encoding="utf-8",
        )
        settings = _loader(config).load_settings()
        assert settings.extensions["mathml"].label == "mathml-aria"
        assert "dpub" in settings.extensions

    def test_invalid_yaml(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("paths: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Failed to load config file"):
            _loader(config).load_settings()

    def test_non_mapping_file(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            _loader(config).load_settings()

    def test_invalid_value(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("output:\n  indent: -1\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            _loader(config).load_settings()

    def test_settings_are_cached(self, tmp_path):
        loader = _loader(tmp_path / "missing.yaml")
        assert loader.load_settings() is loader.load_settings()


class TestLoadSettings:

    def test_repository_config_matches_defaults(self):
        config = Path(__file__).resolve().parent.parent / "config" / "aria_kb.yaml"
        assert load_settings(str(config)) == PipelineSettings()

    def test_keyword_overrides(self, tmp_path):
        settings = load_settings(
            str(tmp_path / "missing.yaml"),
            paths={"data_dir": str(tmp_path)},
            output={"indent": 1},
        )
        assert settings.paths.data_dir == tmp_path
        assert settings.paths.aria_subdir == "aria"
        assert settings.output.indent == 1

    def test_invalid_override(self, tmp_path):
        with pytest.raises(ConfigurationError, match="override"):
            load_settings(str(tmp_path / "missing.yaml"), output={"indent": "wide"})
