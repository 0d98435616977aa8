"""Tests for ConfigManager."""

import pytest

from tieredpdf.services import config_manager
from tieredpdf.services.config_manager import ConfigManager, load_config_or_default
from tieredpdf.utils.exceptions import ConfigValidationError

VALID_YAML = """
native_backend: pdfplumber
vision:
  enabled: true
  api_key: ${TIEREDPDF_TEST_KEY}
retry:
  max_attempts: 5
circuit_breaker:
  cooldown_seconds: 15
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "extraction_config.yaml"
    path.write_text(VALID_YAML)
    return path


class TestConfigManager:
    """Tests for ConfigManager.load_config."""

    def test_loads_and_substitutes_env(self, config_file, monkeypatch):
        monkeypatch.setenv("TIEREDPDF_TEST_KEY", "secret-key")
        config = ConfigManager(str(config_file), load_env=False).load_config()

        assert config.native_backend == "pdfplumber"
        assert config.vision.enabled is True
        assert config.vision.api_key == "secret-key"
        assert config.retry.max_attempts == 5
        assert config.circuit_breaker.cooldown_seconds == 15
        # Untouched sections keep defaults
        assert config.batch.concurrency == 3

    def test_unset_env_var_leaves_key_missing(self, config_file, monkeypatch):
        monkeypatch.delenv("TIEREDPDF_TEST_KEY", raising=False)
        config = ConfigManager(str(config_file), load_env=False).load_config()

        assert config.vision.api_key is None

    def test_config_is_cached(self, config_file):
        manager = ConfigManager(str(config_file), load_env=False)

        assert manager.load_config() is manager.load_config()

    def test_missing_file(self, tmp_path):
        manager = ConfigManager(str(tmp_path / "missing.yaml"), load_env=False)

        with pytest.raises(FileNotFoundError):
            manager.load_config()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("retry: [unclosed")

        with pytest.raises(ConfigValidationError, match="Failed to parse YAML"):
            ConfigManager(str(path), load_env=False).load_config()

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("retry:\n  max_attempts: 0\n")

        with pytest.raises(ConfigValidationError, match="Invalid configuration"):
            ConfigManager(str(path), load_env=False).load_config()

    def test_non_mapping_root(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- one\n- two\n")

        with pytest.raises(ConfigValidationError, match="mapping"):
            ConfigManager(str(path), load_env=False).load_config()

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        config = ConfigManager(str(path), load_env=False).load_config()
        assert config.native_backend == "pymupdf"


class TestLoadConfigOrDefault:
    """Tests for load_config_or_default."""

    def test_defaults_when_no_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")

        config = load_config_or_default()

        assert config.vision.api_key == "from-env"
        assert config.vision.enabled is False

    def test_explicit_path(self, config_file):
        assert load_config_or_default(str(config_file)).native_backend == "pdfplumber"


def test_module_documents_default_config_path():
    assert config_manager.DEFAULT_CONFIG_PATH in config_manager.__doc__
