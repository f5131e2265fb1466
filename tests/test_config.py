"""
Tests for domchain configuration system.
"""

import json
import os
import tempfile

import pytest
import yaml

from domchain.config import (
    ChainOptions,
    ConfigLoader,
    ConfigurationError,
    DomChainConfig,
    StaticOptions,
    WaitOptions,
    find_config_file,
    get_default_config,
    get_env,
    get_env_key,
    load_config,
    load_env_config,
    load_file,
    merge_configs,
    save_config,
)

ENV_VARS = (
    "DOMCHAIN_CHAIN_TRACE_INDENT",
    "DOMCHAIN_CHAIN_LOG_STEPS",
    "DOMCHAIN_STATIC_NORMALIZE_WHITESPACE",
    "DOMCHAIN_WAIT_TIMEOUT",
    "DOMCHAIN_WAIT_POLLING_INTERVAL",
    "DOMCHAIN_WAIT_IGNORE_EXCEPTIONS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestOptions:
    """Tests for option classes."""

    def test_default_values(self):
        """Test default option values."""
        config = DomChainConfig()
        assert config.chain.trace_indent == "  "
        assert config.chain.log_steps is True
        assert config.static.normalize_whitespace is True
        assert config.wait.timeout == 5.0
        assert config.wait.polling_interval == 0.1
        assert config.wait.ignore_exceptions is True

    def test_defaults_match_default_config(self):
        """Test option defaults agree with get_default_config()."""
        assert DomChainConfig().to_dict() == get_default_config()

    def test_wait_validation(self):
        """Test wait option validation."""
        with pytest.raises(ValueError):
            WaitOptions(timeout=0)
        with pytest.raises(ValueError):
            WaitOptions(polling_interval=-1)
        with pytest.raises(ValueError, match="polling_interval cannot exceed timeout"):
            WaitOptions(timeout=1, polling_interval=2)

    def test_chain_merge(self):
        """Test merging chain options keeps unset fields."""
        base = ChainOptions(trace_indent="\t", log_steps=False)
        merged = base.merge(ChainOptions(log_steps=True))
        assert merged.trace_indent == "\t"
        assert merged.log_steps is True

    def test_wait_merge_revalidates(self):
        """Test merged wait options are validated again."""
        base = WaitOptions(timeout=1.0, polling_interval=0.5)
        with pytest.raises(ValueError):
            base.merge(WaitOptions(polling_interval=2.0))

    def test_config_merge(self):
        """Test merging full configurations."""
        config1 = DomChainConfig(static=StaticOptions(normalize_whitespace=False))
        config2 = DomChainConfig(wait=WaitOptions(timeout=30))
        merged = config1.merge(config2)
        assert merged.static.normalize_whitespace is False
        assert merged.wait.timeout == 30
        assert merged.wait.polling_interval == 0.1

    def test_from_dict(self):
        """Test creating configuration from dictionary."""
        config = DomChainConfig.from_dict(
            {"chain": {"trace_indent": "    "}, "wait": {"timeout": 2}}
        )
        assert config.chain.trace_indent == "    "
        assert config.wait.timeout == 2.0


class TestEnvironmentVariables:
    """Tests for environment variable support."""

    def test_get_env_key(self):
        """Test converting config key to env var name."""
        assert get_env_key("wait.timeout") == "DOMCHAIN_WAIT_TIMEOUT"
        assert get_env_key("chain.log-steps") == "DOMCHAIN_CHAIN_LOG_STEPS"

    def test_get_env_typed_by_default(self):
        """Test values are parsed to the default's type."""
        os.environ["DOMCHAIN_TEST_INT"] = "42"
        try:
            assert get_env("test.int", default=0) == 42
        finally:
            del os.environ["DOMCHAIN_TEST_INT"]

    def test_get_env_default(self):
        """Test environment variable default value."""
        assert get_env("nonexistent.key", default="default") == "default"

    def test_load_env_config(self, monkeypatch):
        """Test only set variables are loaded, parsed to option types."""
        monkeypatch.setenv("DOMCHAIN_WAIT_TIMEOUT", "10")
        monkeypatch.setenv("DOMCHAIN_CHAIN_LOG_STEPS", "off")
        assert load_env_config() == {
            "wait": {"timeout": 10.0},
            "chain": {"log_steps": False},
        }

    def test_load_env_config_empty(self):
        """Test nothing is loaded without variables."""
        assert load_env_config() == {}


class TestConfigLoader:
    """Tests for configuration file loading."""

    def test_load_json(self):
        """Test loading JSON configuration."""
        with tempfile.NamedTemporaryFile(
            mode="w", suffix=".json", delete=False
        ) as f:
            json.dump({"wait": {"timeout": 2}}, f)
            f.flush()

            try:
                data = load_file(f.name)
                assert data["wait"]["timeout"] == 2
            finally:
                os.unlink(f.name)

    def test_load_yaml(self, tmp_path):
        """Test loading YAML configuration."""
        path = tmp_path / "domchain.config.yaml"
        path.write_text("static:\n  normalize_whitespace: false\n")
        assert load_file(path) == {"static": {"normalize_whitespace": False}}

    def test_load_empty_yaml(self, tmp_path):
        """Test loading an empty YAML file."""
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_file(path) == {}

    def test_load_toml(self, tmp_path):
        """Test loading TOML configuration."""
        path = tmp_path / "domchain.config.toml"
        path.write_text('[chain]\ntrace_indent = "    "\n')
        assert load_file(path) == {"chain": {"trace_indent": "    "}}

    def test_missing_file(self, tmp_path):
        """Test loading a missing file."""
        with pytest.raises(ConfigurationError, match="not found"):
            load_file(tmp_path / "missing.json")

    def test_unsupported_format(self, tmp_path):
        """Test loading an unsupported format."""
        path = tmp_path / "config.ini"
        path.write_text("[wait]\n")
        with pytest.raises(ConfigurationError, match="Unsupported"):
            load_file(path)

    def test_unparsable_file(self, tmp_path):
        """Test loading a broken file."""
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError, match="Cannot parse"):
            load_file(path)

    def test_non_mapping_root(self, tmp_path):
        """Test loading a file whose root is not a mapping."""
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_file(path)

    def test_find_config_file(self, tmp_path):
        """Test searching for the default config file."""
        assert find_config_file(search_paths=[str(tmp_path)]) is None
        path = tmp_path / "domchain.config.yml"
        path.write_text("{}")
        assert find_config_file(search_paths=[str(tmp_path)]) == path

    def test_load_config(self, tmp_path):
        """Test load_config function."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"chain": {"log_steps": False}}))
        config = load_config(path)
        assert config.chain.log_steps is False

    def test_priority(self, tmp_path, monkeypatch):
        """Test overrides beat environment, which beats the file."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"wait": {"timeout": 2, "polling_interval": 0.5}}))
        monkeypatch.setenv("DOMCHAIN_WAIT_TIMEOUT", "20")

        config = ConfigLoader(config_file=path).load(
            overrides={"wait": {"polling_interval": 1.0}}
        )
        assert config.wait.timeout == 20.0
        assert config.wait.polling_interval == 1.0

    def test_env_ignored_when_disabled(self, monkeypatch):
        """Test environment variables can be skipped."""
        monkeypatch.setenv("DOMCHAIN_WAIT_TIMEOUT", "20")
        config = ConfigLoader(load_env=False, auto_find=False).load()
        assert config.wait.timeout == 5.0

    def test_auto_find(self, tmp_path):
        """Test the config file is found in the search paths."""
        (tmp_path / "domchain.config.json").write_text(
            json.dumps({"static": {"normalize_whitespace": False}})
        )
        config = ConfigLoader(search_paths=[str(tmp_path)]).load()
        assert config.static.normalize_whitespace is False

    def test_invalid_values(self):
        """Test invalid merged values raise ConfigurationError."""
        loader = ConfigLoader(load_env=False, auto_find=False)
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            loader.load(overrides={"wait": {"timeout": -1}})

    def test_merge_configs(self):
        """Test merging multiple configurations."""
        config1 = {"wait": {"timeout": 1, "ignore_exceptions": False}}
        config2 = {"wait": {"timeout": 3}, "chain": {"log_steps": False}}
        merged = merge_configs(config1, config2)
        assert merged == {
            "wait": {"timeout": 3, "ignore_exceptions": False},
            "chain": {"log_steps": False},
        }


class TestSaveConfig:
    """Tests for saving configuration."""

    def test_save_json(self, tmp_path):
        """Test saving configuration as JSON."""
        config = DomChainConfig(wait=WaitOptions(timeout=12))
        path = tmp_path / "out" / "config.json"
        save_config(config, path)
        assert load_file(path)["wait"]["timeout"] == 12

    def test_save_yaml(self, tmp_path):
        """Test saving configuration as YAML."""
        config = DomChainConfig(chain=ChainOptions(log_steps=False))
        path = tmp_path / "config.yaml"
        save_config(config, path)
        assert yaml.safe_load(path.read_text())["chain"]["log_steps"] is False
        assert load_config(path, load_env=False) == config

    def test_save_unsupported(self, tmp_path):
        """Test saving in an unknown format."""
        with pytest.raises(ConfigurationError):
            save_config(DomChainConfig(), tmp_path / "config.toml", format="toml")
