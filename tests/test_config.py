"""Tests for settings and scheme configuration files."""

import json

import pytest
import yaml

from dataknobs_strain import (
    ConfigurationError,
    ForceMode,
    RegistryFrozenError,
    SchemeError,
    StrainSettings,
    Strainer,
    load_config,
)

USER_CONFIG = """
settings:
  default_force: truncate
  freeze_registry: true

schemes:
  username:
    - string
    - length: [3, 20]
    - regexp: "^[A-Za-z0-9_-]+$"
  address:
    city: string
    street: string
  user:
    name: username
    age: ["null", integer, {range: [0, 150]}]
    address: address
    tags:
      - "null"
      - array_of: [trim, string]
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "strain.yaml"
    path.write_text(USER_CONFIG)
    return path


class TestStrainSettings:
    """Test StrainSettings."""

    def test_defaults(self):
        settings = StrainSettings()
        assert settings.default_force == ForceMode.SANITIZE
        assert settings.builtin_filters is True
        assert settings.freeze_registry is False

    def test_from_dict_parses_force(self):
        settings = StrainSettings.from_dict({"default_force": "complete"})
        assert settings.default_force == ForceMode.COMPLETE

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ConfigurationError) as exc_info:
            StrainSettings.from_dict({"colour": "blue"})
        assert exc_info.value.context["unknown"] == ["colour"]

    def test_invalid_force(self):
        with pytest.raises(ConfigurationError):
            StrainSettings.from_dict({"default_force": "everything"})

    def test_env_overrides(self):
        environ = {
            "DATAKNOBS_STRAIN_DEFAULT_FORCE": "nochange",
            "DATAKNOBS_STRAIN_BUILTIN_FILTERS": "false",
            "UNRELATED": "1",
        }
        settings = StrainSettings().with_env_overrides(environ)
        assert settings.default_force == ForceMode.NOCHANGE
        assert settings.builtin_filters is False
        assert settings.freeze_registry is False


class TestLoadConfig:
    """Test loading configuration sources."""

    def test_load_yaml_file(self, config_file):
        config = load_config(config_file, use_env=False)

        assert config.settings.default_force == ForceMode.TRUNCATE
        assert list(config.schemes) == ["username", "address", "user"]
        assert config.schemes["user"]["age"] == ["null", "integer", {"range": [0, 150]}]

    def test_load_json_file(self, tmp_path):
        path = tmp_path / "strain.json"
        path.write_text(json.dumps({"schemes": {"id": ["integer"]}}))

        config = load_config(path, use_env=False)
        assert config.schemes == {"id": ["integer"]}

    def test_load_dict(self):
        config = load_config({"schemes": {"id": "integer"}}, use_env=False)
        assert config.settings == StrainSettings()
        assert config.schemes == {"id": "integer"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(tmp_path / "missing.yaml")
        assert "not found" in str(exc_info.value)

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "strain.txt"
        path.write_text("schemes: {}")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_schemes_must_be_mapping(self):
        with pytest.raises(ConfigurationError):
            load_config({"schemes": ["string"]})

    def test_env_applied_by_default(self, monkeypatch):
        monkeypatch.setenv("DATAKNOBS_STRAIN_DEFAULT_FORCE", "complete")
        assert load_config({}).settings.default_force == ForceMode.COMPLETE
        assert load_config({}, use_env=False).settings.default_force == ForceMode.SANITIZE


class TestStrainerFromConfig:
    """Test building strainers from configuration."""

    def test_configured_strainer(self, config_file):
        strainer = Strainer.from_config(config_file, use_env=False)

        assert strainer.default_force == ForceMode.TRUNCATE
        assert strainer.registry.frozen
        assert {"username", "address", "user", "string", "array_of"} <= set(strainer.registry.names())

    def test_configured_schemes_strain_data(self, config_file):
        strainer = Strainer.from_config(config_file, use_env=False)
        data = {
            "name": "user_1",
            "age": "42",
            "address": {"city": "Default City", "street": "Big", "floor": 3},
            "tags": [" a ", 5],
            "password": "secret",
        }

        outcome = strainer.run(data, "user")

        assert outcome.valid
        assert outcome.data == {
            "name": "user_1",
            "age": 42,
            "address": {"city": "Default City", "street": "Big"},
            "tags": ["a", "5"],
        }

    def test_configured_schemes_report_errors(self, config_file):
        strainer = Strainer.from_config(config_file, use_env=False)
        outcome = strainer.validate({"name": "x y", "age": 200}, "user")

        assert set(outcome.error_paths()) == {"name", "age"}

    def test_frozen_registry_rejects_registration(self, config_file):
        strainer = Strainer.from_config(config_file, use_env=False)
        with pytest.raises(RegistryFrozenError):
            strainer.register("extra", "string")

    def test_without_builtin_filters(self):
        strainer = Strainer.from_config(
            {"settings": {"builtin_filters": False}, "schemes": {"alias": "other"}},
            use_env=False,
        )
        assert strainer.registry.names() == ["alias"]

    def test_invalid_scheme_definition(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Strainer.from_config({"schemes": {"broken": 42}}, use_env=False)
        assert exc_info.value.context["name"] == "broken"

    def test_yaml_null_must_be_quoted(self):
        """An unquoted null in YAML is None, which is not a scheme name."""
        raw = yaml.safe_load("schemes: {maybe: [null, integer]}")
        strainer = Strainer.from_config(raw, use_env=False)
        with pytest.raises(SchemeError):
            strainer.validate(None, "maybe")
