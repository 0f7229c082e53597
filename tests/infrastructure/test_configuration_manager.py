"""Tests for ``EnhancedConfigurationManager``."""

import json

import pytest
import yaml

from student_registry.infrastructure.configuration.configuration_manager import (
    ConfigurationValidationRule, EnhancedConfigurationManager
)

SAMPLE = """
database:
  oracle:
    url: ${TEST_ORACLE_URL:jdbc:oracle:thin:@localhost:1521/ORCL}
    user: ${TEST_ORACLE_USER}
    password: secret
  sqlserver:
    server: sql
    port: "1444"
  default:
    path: ":memory:"
legacy:
  test_school_code: "2603"
files:
  log_file: logs/app.log
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(SAMPLE, encoding="utf-8")
    return path


class TestLoading:
    def test_environment_variables_resolved(self, config_file, monkeypatch):
        monkeypatch.setenv("TEST_ORACLE_USER", "admcit")
        monkeypatch.delenv("TEST_ORACLE_URL", raising=False)

        manager = EnhancedConfigurationManager(config_file)

        assert manager.get_value("database.oracle.user") == "admcit"
        assert manager.get_value("database.oracle.url") == "jdbc:oracle:thin:@localhost:1521/ORCL"

    def test_unresolved_variable_is_kept(self, config_file, monkeypatch):
        monkeypatch.delenv("TEST_ORACLE_USER", raising=False)
        manager = EnhancedConfigurationManager(config_file)

        assert manager.get_value("database.oracle.user") == "${TEST_ORACLE_USER}"

    def test_env_file(self, config_file, tmp_path, monkeypatch):
        monkeypatch.setenv("TEST_ORACLE_USER", "placeholder")
        monkeypatch.delenv("TEST_ORACLE_USER")
        env_file = tmp_path / ".env"
        env_file.write_text("TEST_ORACLE_USER=from_env_file\n", encoding="utf-8")

        manager = EnhancedConfigurationManager(config_file, env_file=str(env_file))

        assert manager.get_value("database.oracle.user") == "from_env_file"

    def test_missing_file_uses_defaults(self, tmp_path):
        manager = EnhancedConfigurationManager(tmp_path / "absent.yaml")

        assert manager.get_value("legacy.test_school_code") == "2603"
        assert manager.get_value("database.default.path")

    def test_unsupported_format_uses_defaults(self, tmp_path):
        path = tmp_path / "config.ini"
        path.write_text("[database]", encoding="utf-8")

        assert EnhancedConfigurationManager(path).has_key("database.oracle")

    def test_json_configuration(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"database": {"default": {"path": "x.db"}}}), encoding="utf-8")

        assert EnhancedConfigurationManager(path).get_value("database.default.path") == "x.db"


class TestAccess:
    def test_get_value_default_for_missing_key(self, config_file):
        manager = EnhancedConfigurationManager(config_file)

        assert manager.get_value("database.oracle.missing") is None
        assert manager.get_value("nothing.here", 5) == 5
        assert manager.get_value("files.log_file.deeper", "x") == "x"

    def test_get_section(self, config_file):
        manager = EnhancedConfigurationManager(config_file)

        assert manager.get_section("database.sqlserver")["server"] == "sql"
        assert manager.get_section("unknown") == {}
        assert manager.get_section("files.log_file") == {}

    def test_has_key_and_set_value(self, config_file):
        manager = EnhancedConfigurationManager(config_file)

        assert manager.has_key("legacy.test_school_code")
        assert not manager.has_key("legacy.unknown")

        manager.set_value("legacy.extra.flag", True)
        assert manager.get_value("legacy.extra.flag") is True


class TestValidation:
    def test_type_conversion(self, config_file):
        manager = EnhancedConfigurationManager(config_file)

        assert manager.validate_configuration() == []
        assert manager.get_value("database.sqlserver.port") == 1444

    def test_port_out_of_range(self, config_file):
        manager = EnhancedConfigurationManager(config_file)
        manager.set_value("database.sqlserver.port", 70000)

        errors = manager.validate_configuration()

        assert any("database.sqlserver.port" in error for error in errors)

    def test_required_default_path(self, config_file):
        manager = EnhancedConfigurationManager(config_file)
        manager.set_value("database.default.path", None)

        assert "Required configuration missing: database.default.path" in manager.validate_configuration()

    def test_oracle_url_format(self, config_file):
        manager = EnhancedConfigurationManager(config_file)
        manager.set_value("database.oracle.url", "postgres://db")

        assert any("Not an Oracle JDBC URL" in error for error in manager.validate_configuration())

    def test_custom_rule(self, config_file):
        manager = EnhancedConfigurationManager(config_file)
        manager.add_validation_rule(ConfigurationValidationRule(
            key_path="legacy.test_school_code",
            allowed_values=["1111"]
        ))

        assert any("legacy.test_school_code" in error for error in manager.validate_configuration())


class TestSaving:
    def test_save_yaml(self, config_file, tmp_path):
        manager = EnhancedConfigurationManager(config_file)
        output = tmp_path / "out" / "saved.yaml"

        manager.save_configuration(output)

        saved = yaml.safe_load(output.read_text(encoding="utf-8"))
        assert saved["database"]["sqlserver"]["server"] == "sql"

    def test_save_unsupported_format(self, config_file, tmp_path):
        with pytest.raises(ValueError):
            EnhancedConfigurationManager(config_file).save_configuration(tmp_path / "out.txt")
