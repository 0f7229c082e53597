# student_registry/infrastructure/configuration/configuration_manager.py
"""
Enhanced configuration manager with environment variable resolution and validation.
"""

import os
import re
import yaml
import json
import logging
from pathlib import Path
from typing import Dict, Any, Union, Optional, List, Callable
from dataclasses import dataclass

from dotenv import load_dotenv

from ...domain.interfaces import ConfigurationProvider

logger = logging.getLogger(__name__)

_MISSING = object()
# Pattern to match ${VAR_NAME} or ${VAR_NAME:default_value}
_ENV_PATTERN = re.compile(r'\$\{([^}:]+)(?::([^}]*))?\}')


@dataclass
class ConfigurationValidationRule:
    """Configuration validation rule."""
    key_path: str
    required: bool = False
    data_type: type = str
    allowed_values: Optional[List[Any]] = None
    min_value: Optional[Union[int, float]] = None
    max_value: Optional[Union[int, float]] = None
    validation_function: Optional[Callable[[Any], Optional[str]]] = None


class EnhancedConfigurationManager(ConfigurationProvider):
    """Enhanced configuration manager with validation and environment resolution."""

    def __init__(self, config_file_path: Union[str, Path] = "config.yaml", env_file: Optional[str] = None):
        self.config_file_path = Path(config_file_path)
        self.env_file = env_file
        self._config_data: Dict[str, Any] = {}
        self._validation_rules: List[ConfigurationValidationRule] = []
        self._environment_loaded = False

        # Load environment variables
        self._load_environment()

        # Load configuration
        self.reload_configuration()

        # Initialize default validation rules
        self._initialize_default_validation_rules()

    def _load_environment(self) -> None:
        """Load environment variables from .env file."""
        if not self._environment_loaded:
            load_dotenv(self.env_file)
            self._environment_loaded = True
            logger.debug("Environment variables loaded")

    def reload_configuration(self) -> None:
        """Reload configuration from file; unreadable files fall back to the defaults."""
        try:
            if not self.config_file_path.exists():
                logger.warning(f"Configuration file not found: {self.config_file_path}")
                self._config_data = self._get_default_configuration()
                return

            # Read and process configuration file
            with open(self.config_file_path, 'r', encoding='utf-8') as f:
                raw_content = f.read()

            # Resolve environment variables
            resolved_content = self._resolve_environment_variables(raw_content)

            # Parse configuration
            suffix = self.config_file_path.suffix.lower()
            if suffix in ('.yaml', '.yml'):
                self._config_data = yaml.safe_load(resolved_content) or {}
            elif suffix == '.json':
                self._config_data = json.loads(resolved_content)
            else:
                raise ValueError(f"Unsupported configuration file format: {self.config_file_path.suffix}")

            logger.info(f"Configuration loaded from: {self.config_file_path}")

        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            self._config_data = self._get_default_configuration()

    def get_value(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation."""
        value = self._get_nested_value(self._config_data, key_path)
        return default if value is _MISSING else value

    def get_section(self, section_name: str) -> Dict[str, Any]:
        """Get entire configuration section."""
        section = self.get_value(section_name, {})
        return section if isinstance(section, dict) else {}

    def has_key(self, key_path: str) -> bool:
        """Check if configuration key exists."""
        return self._get_nested_value(self._config_data, key_path) is not _MISSING

    def set_value(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation."""
        self._set_nested_value(self._config_data, key_path, value)

    def add_validation_rule(self, rule: ConfigurationValidationRule) -> None:
        """Add configuration validation rule."""
        self._validation_rules.append(rule)

    def validate_configuration(self) -> List[str]:
        """Validate configuration against defined rules."""
        errors = []

        for rule in self._validation_rules:
            try:
                value = self.get_value(rule.key_path)

                # Check if required
                if rule.required and value is None:
                    errors.append(f"Required configuration missing: {rule.key_path}")
                    continue

                if value is None:
                    continue

                # Type validation
                if rule.data_type and not isinstance(value, rule.data_type):
                    try:
                        # Try to convert
                        converted_value = rule.data_type(value)
                        self.set_value(rule.key_path, converted_value)
                        value = converted_value
                    except (ValueError, TypeError):
                        errors.append(
                            f"Invalid type for {rule.key_path}: expected {rule.data_type.__name__}, got {type(value).__name__}")
                        continue

                # Allowed values validation
                if rule.allowed_values and value not in rule.allowed_values:
                    errors.append(f"Invalid value for {rule.key_path}: {value}. Allowed: {rule.allowed_values}")

                # Range validation
                if rule.min_value is not None and value < rule.min_value:
                    errors.append(f"Value too low for {rule.key_path}: {value} < {rule.min_value}")

                if rule.max_value is not None and value > rule.max_value:
                    errors.append(f"Value too high for {rule.key_path}: {value} > {rule.max_value}")

                # Custom validation function
                if rule.validation_function:
                    custom_error = rule.validation_function(value)
                    if custom_error:
                        errors.append(f"Custom validation failed for {rule.key_path}: {custom_error}")

            except Exception as e:
                errors.append(f"Validation error for {rule.key_path}: {e}")

        return errors

    def _resolve_environment_variables(self, content: str) -> str:
        """Resolve ${VAR_NAME} and ${VAR_NAME:default} references."""

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ''

            env_value = os.getenv(var_name)
            if env_value is not None:
                return env_value
            elif default_value:
                return default_value
            else:
                logger.warning(f"Environment variable {var_name} not found and no default provided")
                return match.group(0)

        return _ENV_PATTERN.sub(replace_env_var, content)

    @staticmethod
    def _get_nested_value(data: Dict[str, Any], key_path: str) -> Any:
        current = data
        for key in key_path.split('.'):
            if not isinstance(current, dict) or key not in current:
                return _MISSING
            current = current[key]
        return current

    @staticmethod
    def _set_nested_value(data: Dict[str, Any], key_path: str, value: Any) -> None:
        keys = key_path.split('.')
        current = data

        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def _initialize_default_validation_rules(self) -> None:
        """Initialize default validation rules."""
        rules = [
            # Database configuration validation
            ConfigurationValidationRule(
                key_path="database.default.path",
                required=True,
                data_type=str
            ),
            ConfigurationValidationRule(
                key_path="database.oracle.url",
                required=False,
                data_type=str,
                validation_function=lambda x: None if x.startswith("jdbc:oracle:") else f"Not an Oracle JDBC URL: {x}"
            ),
            ConfigurationValidationRule(
                key_path="database.sqlserver.port",
                required=False,
                data_type=int,
                min_value=1,
                max_value=65535
            ),
            ConfigurationValidationRule(
                key_path="database.oracle.connection_timeout",
                required=False,
                data_type=int,
                min_value=1,
                max_value=600
            ),
            # Legacy access configuration validation
            ConfigurationValidationRule(
                key_path="legacy.test_school_code",
                required=False,
                data_type=str
            ),
            ConfigurationValidationRule(
                key_path="legacy.default_kind",
                required=False,
                data_type=str,
                allowed_values=["oracle", "sqlserver", "default"]
            )
        ]

        self._validation_rules.extend(rules)

    def _get_default_configuration(self) -> Dict[str, Any]:
        """Get default configuration when file is not available."""
        return {
            "database": {
                "oracle": {
                    "url": "jdbc:oracle:thin:@localhost:1521/ORCL",
                    "user": None,
                    "password": None,
                    "jdbc_jar_path": "libs/ojdbc8.jar",
                    "connection_timeout": 30
                },
                "sqlserver": {
                    "server": "localhost",
                    "port": 1433,
                    "database": None,
                    "user": None,
                    "password": None,
                    "jdbc_jar_path": "libs/mssql-jdbc.jar",
                    "encrypt": False
                },
                "default": {
                    "path": "data/student_registry.db"
                }
            },
            "legacy": {
                "default_kind": "oracle",
                "test_school_code": "2603",
                "test_name_marker": "TESTE"
            },
            "files": {
                "log_file": None
            }
        }

    def save_configuration(self, output_path: Optional[Union[str, Path]] = None) -> None:
        """Save current configuration to file."""
        save_path = Path(output_path) if output_path else self.config_file_path

        try:
            save_path.parent.mkdir(parents=True, exist_ok=True)

            suffix = save_path.suffix.lower()
            if suffix in ('.yaml', '.yml'):
                with open(save_path, 'w', encoding='utf-8') as f:
                    yaml.dump(self._config_data, f, default_flow_style=False, indent=2, sort_keys=False)
            elif suffix == '.json':
                with open(save_path, 'w', encoding='utf-8') as f:
                    json.dump(self._config_data, f, indent=2)
            else:
                raise ValueError(f"Unsupported file format: {save_path.suffix}")

            logger.info(f"Configuration saved to: {save_path}")

        except Exception as e:
            logger.error(f"Failed to save configuration: {e}")
            raise
