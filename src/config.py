"""
Configuration module for the PEEVEM schema validator
Centralizes paths, schema ids, validation limits and logging settings
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError

from models.classification import PEEVEM_BASE_URI, ClassifierConfig

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Configuration validation error"""
    pass


def _safe_int_env(
    name: str,
    default: Optional[int],
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
) -> Optional[int]:
    """
    Safely parse integer environment variable with bounds.
    Falls back to default on invalid or unset values.
    """
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except (ValueError, TypeError):
        logger.warning(f"Invalid {name}, using default {default}")
        return default
    if min_val is not None:
        value = max(min_val, value)
    if max_val is not None:
        value = min(max_val, value)
    return value


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """
    Validator configuration with:
    - Environment variable support
    - Optional JSON override file
    - Validation of the merged values
    """

    VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

    # ========== Schema Settings ==========
    @classmethod
    def get_schemas_config(cls) -> dict:
        """Schema/example locations and well-known schema ids from env"""
        base_uri = os.getenv('PEEVEM_BASE_URI', PEEVEM_BASE_URI)
        return {
            'schemas_dir': Path(os.getenv('PEEVEM_SCHEMAS_DIR', 'schemas')),
            'examples_dir': Path(os.getenv('PEEVEM_EXAMPLES_DIR', 'examples')),
            'base_uri': base_uri,
            'core_schema_id': os.getenv('PEEVEM_CORE_SCHEMA_ID', f"{base_uri}core"),
            'recursive': _env_flag('PEEVEM_RECURSIVE', True),
        }

    # ========== Validation Settings ==========
    @classmethod
    def get_validation_config(cls) -> dict:
        return {
            'max_errors': _safe_int_env('PEEVEM_MAX_ERRORS', None, 1),
            'strict': _env_flag('PEEVEM_STRICT', False),
            'classifier_config': os.getenv('PEEVEM_CLASSIFIER_CONFIG') or None,
        }

    # ========== Logging Settings ==========
    @classmethod
    def get_logging_config(cls) -> dict:
        return {
            'level': os.getenv('LOG_LEVEL', 'INFO').upper(),
            'log_dir': os.getenv('PEEVEM_LOG_DIR') or None,
            'log_file': 'validator.log',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'date_format': '%Y-%m-%d %H:%M:%S',
            'max_bytes': 5 * 1024 * 1024,
            'backup_count': 3,
            'colored_output': _env_flag('PEEVEM_COLOR', True),
            'json_logs': _env_flag('PEEVEM_JSON_LOGS', False),
        }

    SCHEMAS = property(lambda self: self._section('schemas', self.get_schemas_config()))
    VALIDATION = property(lambda self: self._section('validation', self.get_validation_config()))
    LOGGING = property(lambda self: self._section('logging', self.get_logging_config()))

    def __init__(self, config_file: Optional[str] = None, validate: bool = True):
        """
        Initialize configuration with optional validation

        Args:
            config_file: Optional path to JSON config file
            validate: Whether to validate configuration on init
        """
        self._lock = threading.RLock()
        self.config_file = config_file
        self._custom_settings: dict[str, Any] = {}

        if config_file:
            self.load_from_file(config_file)

        if validate:
            self.validate()

    def _section(self, name: str, defaults: dict) -> dict:
        with self._lock:
            overrides = dict(self._custom_settings.get(name) or {})

        merged = {**defaults, **overrides}
        if name == 'schemas':
            for key in ('schemas_dir', 'examples_dir'):
                merged[key] = Path(merged[key])
            # A custom base URI moves the default core id with it
            if 'base_uri' in overrides and 'core_schema_id' not in overrides \
                    and not os.getenv('PEEVEM_CORE_SCHEMA_ID'):
                merged['core_schema_id'] = f"{merged['base_uri']}core"
        return merged

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get a setting, custom file values taking precedence over env/defaults"""
        sections = {
            'schemas': self.SCHEMAS,
            'validation': self.VALIDATION,
            'logging': self.LOGGING,
        }
        return sections.get(section, {}).get(key, default)

    def set(self, section: str, key: str, value: Any) -> None:
        with self._lock:
            self._custom_settings.setdefault(section, {})[key] = value

    def get_logger_settings(self) -> dict:
        """LOGGING section (env, then config file) keyed for setup_logging()"""
        settings = dict(self.LOGGING)
        settings['log_level'] = settings.pop('level', 'INFO')
        return settings

    def get_classifier_config(self) -> ClassifierConfig:
        """
        Classification table, in order of precedence:
        1. "classification" section of the loaded config file
        2. JSON file named by PEEVEM_CLASSIFIER_CONFIG / validation.classifier_config
        3. Stock PEEVEM table for the configured base URI

        Raises:
            ConfigError: table is malformed
        """
        with self._lock:
            section = self._custom_settings.get('classification')

        try:
            if section is not None:
                return ClassifierConfig.model_validate(section)

            table_file = self.VALIDATION.get('classifier_config')
            if table_file:
                path = Path(table_file)
                try:
                    with open(path, 'r', encoding='utf-8') as f:
                        data = json.load(f)
                except (OSError, json.JSONDecodeError) as e:
                    raise ConfigError(f"Cannot read classifier config {path}: {e}")
                if not isinstance(data, dict):
                    raise ConfigError(f"Classifier config {path} must contain a JSON object")
                return ClassifierConfig.model_validate(data.get('classification', data))
        except ValidationError as e:
            raise ConfigError(f"Invalid classification table: {e}")

        return ClassifierConfig.peevem_defaults(self.SCHEMAS['base_uri'])

    def validate(self):
        """
        Validate all configuration values

        Raises:
            ConfigError: If configuration is invalid
        """
        errors = []

        schemas = self.SCHEMAS
        if not str(schemas['base_uri']).strip():
            errors.append("base_uri cannot be empty")
        if not str(schemas['core_schema_id']).strip():
            errors.append("core_schema_id cannot be empty")

        max_errors = self.VALIDATION.get('max_errors')
        if max_errors is not None and (not isinstance(max_errors, int) or max_errors < 1):
            errors.append("max_errors must be a positive integer")

        if str(self.LOGGING['level']).upper() not in self.VALID_LOG_LEVELS:
            errors.append(f"Invalid log level: {self.LOGGING['level']}")

        try:
            self.get_classifier_config()
        except ConfigError as e:
            errors.append(str(e))

        if errors:
            raise ConfigError("Configuration validation failed:\n" + "\n".join(errors))

    def load_from_file(self, filepath: Union[str, Path]):
        """
        Load configuration overrides from a JSON file

        Args:
            filepath: Path to JSON configuration file
        """
        filepath = Path(filepath)

        if not filepath.exists():
            logger.warning(f"Config file not found: {filepath}")
            return

        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file: {e}")
        except OSError as e:
            raise ConfigError(f"Error loading config file: {e}")

        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a JSON object")

        with self._lock:
            self._custom_settings = data

        logger.info(f"Loaded configuration from {filepath}")

    def to_dict(self) -> dict:
        """Export entire configuration as dictionary"""
        return {
            'schemas': {k: str(v) if isinstance(v, Path) else v for k, v in self.SCHEMAS.items()},
            'validation': self.VALIDATION,
            'logging': self.LOGGING,
            'classification': self.get_classifier_config().model_dump(mode='json'),
        }


# Create global configuration instance.
#
# Keep this import side-effect free: no validation, no logging setup. The
# command-line tools do that explicitly on startup.
config = Config(validate=False)
