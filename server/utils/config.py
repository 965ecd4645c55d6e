# Configuration loading
# JSON config files selected by CONFIG_ENV, with ${ENV_VAR} placeholders

import json
import os
import logging
from typing import Dict, Any, Optional
import re

_PLACEHOLDER = re.compile(r'\$\{([^}]+)\}')

DEFAULT_DATABASE_PATH = 'data/railmeal.db'


def _replace_env_vars(value: str) -> str:
    """
    Replace ${ENV_VAR} placeholders with environment values.
    Unknown variables are left untouched so they can be detected later.
    """
    def replace_match(match):
        env_var = match.group(1)
        return os.getenv(env_var, match.group(0))

    return _PLACEHOLDER.sub(replace_match, value)


def _process_config_values(config: Any) -> Any:
    """Recursively substitute environment placeholders."""
    if isinstance(config, dict):
        return {k: _process_config_values(v) for k, v in config.items()}
    elif isinstance(config, list):
        return [_process_config_values(item) for item in config]
    elif isinstance(config, str):
        return _replace_env_vars(config)
    else:
        return config


def is_unresolved(value: Any) -> bool:
    """True for empty values and strings still holding a ${...} placeholder."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip() or bool(_PLACEHOLDER.search(value))
    return False


def _server_dir() -> str:
    script_dir = os.path.dirname(os.path.abspath(__file__))
    return os.path.dirname(script_dir)


def load_config() -> Dict[str, Any]:
    """
    Load the configuration file for the current CONFIG_ENV.

    Returns:
        configuration dictionary
    """
    config_env = os.getenv('CONFIG_ENV', 'development')

    config_files = {
        'production': 'config/config-prod.json',
        'development': 'config/config-dev.json',
    }

    config_file = os.getenv('RAILMEAL_CONFIG_FILE') or config_files.get(config_env, 'config/config.json')

    if not os.path.isabs(config_file):
        config_file = os.path.join(_server_dir(), config_file)

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            config = json.load(f)

        config = _process_config_values(config)
        config.pop('_reference_doc', None)

        logging.info(f"Loaded configuration file: {config_file}")
        return config

    except FileNotFoundError:
        logging.error(f"Configuration file not found: {config_file}")
        raise
    except json.JSONDecodeError as e:
        logging.error(f"Configuration file is not valid JSON: {e}")
        raise


def get_database_path(config: Dict[str, Any]) -> str:
    """
    Resolve the SQLite database path relative to the server directory.

    Args:
        config: configuration dictionary

    Returns:
        absolute database path (or ':memory:')
    """
    db_path = config.get('database', {}).get('path')
    if is_unresolved(db_path):
        db_path = DEFAULT_DATABASE_PATH

    if db_path == ':memory:' or os.path.isabs(db_path):
        return db_path

    return os.path.join(_server_dir(), db_path)


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Check that the required sections are present and sane.

    Args:
        config: configuration dictionary

    Returns:
        validation result
    """
    required_sections = ['app', 'server', 'database', 'logging', 'ordering']

    for section in required_sections:
        if section not in config:
            logging.error(f"Configuration is missing required section: {section}")
            return False

    ordering = config.get('ordering', {})
    try:
        if float(ordering.get('gst_percent', 0)) < 0:
            logging.error("ordering.gst_percent must not be negative")
            return False
        if float(ordering.get('platform_charge', 0)) < 0:
            logging.error("ordering.platform_charge must not be negative")
            return False
        if int(ordering.get('default_cutoff_minutes', 90)) < 0:
            logging.error("ordering.default_cutoff_minutes must not be negative")
            return False
    except (TypeError, ValueError) as e:
        logging.error(f"Invalid ordering configuration: {e}")
        return False

    return True


class Config:
    """
    Configuration wrapper
    """
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.env = os.getenv('CONFIG_ENV', 'development')
        self.config = config if config is not None else load_config()

        if not validate_config(self.config):
            raise ValueError("Configuration validation failed")

    def get(self, key: str, default=None):
        """
        Look up a value by dotted key, e.g. 'ordering.gst_percent'.

        Args:
            key: dotted configuration key
            default: value returned when the key is missing

        Returns:
            configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_database_config(self) -> Dict[str, Any]:
        """Database section with the path resolved."""
        db_config = self.config.get('database', {}).copy()
        db_config['path'] = get_database_path(self.config)
        return db_config

    def get_ordering_config(self) -> Dict[str, Any]:
        """Ordering section with defaults filled in."""
        ordering = self.config.get('ordering', {})
        return {
            'timezone': ordering.get('timezone', 'Asia/Kolkata'),
            'gst_percent': ordering.get('gst_percent', 5),
            'platform_charge': ordering.get('platform_charge', 0),
            'default_cutoff_minutes': int(ordering.get('default_cutoff_minutes', 90)),
            'payment_modes': ordering.get('payment_modes', ['COD', 'ONLINE']),
            'menu_type_order': ordering.get('menu_type_order', []),
        }

    def get_holiday_config(self) -> Dict[str, Any]:
        """Holiday lookup section; an unresolved admin URL means local lookups."""
        holidays = self.config.get('holidays', {})
        base_url = holidays.get('admin_base_url')
        return {
            'admin_base_url': None if is_unresolved(base_url) else base_url.rstrip('/'),
            'request_timeout_seconds': float(holidays.get('request_timeout_seconds', 8)),
            'chunk_size': max(1, int(holidays.get('chunk_size', 6))),
        }
