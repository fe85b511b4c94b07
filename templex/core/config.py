"""
Configuration management for templex.
"""
import copy
from typing import Any

_DEFAULTS = {
    'resolution': {
        'max_values_per_variable': 10,
        'max_combinations': 20,
        'display_limit': 5,
        'skip_files_with_syntax_errors': False
    },
    'oracle': {
        'retry_delay': 0.1,
        'not_ready_markers': ['loading'],
        'untyped_markers': [') any']
    },
    'files': {
        'read_retry_delay': 0.05,
        'supported_extensions': ['.ts', '.tsx', '.mts', '.cts', '.js', '.jsx', '.mjs', '.cjs']
    },
    'modules': {
        'config_files': ['tsconfig.json', 'jsconfig.json'],
        'append_extensions': ['.ts', '.tsx', '.js', '.jsx']
    },
    'logging': {
        'level': 'WARNING',
        'file': None
    }
}


class Configuration:
    """Configuration manager for templex."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Configuration, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        """Initialize the configuration with defaults."""
        self._config = copy.deepcopy(_DEFAULTS)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        try:
            return self._config[section][key]
        except KeyError:
            return default

    def set(self, section: str, key: str, value: Any):
        """Set a configuration value."""
        if section not in self._config:
            self._config[section] = {}
        self._config[section][key] = value

    def reset(self):
        """Restore every section to its default values."""
        self._initialize()

# Initialize configuration
config = Configuration()
