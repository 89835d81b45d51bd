"""Utility functions for application configuration management.

This module provides a standardized interface for handlers to access the
application's configuration. Each environment (`APP_ENV`) has its own YAML
document under the project's `config/` directory:

    config/
    ├── local.yml
    ├── dev.yml
    └── prod.yml

An explicit document can be selected with `LINKSHORTENER_CONFIG`. The
document is deep-merged over built-in defaults, so every key is optional:

    active_backend: memory          # memory | redis
    backends:
      memory: {}
      redis:
        host: localhost
        port: 6379
        db: 0
    shortcode:
      length: 6
      max_attempts: 50
    links:
      default_validity_minutes: 30
      max_batch_size: 5
    access_log:
      sink: logger                  # logger | memory
      max_entries: null

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    project_root() -> Path
        Return the absolute path to the project root directory, using
        `PROJECT_ROOT` when available.

    config_path() -> Path
        Return the path of the configuration document for this environment.

    load_config() -> dict
        Load the configuration document merged over the defaults.

Example:
    >>> from linkshortener.utils.config import load_config
    >>> config = load_config()
    >>> config['active_backend']
    'memory'
"""

import os
import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from linkshortener.constants import ENV, Shortcode, Defaults
from linkshortener.exceptions import BadConfigurationError
from linkshortener.types import AppConfig


logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    'active_backend': 'memory',
    'backends': {
        'memory': {},
        'redis': {'host': 'localhost', 'port': 6379, 'db': 0},
    },
    'shortcode': {
        'length': Shortcode.LENGTH,
        'max_attempts': Shortcode.MAX_ATTEMPTS,
    },
    'links': {
        'default_validity_minutes': Defaults.VALIDITY_MINUTES,
        'max_batch_size': Defaults.MAX_BATCH_SIZE,
    },
    'access_log': {
        'sink': 'logger',
        'max_entries': None,
    },
}


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'

    Returns:
        str:
            Value of `APP_NAME` environment variable.
            None if variable is not set.
    """
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    """Return the absolute path to the project root directory

    Uses the PROJECT_ROOT environment variable. Falls back to the
    directory containing the `linkshortener` package.
    """
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, Path(__file__).resolve().parents[2]))


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'linkshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'linkshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def config_path() -> Path:
    explicit = os.environ.get(ENV.App.CONFIG_PATH)
    if explicit:
        return Path(explicit)
    return project_root() / 'config' / f'{app_env()}.yml'


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config() -> AppConfig:
    """Load the application configuration

    Reads `LINKSHORTENER_CONFIG` if set, otherwise `<project root>/config/<APP_ENV>.yml`
    if it exists, and merges the document over DEFAULT_CONFIG.

    Returns:
        dict: complete configuration document.

    Raises:
        FileNotFoundError:
            If `LINKSHORTENER_CONFIG` points to a missing file.
        BadConfigurationError:
            If the document isn't valid YAML or isn't a mapping.

    Example:
        >>> os.environ['LINKSHORTENER_CONFIG'] = '/etc/linkshortener/prod.yml'
        >>> load_config()['backends']['redis']['host']
        'redis.internal'
    """
    path = config_path()
    if not path.exists():
        if os.environ.get(ENV.App.CONFIG_PATH):
            raise FileNotFoundError(f'Configuration file {path} does not exist.')
        logger.debug('No configuration file found. Using defaults.', extra={'configPath': str(path)})
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with path.open(encoding='utf-8') as f:
            document = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise BadConfigurationError(f'Configuration file {path} is not valid YAML.') from e

    if not isinstance(document, dict):
        raise BadConfigurationError(f'Configuration file {path} must contain a mapping (got {type(document).__name__}).')

    logger.debug('Loaded configuration file.', extra={'configPath': str(path)})
    return _deep_merge(DEFAULT_CONFIG, document)
