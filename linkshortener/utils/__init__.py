from linkshortener.utils.config import app_env, app_name, project_root, app_prefix, load_config
from linkshortener.utils.helpers import base_url, get_short_url, request_source, coarse_location, guarantee_500_response
from linkshortener.utils.shortener import ShortcodeGenerator, random_shortcode
from linkshortener.utils.validators import is_valid_url, validate_target_url, validate_shortcode, validate_validity_minutes
from linkshortener.utils.logging import initialize_logging


__all__ = [
    'ShortcodeGenerator',
    'random_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'base_url',
    'get_short_url',
    'request_source',
    'coarse_location',
    'guarantee_500_response',
    'is_valid_url',
    'validate_target_url',
    'validate_shortcode',
    'validate_validity_minutes',
    'initialize_logging',
]
