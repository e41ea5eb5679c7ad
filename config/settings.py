"""Configuration management for CSAS Sync."""

import os
import logging
from typing import Dict, Any, Optional
from pathlib import Path
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_HOST = 'https://www.csas.cz'
DEFAULT_REFRESH_INTERVAL = 1800000
DEFAULT_HISTORY_INTERVAL = 14
MAX_HISTORY_INTERVAL = 60


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Environment value with blank strings treated as unset."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def load_config(env_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from environment variables and return structured config.

    Args:
        env_path: Optional .env file, defaults to the one in the project root.

    Returns:
        Dict containing configuration sections for csas, security and app settings.

    Raises:
        ValueError: If a numeric setting is not a number.
    """
    # Load environment variables from .env file
    env_path = env_path or Path(__file__).parent.parent / '.env'
    if env_path.exists():
        load_dotenv(env_path)
        logger.info(f"Loaded configuration from {env_path}")
    else:
        logger.warning("No .env file found, using environment variables only")

    history_interval = int(_env('CSAS_HISTORY', str(DEFAULT_HISTORY_INTERVAL)))

    config = {
        'csas': {
            'host': _env('CSAS_HOST', DEFAULT_HOST),
            'client_id': _env('CSAS_CLIENT_ID', ''),
            'client_secret': _env('CSAS_CLIENT_SECRET', ''),
            'refresh_token': _env('CSAS_REFRESH_TOKEN', ''),
            'web_api_key': _env('CSAS_WEB_API_KEY', ''),
            'redirect_uri': 'https://localhost/code',
            'timeout': int(_env('CSAS_TIMEOUT', '30')),
        },
        'security': {
            'token_encryption_key': _env('TOKEN_ENCRYPTION_KEY'),
        },
        'app': {
            'debug': (_env('DEBUG', 'False') or '').lower() == 'true',
            'log_level': _env('LOG_LEVEL', 'INFO'),
            # Milliseconds between refresh cycles
            'refresh_interval': int(_env('CSAS_REFRESH', str(DEFAULT_REFRESH_INTERVAL))),
            'history_interval': min(history_interval, MAX_HISTORY_INTERVAL),
            'items_file': _env('CSAS_ITEMS_FILE', 'items.cfg'),
        }
    }

    _validate_config(config)

    return config


def _validate_config(config: Dict[str, Any]) -> None:
    """
    Check the loaded configuration.

    Missing credentials only log a warning, since refresh cycles then fail to
    authenticate without stopping the service.

    Raises:
        ValueError: If the refresh interval is not a positive number of milliseconds.
    """
    csas = config['csas']
    for key in ('client_id', 'client_secret', 'refresh_token', 'web_api_key'):
        if not csas[key]:
            logger.warning(f"CSAS {key} is not configured; authentication will fail.")
    if config['app']['refresh_interval'] <= 0:
        raise ValueError("CSAS_REFRESH must be a positive number of milliseconds")
    logger.info("Configuration validation completed")
