"""
Environment variable loading utility.

This module provides functions to load environment variables from files.
"""
import os
import logging

logger = logging.getLogger(__name__)


def load_env_from_file(file_path, override=False):
    """
    Load environment variables from a KEY=VALUE file.

    Args:
        file_path: Path to the environment variable file.
        override: Replace variables that are already set in the environment.

    Returns:
        List of keys that were set, or None if the file could not be read.
    """
    if not os.path.exists(file_path):
        logger.debug(f"Environment file not found: {file_path}")
        return None

    loaded = []
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line or line.startswith('#'):
                    continue
                if line.startswith('export '):
                    line = line[len('export '):]
                if '=' not in line:
                    logger.warning(f"Skipping malformed line {line_no} in {file_path}")
                    continue

                key, value = line.split('=', 1)
                key = key.strip()
                value = value.strip()
                if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
                    value = value[1:-1]

                if not override and key in os.environ:
                    continue
                os.environ[key] = value
                loaded.append(key)
    except OSError as e:
        logger.error(f"Error loading environment variables from {file_path}: {str(e)}")
        return None

    logger.info(f"Loaded {len(loaded)} environment variables from {file_path}")
    return loaded


def env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def env_int(name, default):
    value = os.getenv(name)
    if value is None or value.strip() == '':
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {name}: {value!r}. Using {default}.")
        return default
