import os
import logging
from typing import List, Optional
from . import config

logger = logging.getLogger(__name__)


def expand_path(path: str) -> str:
    """Expand a leading ~ and make the path absolute."""
    return os.path.abspath(os.path.expanduser(path))


def get_default_source_paths() -> List[str]:
    """Fixed locations checked, in order, for an export file."""
    home = os.path.expanduser("~")
    return [os.path.join(home, d, config.DEFAULT_SOURCE_FILE) for d in config.DEFAULT_SOURCE_DIRS]


def find_export_in_directory(dir_path: str) -> Optional[str]:
    """
    Finds the most recently modified export file in a directory.
    Only CSV files whose name mentions the password manager are considered.
    """
    if not os.path.isdir(dir_path):
        return None

    candidates = []
    for name in os.listdir(dir_path):
        lowered = name.lower()
        if not lowered.endswith(config.SOURCE_FILE_EXTENSION) or config.SOURCE_DISCOVERY_KEYWORD not in lowered:
            continue
        path = os.path.join(dir_path, name)
        try:
            candidates.append((os.path.getmtime(path), path))
        except OSError:
            continue

    if not candidates:
        return None
    return max(candidates)[1]


def resolve_source_path(explicit_path: Optional[str] = None) -> Optional[str]:
    """
    Resolves the export file path once at startup.

    Order: the explicit path, the environment variable, the default
    locations, then the newest export in the discovery directory.
    Returns None when nothing exists.
    """
    for candidate in (explicit_path, os.environ.get(config.SOURCE_PATH_ENV_VAR)):
        if candidate:
            path = expand_path(candidate)
            if os.path.exists(path):
                return path
            logger.warning(f"Configured export file {path} does not exist")

    for path in get_default_source_paths():
        if os.path.exists(path):
            return path

    discovery_dir = os.path.join(os.path.expanduser("~"), config.SOURCE_DISCOVERY_DIR)
    return find_export_in_directory(discovery_dir)


def resolve_cache_path(explicit_path: Optional[str] = None) -> str:
    """Resolves the cache file path, falling back to the per-user default."""
    if explicit_path:
        return expand_path(explicit_path)
    return config.get_default_cache_path()
