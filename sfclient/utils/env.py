"""
Environment utilities for the streaming client.

Loads .env files so STREAMINGFAST_* variables can live next to the
project instead of the shell profile.
"""
import os
import logging
from pathlib import Path
from typing import Optional, Dict

from dotenv import load_dotenv

logger = logging.getLogger("sfclient.env")

ENV_PREFIX = "STREAMINGFAST_"


def load_environment(env_file: Optional[str] = None, search_paths: Optional[list] = None) -> Optional[Path]:
    """
    Load environment variables from a .env file.

    Variables already present in the process environment win over the file.

    Args:
        env_file: Explicit path to a .env file
        search_paths: Directories to look into when env_file is not given

    Returns:
        The path that was loaded, or None when no file was found
    """
    if env_file:
        path = Path(env_file)
        if path.exists():
            load_dotenv(path, override=False)
            logger.debug(f"Loaded environment variables from {path}")
            return path
        logger.warning(f"Environment file {path} does not exist")
        return None

    candidates = [Path(p) / '.env' for p in (search_paths or [Path.cwd()])]
    for path in candidates:
        if path.exists():
            load_dotenv(path, override=False)
            logger.debug(f"Loaded environment variables from {path}")
            return path

    return None


def get_env(name: str, default: Optional[str] = None, env: Optional[Dict[str, str]] = None) -> Optional[str]:
    """Get a STREAMINGFAST_ prefixed variable, empty values count as missing."""
    env = env if env is not None else os.environ
    value = env.get(f"{ENV_PREFIX}{name}", "")
    return value if value.strip() else default
