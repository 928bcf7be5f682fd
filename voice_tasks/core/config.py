"""
Configuration management for voice-tasks.

This module handles environment variables for debugging, trace output and lexicon overrides
using python-dotenv for explicit .env loading. No implicit loading occurs at import time.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""

    pass


ENV_FILE_ENV_VAR = "VT_ENV_FILE"
DEFAULT_TRACE_DIR = os.path.join(".voice_tasks", "debug")


@lru_cache(maxsize=32)
def load_config(env_path: Optional[str] = None, override: bool = False) -> None:
    """Explicitly load environment variables from the given .env file path.

    Notes:
    - This function does NOT perform implicit loading when env_path is None.
    - Callers should pass an explicit path or use load_env_file().
    """
    if env_path:
        load_dotenv(dotenv_path=env_path, override=override)


def load_env_file(env_path: Optional[str] = None, override: bool = False) -> Optional[str]:
    """
    Load a dotenv file, if one is configured.

    Load order (first match wins):
    1) The explicit env_path argument
    2) The file named by VT_ENV_FILE

    Returns the path loaded, or None if nothing was loaded.

    Raises:
        ConfigError: If an explicitly requested file does not exist
    """
    candidate = env_path or os.getenv(ENV_FILE_ENV_VAR)
    if not candidate:
        return None

    if not Path(candidate).is_file():
        raise ConfigError(f"Environment file not found: {candidate}")

    load_config(candidate, override=override)
    return candidate


class Config:
    """Configuration settings for voice-tasks."""

    def __init__(self):
        # Do not implicitly load any .env here. Consumers must call load_env_file() explicitly.
        pass

    @property
    def debug(self) -> bool:
        """Check if JSON traces and timing output are enabled (VT_DEBUG=1)."""
        return os.getenv("VT_DEBUG", "0") == "1"

    @property
    def trace_dir(self) -> Path:
        """Get the directory JSON traces are written to (default: .voice_tasks/debug)."""
        return Path(os.getenv("VT_TRACE_DIR", DEFAULT_TRACE_DIR))

    @property
    def lexicon_file(self) -> Optional[Path]:
        """
        Get the JSON lexicon override file, if configured.

        Raises:
            ConfigError: If VT_LEXICON_FILE names a file that does not exist
        """
        value = os.getenv("VT_LEXICON_FILE")
        if not value:
            return None
        path = Path(value)
        if not path.is_file():
            raise ConfigError(f"VT_LEXICON_FILE points to a missing file: {value}")
        return path


# Global config instance
config = Config()
