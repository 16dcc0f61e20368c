"""
Minimal .env loader.

Reads KEY=VALUE pairs from a .env file in the current working directory
and exports them into os.environ.
"""
import os
from pathlib import Path
from typing import Dict, Optional


def load_env(env_file: Optional[str] = None) -> Dict[str, str]:
    """
    Load environment variables from a .env file.

    Lines starting with '#' and lines without '=' are ignored. Keys and
    values are stripped; quotes are kept as-is. Values from the file
    override variables already present in the environment.

    Args:
        env_file: Path to the .env file. Defaults to .env in the current directory.

    Returns:
        Dictionary of the variables that were loaded
    """
    env_path = Path(env_file) if env_file else Path.cwd() / ".env"

    loaded: Dict[str, str] = {}
    if not env_path.is_file():
        return loaded

    with open(env_path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith('#') or '=' not in line:
                continue

            key, value = line.split('=', 1)
            key = key.strip()
            if not key:
                continue

            os.environ[key] = value.strip()
            loaded[key] = value.strip()

    return loaded
