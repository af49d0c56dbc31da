"""Version information for netapi.

The version comes from the installed distribution metadata; the commit SHA
from the NETAPI_GIT_SHA environment variable or ``git rev-parse``.
"""

import os
import subprocess
from importlib import metadata
from pathlib import Path

DIST_NAME = "netapi"


def get_version() -> str:
    """Return the installed package version, "0.0.0" when not installed."""
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


__version__ = get_version()


def get_commit() -> str:
    """Get the running commit SHA, "unknown" if it cannot be determined."""
    env_sha = os.getenv("NETAPI_GIT_SHA", "").strip()
    if env_sha:
        return env_sha

    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
            cwd=Path(__file__).parent,
        )
    except (OSError, subprocess.SubprocessError):
        return "unknown"
    if result.returncode == 0:
        return result.stdout.strip()
    return "unknown"
