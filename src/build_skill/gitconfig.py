"""Best-effort lookup of the user's git identity."""

import logging
import os

# GitPython checks for a git executable at import time and raises ImportError
# when none is found. "quiet" defers that failure to the first git call, where
# get_git_config handles it. This sets the variable for the whole process, so
# a value the user already exported is kept and any other GitPython import in
# the same process sees the same setting.
os.environ.setdefault("GIT_PYTHON_REFRESH", "quiet")

from git import Git  # noqa: E402
from git.exc import CommandError  # noqa: E402

logger = logging.getLogger(__name__)


def get_git_config(key: str) -> str:
    """Read a value from git config.

    Args:
        key: Config key such as ``user.name``

    Returns:
        The trimmed value, or an empty string if git is unavailable or the
        key is unset
    """
    try:
        return Git().config("--get", key).strip()
    except (CommandError, OSError) as e:
        logger.debug(f"git config {key} unavailable: {e}")
        return ""
