# git.py
# Small wrapper around the Git CLI.
# Only what the generator needs: locating the repository root so the
# workflow file lands in <root>/.github/workflows regardless of cwd.

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional


def _git(args: list[str], cwd: Optional[str] = None) -> str:
    """
    Execute a git command and return its stdout as a clean string.

    Args:
        args: List of git arguments (e.g. ["rev-parse", "--show-toplevel"])
        cwd: Optional working directory in which to run the git command.

    Returns:
        Stdout from the git command with surrounding whitespace removed.

    Raises:
        subprocess.CalledProcessError: git exited non-zero
        FileNotFoundError: git is not installed
    """
    out = subprocess.check_output(
        ["git", *args],
        cwd=cwd,
        text=True,
        stderr=subprocess.DEVNULL,
    )
    return out.strip()


def repo_root(cwd: Optional[str] = None) -> Path:
    """Return the absolute path to the root of the current Git repository."""
    return Path(_git(["rev-parse", "--show-toplevel"], cwd=cwd))


def find_root(cwd: Optional[str] = None) -> Path:
    """
    Repository root if inside a git checkout, otherwise the working directory.
    """
    try:
        return repo_root(cwd)
    except (subprocess.CalledProcessError, FileNotFoundError):
        return Path(cwd or ".").resolve()
