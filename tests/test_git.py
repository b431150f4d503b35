"""Tests for repository root discovery."""

import subprocess
from pathlib import Path

from ghflow.git_facts import git


def test_repo_root_uses_git_toplevel(monkeypatch):
    """repo_root returns what git reports as the top-level directory."""
    calls = []

    def fake_git(args, cwd=None):
        calls.append(args)
        return "/work/repo"

    monkeypatch.setattr(git, "_git", fake_git)

    assert git.repo_root() == Path("/work/repo")
    assert calls == [["rev-parse", "--show-toplevel"]]


def test_find_root_falls_back_outside_repo(monkeypatch, tmp_path):
    """Outside a git checkout the given directory is used."""
    def not_a_repo(args, cwd=None):
        raise subprocess.CalledProcessError(128, ["git", *args])

    monkeypatch.setattr(git, "_git", not_a_repo)

    assert git.find_root(str(tmp_path)) == tmp_path.resolve()


def test_find_root_without_git_installed(monkeypatch, tmp_path):
    """A missing git binary also falls back to the directory."""
    def no_git(args, cwd=None):
        raise FileNotFoundError("git")

    monkeypatch.setattr(git, "_git", no_git)

    assert git.find_root(str(tmp_path)) == tmp_path.resolve()
