from __future__ import annotations
import os

WORKFLOW_DIR = os.environ.get("GHFLOW_WORKFLOW_DIR", ".github/workflows")
CONFIG_FILE = os.environ.get("GHFLOW_CONFIG", "ghflow.yaml")


def in_ci() -> bool:
    """True when running on a CI runner (most set CI=true)."""
    return os.environ.get("CI", "").strip().lower() in {"1", "true", "yes"}
