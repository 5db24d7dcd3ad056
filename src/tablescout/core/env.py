"""
Project root + `.env` helpers.

The catalog path in `defaults.yaml` is relative (`data/catalogs/tables.json`) and the
Mapbox token usually lives in a repo-local `.env`. Both are looked up from the
project root: the nearest directory holding a `pyproject.toml` or a `.env`.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ROOT_MARKERS = ("pyproject.toml", ".env")


def find_project_root(start: Path) -> Path | None:
    """Walk up from `start` and return the first directory with a root marker."""
    start = start.resolve()
    for candidate in (start, *start.parents):
        if any((candidate / marker).is_file() for marker in ROOT_MARKERS):
            return candidate
    return None


@lru_cache
def get_project_root() -> Path:
    override = os.getenv("TABLESCOUT_PROJECT_ROOT")
    if override:
        return Path(override).expanduser().resolve()
    # cwd first (pytest, uvicorn, CLI from a checkout), then the installed package location.
    return find_project_root(Path.cwd()) or find_project_root(Path(__file__).parent) or Path.cwd().resolve()


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load `<project root>/.env` once; variables already in the environment win."""
    env_path = get_project_root() / ".env"
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_project_path(path: str | Path) -> Path:
    p = Path(path).expanduser()
    return p if p.is_absolute() else (get_project_root() / p).resolve()
