"""Locate the optional .env file read by Settings."""

import os
from pathlib import Path

ENV_FILE_VAR = "FIELDSENSE_ENV_FILE"

# Checked in order under <project root>/config
ENV_FILE_CANDIDATES = (".env.dev", ".env")


def find_project_root(start: Path | None = None) -> Path:
    """Nearest directory holding pyproject.toml or .git, else the package parent."""
    here = (start or Path(__file__)).resolve()
    for parent in [here, *here.parents]:
        if (parent / "pyproject.toml").is_file() or (parent / ".git").is_dir():
            return parent
    return Path(__file__).resolve().parents[2]


def resolve_env_file_path(root: Path | None = None) -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. FIELDSENSE_ENV_FILE env var (absolute, or relative to the project root)
    2. config/.env.dev (local development)
    3. config/.env (deployment)
    """
    root = root or find_project_root()

    override = os.environ.get(ENV_FILE_VAR)
    if override:
        path = Path(override)
        if not path.is_absolute():
            path = root / path
        if path.exists():
            return path

    for name in ENV_FILE_CANDIDATES:
        candidate = root / "config" / name
        if candidate.exists():
            return candidate
    return None
