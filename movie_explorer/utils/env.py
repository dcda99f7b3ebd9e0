from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _env_candidates(env_file: str | Path | None) -> list[Path]:
    if env_file is not None:
        return [Path(env_file).expanduser()]
    return [Path(__file__).resolve().parents[2] / ".env", Path.cwd() / ".env"]


def load_env(env_file: str | Path | None = None, *, override: bool = False) -> Path | None:
    """
    Load settings (TMDB_API_KEY, EXPLORER_API_BASE_URL, ...) from a `.env` file.

    With `env_file` only that file is tried; otherwise the first `.env` found at the
    project root or the working directory. Returns the loaded path, or None.
    """
    for path in _env_candidates(env_file):
        if path.is_file():
            load_dotenv(dotenv_path=path, override=override)
            logger.debug(f"Loaded environment from {path}")
            return path
    if env_file is not None:
        logger.warning(f"Env file not found: {env_file}")
    return None
