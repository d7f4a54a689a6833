"""Project settings loaded from pyproject.toml [tool.statix] section.

This module provides centralized access to project configuration defaults,
with environment variable overrides for runtime flexibility.
"""

import logging
import os
import tomllib
from functools import cache
from pathlib import Path

logger = logging.getLogger(__name__)


@cache
def _load_pyproject_settings() -> dict:
    """Load settings from pyproject.toml [tool.statix] section.

    Returns:
        Dictionary of settings from pyproject.toml, empty dict if not found.
    """
    # Walk up to find pyproject.toml (for development)
    current = Path(__file__).resolve().parent
    while current != current.parent:
        candidate = current / "pyproject.toml"
        if candidate.exists():
            break
        current = current.parent
    else:
        return {}

    try:
        data = tomllib.loads(candidate.read_text())
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Failed to read settings from {candidate}: {e}")
        return {}
    return data.get("tool", {}).get("statix", {})


def _parse_bool(value: str | bool) -> bool:
    """Parse a boolean value from string or bool."""
    if isinstance(value, bool):
        return value
    return value.lower() in ("true", "1", "yes")


def get_default_marks() -> int:
    """Get the default evaluation granularity for interactive hints.

    Priority:
        1. STATIX_MARKS environment variable
        2. pyproject.toml [tool.statix] marks
        3. Fallback default: 10

    Returns:
        Number of marks, 0 means probabilities are input directly.
    """
    if env_val := os.getenv("STATIX_MARKS"):
        return int(env_val)

    settings = _load_pyproject_settings()
    return int(settings.get("marks", 10))


def get_links_cut() -> float:
    """Get the default links cutting ratio.

    Priority:
        1. STATIX_LINKS_CUT environment variable
        2. pyproject.toml [tool.statix] links-cut
        3. Fallback default: 0 (no cutting)

    Returns:
        Links cutting ratio in [0, 1).
    """
    if env_val := os.getenv("STATIX_LINKS_CUT"):
        return float(env_val)

    settings = _load_pyproject_settings()
    return float(settings.get("links-cut", 0.0))


def get_scale() -> float:
    """Get the default clustering resolution (scale).

    Priority:
        1. STATIX_SCALE environment variable
        2. pyproject.toml [tool.statix] scale
        3. Fallback default: 1
    """
    if env_val := os.getenv("STATIX_SCALE"):
        return float(env_val)

    settings = _load_pyproject_settings()
    return float(settings.get("scale", 1.0))


def get_use_rich() -> bool:
    """Get whether rich progress output is enabled.

    Priority:
        1. STATIX_USE_RICH environment variable
        2. pyproject.toml [tool.statix] use-rich
        3. Fallback default: True
    """
    if env_val := os.getenv("STATIX_USE_RICH"):
        return _parse_bool(env_val)

    settings = _load_pyproject_settings()
    return _parse_bool(settings.get("use-rich", True))
