"""
Persistence of property significance hints.

Hints file format:
    #/ Properties: <count>
    <weight>\t<property>
    ...

Lines whose first field starts with '#' are comments.
"""

import logging
import os
from pathlib import Path

from statix import EXT_HINTS

from .quantize import round_weight, tolerance

logger = logging.getLogger(__name__)

COMMENT_MARK = "#"


def update_file_extension(filename: str | Path, ext: str) -> str:
    """Replace the file extension with the specified one.

    Files without any extension get the extension appended; dots in the
    directory part are not treated as an extension.
    """
    filename = str(filename)
    iext = filename.rfind(".")
    if iext != -1 and iext > filename.rfind(os.sep):
        filename = filename[:iext]
    return filename + ext


def hints_filename(dataset: str | Path, granularity: int = 0) -> str:
    """Default hints file name of the dataset, qualified by the granularity."""
    ext = f"_{granularity}{EXT_HINTS}" if granularity else EXT_HINTS
    return update_file_extension(dataset, ext)


def omitted_hints(weights: dict[str, float], granularity: int) -> set[str]:
    """Properties whose weights are too small to be persisted with the granularity.

    The rounding error of such a weight exceeds the weight itself, so the
    automatically estimated tiny value is more accurate than the grid point.
    """
    return {
        prop
        for prop, weight in weights.items()
        if abs(round_weight(weight, granularity) - weight) > weight
    }


def save_hints(
    weights: dict[str, float],
    granularity: int,
    path: str | Path,
    on_grid: bool = False,
) -> float | None:
    """Save property weights (hints) to the specified file.

    The saved weights are rounded with the granularity and updated in
    ``weights``. The weights listed by ``omitted_hints`` are not written and
    are left untouched.

    Args:
        weights: Property weights to be saved, updated in place
        granularity: Granularity of the saved weights, 0 to skip rounding
        path: Hints file name
        on_grid: The weights are already snapped onto the granularity grid
            and are saved as is

    Returns:
        Tolerance of the saved weights, None if nothing was saved
    """
    if not weights:
        logger.warning("The hints output is omitted: property weights are empty")
        return None

    omitted = set() if on_grid else omitted_hints(weights, granularity)
    rounded: dict[str, float] = {}
    for prop, weight in weights.items():
        if prop in omitted:
            logger.debug(f"Tiny weight of {prop} is omitted: {weight}")
            continue
        rounded[prop] = weight if on_grid else round_weight(weight, granularity)

    with open(path, "w", encoding="utf-8") as f:
        f.write(f"{COMMENT_MARK}/ Properties: {len(rounded)}\n")
        for prop, weight in rounded.items():
            f.write(f"{weight}\t{prop}\n")
    weights.update(rounded)

    eps = tolerance(granularity)
    logger.info(
        f"{len(rounded)} property weights (significance) with eps={eps:.4g} "
        f"are saved to {path}"
    )
    return eps


def load_hints(weights: dict[str, float], path: str | Path) -> int:
    """Load hints from the specified file.

    Args:
        weights: Property weights to be updated with the loaded hints
        path: Hints file name

    Returns:
        The number of loaded hints
    """
    loaded = 0
    with open(path, encoding="utf-8") as f:
        for line in f:
            parts = line.split(None, 1)
            if parts and parts[0].startswith(COMMENT_MARK):
                continue
            if len(parts) != 2:
                logger.warning(f"Invalid property in {path} is omitted: {line!r}")
                continue
            try:
                weight = float(parts[0])
            except ValueError:
                logger.warning(f"Invalid weight in {path} is omitted: {line!r}")
                continue
            weights[parts[1].strip()] = weight
            loaded += 1
    return loaded
