"""Progress reporting with a fallback for non-interactive environments."""

import logging
import os
import sys
import time
from contextlib import contextmanager

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

logger = logging.getLogger(__name__)


def is_interactive_environment() -> bool:
    """Check if we're running in an interactive environment where rich progress should be displayed."""
    # Check for non-interactive environments first
    if os.getenv("CI") or os.getenv("GITHUB_ACTIONS") or os.getenv("GITLAB_CI"):
        return False

    # Check if we're in a Docker container
    if os.path.exists("/.dockerenv"):
        return False

    return sys.stdout.isatty()


class SimpleProgressTracker:
    """Logs the progress every 10% or every 30 seconds."""

    def __init__(self, total: int | None):
        self.total = total
        self.completed = 0
        self.start_time = time.time()
        self.last_log_time = self.start_time
        self.last_percentage = 0.0

    def advance(self, task_id=None) -> None:
        """Advance progress counter. Task parameter accepted for compatibility."""
        self.completed += 1
        if not self.total:
            return

        current_time = time.time()
        percentage = (self.completed / self.total) * 100
        if (percentage - self.last_percentage >= 10) or (
            current_time - self.last_log_time >= 30
        ):
            elapsed = current_time - self.start_time
            remaining = (elapsed / percentage) * (100 - percentage)
            logger.info(
                f"Progress: {self.completed}/{self.total} "
                f"({percentage:.1f}%) - {elapsed:.1f}s elapsed, "
                f"~{remaining:.1f}s remaining"
            )
            self.last_log_time = current_time
            self.last_percentage = percentage


@contextmanager
def progress_tracker(description: str, total: int | None, use_rich: bool = True):
    """Context manager yielding (progress, task) with the advance() interface."""
    if use_rich and is_interactive_environment():
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=20),
            MofNCompleteColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            TimeRemainingColumn(),
        ) as progress:
            task = progress.add_task(description, total=total)
            yield progress, task
        return

    logger.info(f"Starting: {description} (total: {total or 'unknown'})")
    tracker = SimpleProgressTracker(total)
    try:
        yield tracker, None
    finally:
        elapsed = time.time() - tracker.start_time
        logger.info(
            f"Completed: {description} - {tracker.completed} items "
            f"processed in {elapsed:.1f}s"
        )
