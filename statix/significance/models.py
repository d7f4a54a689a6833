"""
Data models for property significance inference.

This module defines the core data structures of the significance
inference:
- PropertyOccurrence: Property with its total number of occurrences
- HintMode / HintSpec: Parsed hints specifier selecting the hints source
- HeadSplit: Outcome of the heavy-tail detection
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PropertyOccurrence(BaseModel):
    """Property with the total number of its occurrences in the dataset."""

    property: str = Field(min_length=1)
    occurrences: int = Field(gt=0)

    model_config = ConfigDict(frozen=True)


class HintMode(str, Enum):
    """Source of the property weight hints."""

    FILE = "file"  # Load hints from the existing file
    INTERACTIVE = "interactive"  # Ask the operator for the head properties
    SUPERVISED = "supervised"  # Learn the head properties from labeled data


@dataclass(frozen=True)
class HintSpec:
    """Parsed hints specifier.

    Specifier forms:
    - ``<path>``: load hints from the file
    - ``--``: interactive evaluation of the head properties
    - ``-``: supervised weights of the head properties without rounding
    - ``-<g>``: supervised weights rounded with granularity g
    """

    mode: HintMode
    path: str | None = None
    granularity: int = 0

    @classmethod
    def parse(cls, spec: str) -> "HintSpec":
        """Parse the hints specifier.

        Raises:
            ValueError: If the specifier is empty or the granularity is invalid
        """
        if not spec:
            raise ValueError("The hints specifier should not be empty")
        if not spec.startswith("-"):
            return cls(mode=HintMode.FILE, path=spec)
        if spec == "--":
            return cls(mode=HintMode.INTERACTIVE)

        marks = spec[1:]
        try:
            granularity = int(marks) if marks else 0
        except ValueError as e:
            raise ValueError(f"Invalid hints granularity: {marks!r}") from e
        if granularity != 0 and granularity < 2:
            raise ValueError(f"The number of marks is too small: {granularity}")
        return cls(mode=HintMode.SUPERVISED, granularity=granularity)


@dataclass(frozen=True)
class HeadSplit:
    """Head/tail split of the properties ranked by occurrences."""

    head_size: int  # Number of the leading (most frequent) properties
    tail_start: int  # Index of the first tail property
    head_significance: int
    tail_significance: int
    head_max: int  # Max head size to consider the distribution heavy tailed

    @property
    def heavy_tailed(self) -> bool:
        """Whether the head is small enough to be worth the supervision."""
        return 0 < self.head_size < self.head_max
