"""
Inference of the property significance weights.

The more seldom the property, the higher its weight. The automatically
estimated weights can be refined with hints: loaded from a file, elicited
from the operator or learned from a labeled dataset. Supervision is
requested only for the heavy head of the properties and only when their
occurrence distribution is heavy tailed.
"""

import logging
import math
from pathlib import Path
from typing import Protocol

from .elicitation import PromptFn, ask_hints
from .hints import hints_filename, load_hints, omitted_hints, save_hints
from .models import HeadSplit, HintMode, HintSpec, PropertyOccurrence

logger = logging.getLogger(__name__)

# 0.618 = 1/rgolden; Range: 0.6 - 0.9; 0.786 = sqrt(1/rgolden)
SIGNIFICANCE_POWER = 0.786


class EmptyDatasetError(Exception):
    """The dataset does not have any properties to be processed."""


class WeightLearner(Protocol):
    """Supervised learner of the property weights from a labeled dataset."""

    def load_gt_data(
        self, path: str | Path, target_properties: dict[str, int], dirty: bool
    ) -> dict[str, float]: ...


def default_weights(occurrences: dict[str, int]) -> dict[str, float]:
    """Frequency based property weights: sqrt(1/occurrences)."""
    return {prop: math.sqrt(1.0 / ocrs) for prop, ocrs in occurrences.items()}


def rank_properties(occurrences: dict[str, int]) -> list[PropertyOccurrence]:
    """Properties ordered by the descending number of occurrences."""
    props = [
        PropertyOccurrence(property=prop, occurrences=ocrs)
        for prop, ocrs in occurrences.items()
    ]
    props.sort(key=lambda p: p.occurrences, reverse=True)
    return props


def _significance(occurrences: int) -> int:
    return round(occurrences**SIGNIFICANCE_POWER)


def split_head(props: list[PropertyOccurrence]) -> HeadSplit:
    """Evaluate the head of the ranked properties balancing the tail.

    The tail initially spans the properties following the median. The head is
    grown while its significance is below the tail one and the tail is grown
    backward while its significance is below the head one, until the head
    reaches sqrt(size) + 1 items or meets the tail. Items equal to the last
    head item are appended to the head, so the split does not depend on the
    order of the equally occurring properties.

    The head spans ``props[:head_size]`` and the tail ``props[tail_start:]``.
    The item at the tail pointer is not a tail item yet, so the head may take
    it and still ends at ``tail_start`` at most. Only the tie extension can
    move the head past the tail start.

    Args:
        props: Properties ordered by the descending occurrences

    Returns:
        Head/tail split of the properties
    """
    size = len(props)
    imed = size // 2
    tail_sum = sum(_significance(p.occurrences) for p in props[imed:])
    head_max = round(math.sqrt(size)) + 1
    head_end = 0  # End index of the head
    head_sum = 0
    itail = imed - 1

    while head_end < head_max and head_end < itail:
        moved = False
        while head_sum < tail_sum and head_end < head_max and head_end <= itail:
            head_sum += _significance(props[head_end].occurrences)
            head_end += 1
            moved = True
        while tail_sum < head_sum and itail > head_end:
            tail_sum += _significance(props[itail].occurrences)
            itail -= 1
            moved = True
        if not moved:
            break

    while 0 < head_end < size and (
        props[head_end].occurrences == props[head_end - 1].occurrences
    ):
        head_end += 1

    return HeadSplit(
        head_size=head_end,
        tail_start=itail + 1,
        head_significance=head_sum,
        tail_significance=tail_sum,
        head_max=head_max,
    )


class SignificanceEngine:
    """Infers property weights from their occurrences and optional hints.

    The working weights are passed explicitly through the inference stages
    and returned to the caller.
    """

    def __init__(
        self,
        learner: WeightLearner | None = None,
        prompt: PromptFn | None = None,
        dirty: bool = False,
    ):
        """Initialize the engine.

        Args:
            learner: Supervised learner of the weights, required for the
                supervised hints
            prompt: Operator input function for the interactive hints
            dirty: The labeled data might contain duplicated triples
        """
        self.learner = learner
        self.prompt = prompt
        self.dirty = dirty

    def infer(
        self,
        occurrences: dict[str, int],
        hints: str | None = None,
        dataset: str | Path | None = None,
    ) -> dict[str, float]:
        """Infer the property weights.

        Args:
            occurrences: Property occurrences in the dataset
            hints: Hints specifier, see HintSpec
            dataset: Dataset file name, used to derive the hints file names
                and as the labeled dataset in the supervised mode

        Returns:
            Property weights

        Raises:
            EmptyDatasetError: If there are no properties at all
        """
        if not occurrences:
            raise EmptyDatasetError(
                f"There are not any properties to be processed in the dataset: {dataset}"
            )

        weights = default_weights(occurrences)
        if hints is None:
            return weights

        spec = HintSpec.parse(hints)
        if spec.mode is HintMode.FILE:
            nhints = load_hints(weights, spec.path)
        else:
            nhints = self._supervise(weights, occurrences, spec, dataset)
        logger.info(f"The number of applied brief hints: {nhints}")
        return weights

    def _supervise(
        self,
        weights: dict[str, float],
        occurrences: dict[str, int],
        spec: HintSpec,
        dataset: str | Path | None,
    ) -> int:
        """Apply the supervised hints to the head properties if worthwhile."""
        if dataset is None:
            raise ValueError("The dataset is required to derive the hints file name")

        props = rank_properties(occurrences)
        split = split_head(props)
        logger.info(
            f"Head size: {split.head_size}, tail start: {split.tail_start}, "
            f"properties: {len(props)}; head significance: {split.head_significance}, "
            f"tail significance: {split.tail_significance}; head max: {split.head_max}"
        )
        head = props[: split.head_size]
        logger.debug(
            "Head properties weights: "
            + " ".join(f"{math.sqrt(1.0 / p.occurrences):.4g}" for p in head)
        )

        if not split.heavy_tailed:
            logger.warning(
                "The brief hints are omitted because the property weights "
                f"distribution is not heavy tailed in {dataset}"
            )
            return 0

        if spec.mode is HintMode.INTERACTIVE:
            return ask_hints(
                weights,
                [p.property for p in head],
                hints_filename(dataset),
                prompt=self.prompt,
            )

        if self.learner is None:
            raise ValueError("The supervised hints require a weight learner")
        targets = {p.property: p.occurrences for p in head}
        learned = self.learner.load_gt_data(dataset, targets, self.dirty)
        # Too small learned weights are not persisted, so they keep the defaults
        omitted = omitted_hints(learned, spec.granularity)
        save_hints(learned, spec.granularity, hints_filename(dataset, spec.granularity))
        for prop in omitted:
            del learned[prop]
        weights.update(learned)
        return len(learned)
