"""
Interactive elicitation of the property significance.

The operator evaluates each property with a mark in the range 1 .. g (or a
probability directly when g is 0). Control inputs are parsed into tagged
outcomes rather than compared as strings along the evaluation loop.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import click

from statix import EXT_HINTS
from statix.settings import get_default_marks

from .hints import save_hints, update_file_extension
from .quantize import round_weight

logger = logging.getLogger(__name__)

QUIT_TOKEN = "q"
BACK_TOKEN = "p"

PromptFn = Callable[[str], str]
EchoFn = Callable[[str], None]


@dataclass(frozen=True)
class Skip:
    """Keep the default weight of the property."""


@dataclass(frozen=True)
class Quit:
    """Stop the evaluation early."""


@dataclass(frozen=True)
class Back:
    """Re-evaluate the previous property."""


@dataclass(frozen=True)
class Mark:
    """Evaluated property weight."""

    weight: float


Outcome = Skip | Quit | Back | Mark


def _console_prompt(text: str) -> str:
    return click.prompt(text, default="", show_default=False, prompt_suffix=" ")


def parse_response(text: str, granularity: int) -> Outcome:
    """Parse the operator response for a single property.

    Args:
        text: Raw operator input
        granularity: Number of marks, 0 if probabilities are input directly

    Returns:
        Tagged outcome of the response

    Raises:
        ValueError: If the mark or probability is invalid or out of range
    """
    text = text.strip()
    if not text:
        return Skip()
    if text == QUIT_TOKEN:
        return Quit()
    if text == BACK_TOKEN:
        return Back()

    if granularity == 0:
        weight = float(text)
        if not 0 <= weight <= 1:
            raise ValueError(f"The probability is out of the range [0, 1]: {weight}")
        return Mark(weight)

    mark = int(text)
    if not 1 <= mark <= granularity:
        raise ValueError(
            f"The property significance is out of the range 1 .. {granularity}: {mark}"
        )
    # The user skips the evaluation if the property is absolutely insignificant,
    # so the rounded weight is always applied
    return Mark(round_weight((mark - 1) / (granularity - 1), granularity))


def ask_granularity(prompt: PromptFn, default: int | None = None) -> int:
    """Ask the operator for the evaluation granularity (number of marks)."""
    if default is None:
        default = get_default_marks()
    text = prompt(
        "Input evaluation range for each property, natural number >= 2 "
        f"or 0 to input probabilities [{default}]:"
    ).strip()
    granularity = int(text) if text else default
    if granularity != 0 and granularity < 2:
        raise ValueError(f"The number of marks is too small: {granularity}")
    return granularity


def ask_hints(
    weights: dict[str, float],
    properties: list[str],
    hints_base: str | Path,
    granularity: int | None = None,
    prompt: PromptFn | None = None,
    echo: EchoFn | None = None,
) -> int:
    """Ask the property hints in the interactive mode.

    Args:
        weights: Property weights to be updated with the evaluated hints
        properties: Properties to be evaluated, in the presentation order
        hints_base: File name the hints file name is derived from
        granularity: Number of marks, asked from the operator if None
        prompt: Input function, console prompt by default
        echo: Output function, console echo by default

    Returns:
        The number of evaluated properties
    """
    prompt = prompt or _console_prompt
    echo = echo or click.echo
    if granularity is None:
        granularity = ask_granularity(prompt)
    elif granularity != 0 and granularity < 2:
        raise ValueError(f"The number of marks is too small: {granularity}")

    if granularity:
        scale = f"in the range 1 .. {granularity}"
    else:
        scale = "as probabilities in [0, 1]"
    echo(
        f"Input significance of the properties {scale} for at most "
        f"{len(properties)} properties. Leave the input empty to skip the property "
        "evaluation or in case the property is absolutely insignificant. "
        f"Use '{QUIT_TOKEN}' to quit early, '{BACK_TOKEN}' to update the previous evaluation"
    )

    evaluated: dict[str, float] = {}
    skips = 0
    i = 0
    while i < len(properties):
        prop = properties[i]
        try:
            outcome = parse_response(prompt(f"{prop}:"), granularity)
        except ValueError as e:
            logger.warning(f"{e}. Correct the specified value.")
            continue

        match outcome:
            case Quit():
                break
            case Back():
                i = max(i - 1, 0)
                continue
            case Skip():
                evaluated.pop(prop, None)
                skips += 1
            case Mark(weight=weight):
                evaluated[prop] = weight
        i += 1

    echo(
        f"Supervision completed: {len(evaluated)} brief hints are specified, "
        f"{skips} skipped for {len(properties)} properties"
    )

    hints_name = update_file_extension(hints_base, f"_{granularity}{EXT_HINTS}")
    # The marks are already snapped onto the grid by parse_response
    save_hints(evaluated, granularity, hints_name, on_grid=True)
    weights.update(evaluated)
    return len(evaluated)
