"""
Property significance inference.

Frequency based property weights, heavy-tail detection deciding whether the
supervision is worthwhile, interactive or supervised hints and their
quantized persistence.
"""

from .elicitation import Back, Mark, Quit, Skip, ask_hints, parse_response
from .hints import (
    hints_filename,
    load_hints,
    omitted_hints,
    save_hints,
    update_file_extension,
)
from .inference import (
    EmptyDatasetError,
    SignificanceEngine,
    WeightLearner,
    default_weights,
    rank_properties,
    split_head,
)
from .models import HeadSplit, HintMode, HintSpec, PropertyOccurrence
from .quantize import round_weight, tolerance

__all__ = [
    "Back",
    "Mark",
    "Quit",
    "Skip",
    "ask_hints",
    "parse_response",
    "hints_filename",
    "load_hints",
    "omitted_hints",
    "save_hints",
    "update_file_extension",
    "EmptyDatasetError",
    "SignificanceEngine",
    "WeightLearner",
    "default_weights",
    "rank_properties",
    "split_head",
    "HeadSplit",
    "HintMode",
    "HintSpec",
    "PropertyOccurrence",
    "round_weight",
    "tolerance",
]
