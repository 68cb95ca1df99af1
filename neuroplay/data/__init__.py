"""Dataset generators, truth tables and the dataset registry."""

from .gates import truth_table
from .generators import (
    checkerboard,
    checkerboard_label,
    circle,
    gaussian,
    spiral,
    xor,
    xor_label,
)
from .registry import (
    DatasetSpec,
    DataSpec,
    available_datasets,
    get_dataset,
    register_dataset,
)
from .utils import shuffled, train_test_split

__all__ = [
    "DataSpec",
    "DatasetSpec",
    "available_datasets",
    "checkerboard",
    "checkerboard_label",
    "circle",
    "gaussian",
    "get_dataset",
    "register_dataset",
    "shuffled",
    "spiral",
    "train_test_split",
    "truth_table",
    "xor",
    "xor_label",
]
