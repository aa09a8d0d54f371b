"""Utility functions for the EOS rules engine."""

from eos.utils.lattice import (
    DIRECTIONS,
    Cell,
    InvalidCoordinate,
    format_cell,
    is_valid,
    parse,
    step,
)

__all__ = [
    "DIRECTIONS",
    "Cell",
    "InvalidCoordinate",
    "format_cell",
    "is_valid",
    "parse",
    "step",
]
