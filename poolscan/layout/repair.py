"""
Sequence Repair Module - Guarantees axis digits form a permutation of 0-9.
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

AXIS_DIGITS = frozenset(range(10))


def is_permutation(values: Sequence[Optional[int]]) -> bool:
    """True if values are exactly the 10 distinct digits 0-9."""
    return len(values) == 10 and set(values) == AXIS_DIGITS


def repair_sequence(
    values: Sequence[Optional[int]],
    rng: Optional[np.random.Generator] = None,
    label: str = "axis"
) -> Tuple[Tuple[int, ...], bool]:
    """
    Return values unchanged if valid, else a shuffled 0-9 filler.

    Once recognition got the digits wrong no particular order is more
    correct than another, so the filler is random; the returned flag tells
    the caller the sequence must be confirmed by a person.

    Args:
        values: Recognized digits (may contain None, duplicates, or be short)
        rng: Random generator for the filler
        label: Axis name used in the log message

    Returns:
        Tuple of (digits, repaired)
    """
    if is_permutation(values):
        return tuple(int(v) for v in values), False

    rng = rng if rng is not None else np.random.default_rng()
    filler = tuple(int(v) for v in rng.permutation(10))
    logger.warning(f"Repaired {label} digits {list(values)} -> {list(filler)}")
    return filler, True
