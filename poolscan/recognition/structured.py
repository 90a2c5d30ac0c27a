"""
Structured Grid Responses

Converts a structured-extraction backend payload straight into a
ReconstructedGrid, bypassing the layout engine.
"""

import json
import logging
from typing import Any, Dict, Optional

import numpy as np

from ..layout import ReconstructedGrid, repair_sequence

logger = logging.getLogger(__name__)

GRID_SIZE = 10


def unwrap_proxy_body(payload: Any) -> Any:
    """
    Unwrap a {"statusCode": ..., "body": "<json>"} proxy envelope.

    Args:
        payload: Decoded JSON response

    Returns:
        The inner payload, or the payload itself if not wrapped
    """
    if isinstance(payload, dict) and isinstance(payload.get("body"), str):
        try:
            return json.loads(payload["body"])
        except json.JSONDecodeError:
            logger.debug("Proxy body is not JSON, using payload as-is")
    return payload


def _digits(values: Any) -> list:
    if not isinstance(values, list):
        return []
    out = []
    for v in values:
        try:
            out.append(int(v))
        except (TypeError, ValueError):
            out.append(None)
    return out


def _name_at(names: Any, row: int, col: int) -> str:
    if not isinstance(names, list) or row >= len(names):
        return ""
    row_values = names[row]
    if not isinstance(row_values, list) or col >= len(row_values):
        return ""
    value = row_values[col]
    return value.strip() if isinstance(value, str) else ""


def grid_from_structured_response(
    payload: Dict[str, Any],
    rng: Optional[np.random.Generator] = None
) -> ReconstructedGrid:
    """
    Build a grid from a structured backend response.

    Expected shape:
        {"homeNumbers": [10 ints, left to right],
         "awayNumbers": [10 ints, top to bottom],
         "names": [[10 strings] x 10]}

    Digit arrays that are not valid permutations are replaced with the
    repair filler and flagged; missing names become "".

    Args:
        payload: Decoded (and unwrapped) response
        rng: Random generator for the repair filler

    Returns:
        ReconstructedGrid with strategy "structured"
    """
    if not isinstance(payload, dict):
        payload = {}
    rng = rng if rng is not None else np.random.default_rng()

    column_digits, columns_repaired = repair_sequence(
        _digits(payload.get("homeNumbers")), rng, label="column"
    )
    row_digits, rows_repaired = repair_sequence(
        _digits(payload.get("awayNumbers")), rng, label="row"
    )

    names = payload.get("names")
    cells = tuple(
        tuple(_name_at(names, r, c) for c in range(GRID_SIZE))
        for r in range(GRID_SIZE)
    )

    return ReconstructedGrid(
        column_digits=column_digits,
        row_digits=row_digits,
        cells=cells,
        columns_repaired=columns_repaired,
        rows_repaired=rows_repaired,
        strategy="structured",
        confidence=1.0,
    )
