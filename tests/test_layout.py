"""
Tests for the layout building blocks: fragments, rows, header, columns, repair.

Usage:
    pytest tests/test_layout.py
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from poolscan.layout import (
    BoundingBox,
    CellId,
    Digit,
    LayoutConfig,
    LayoutContext,
    LayoutFragment,
    Name,
    TextFragment,
    classify,
    cluster_rows,
    column_for,
    even_bounds,
    header_bounds,
    is_permutation,
    repair_sequence,
    row_id_cutoff,
)
from sheet_factory import COL_CENTERS, frag, header_row


def _classified(fragments):
    return [LayoutFragment.from_fragment(f) for f in fragments]


# ---------------------------
# Fragment model
# ---------------------------


def test_classify_lone_digits_are_axis_digits():
    assert classify("7") == Digit(7)
    assert classify(" 0 ") == Digit(0)
    assert classify("1") == Digit(1)


def test_classify_box_numbers():
    assert classify("57") == CellId(57)
    assert classify("100") == CellId(100)
    assert classify("07") == CellId(7)
    assert classify("10\n") == CellId(10)


def test_classify_names_and_out_of_range_integers():
    assert classify("Mike") == Name("Mike")
    assert classify("  Capace ") == Name("Capace")
    assert classify("101") == Name("101")
    assert classify("00") == Name("00")
    assert classify("-5") == Name("-5")
    assert classify("") == Name("")


def test_fragment_row_position_flips_vertical_axis():
    fragment = TextFragment("x", BoundingBox(0.1, 0.8, 0.2, 0.9))
    assert fragment.center_y == pytest.approx(0.85)
    assert fragment.row_position == pytest.approx(0.15)
    assert fragment.center_x == pytest.approx(0.15)


def test_fragment_from_dict_shapes():
    corners = TextFragment.from_dict(
        {"text": "Bob", "x_min": 0.1, "y_min": 0.2, "x_max": 0.3, "y_max": 0.25, "confidence": 0.5}
    )
    nested = TextFragment.from_dict(
        {"text": "Bob", "box": {"x_min": 0.1, "y_min": 0.2, "x_max": 0.3, "y_max": 0.25}, "confidence": 0.5}
    )
    block = TextFragment.from_dict(
        {"text": "Bob", "x": 0.1, "y": 0.2, "width": 0.2, "height": 0.05, "confidence": 0.5}
    )
    assert corners == nested
    assert block.box.x_max == pytest.approx(0.3)
    assert block.box.y_max == pytest.approx(0.25)
    assert block.confidence == 0.5


def test_fragment_from_dict_round_trip_and_missing_box():
    fragment = frag("Ann", 0.4, 0.3)
    assert TextFragment.from_dict(fragment.to_dict()) == fragment
    with pytest.raises(ValueError):
        TextFragment.from_dict({"text": "no box"})


def test_layout_fragment_flags():
    digit, cell_id, name, blank = _classified(
        [frag("4", 0.1, 0.1), frag("42", 0.2, 0.1), frag("Zed", 0.3, 0.1), frag("  ", 0.4, 0.1)]
    )
    assert digit.is_digit and digit.digit == 4
    assert cell_id.is_cell_id and cell_id.digit is None
    assert name.is_name and name.text == "Zed"
    assert not blank.is_name


# ---------------------------
# Row clustering
# ---------------------------


def test_rows_split_on_vertical_gap_and_sort_left_to_right():
    fragments = _classified([
        frag("b", 0.6, 0.10),
        frag("a", 0.2, 0.11),
        frag("c", 0.4, 0.30),
    ])
    rows = cluster_rows(fragments, tolerance=0.04)
    assert [[f.text for f in row] for row in rows] == [["a", "b"], ["c"]]


def test_rows_follow_gradual_drift():
    # Each step is under tolerance even though the whole span is not
    fragments = _classified([frag(str(i), 0.1 * i, 0.10 + 0.03 * i, w=0.02) for i in range(4)])
    rows = cluster_rows(fragments, tolerance=0.04)
    assert len(rows) == 1
    assert len(rows[0]) == 4


def test_rows_ignore_input_order():
    fragments = _classified([frag(t, x, y) for t, x, y in [
        ("a", 0.1, 0.1), ("b", 0.5, 0.1), ("c", 0.3, 0.5), ("d", 0.7, 0.52), ("e", 0.9, 0.9),
    ]])
    forward = cluster_rows(fragments, 0.04)
    backward = cluster_rows(list(reversed(fragments)), 0.04)
    assert forward == backward
    assert [len(r) for r in forward] == [2, 2, 1]


def test_rows_outlier_and_empty():
    fragments = _classified([frag("a", 0.1, 0.1), frag("b", 0.5, 0.1), frag("far", 0.5, 0.9)])
    rows = cluster_rows(fragments, 0.04)
    assert len(rows[-1]) == 1
    assert cluster_rows([], 0.04) == []


# ---------------------------
# Header locator
# ---------------------------


def test_header_rejects_row_with_cell_identifier():
    digits = list(range(10))
    contaminated = header_row(digits) + [frag("57", 0.5, 0.05, w=0.02)]
    context = LayoutContext.from_fragments(contaminated + [frag("Ann", 0.3, 0.3)])
    assert context.header is None

    context = LayoutContext.from_fragments(header_row(digits) + [frag("Ann", 0.3, 0.3)])
    assert context.header is not None
    assert context.header.row_index == 0
    assert context.header.digits == digits
    assert context.header.strict


def test_header_prefers_upper_region_over_cleaner_row():
    upper = header_row([9, 8, 7, 6, 5, 4, 3, 2, 1, 0], y_top=0.10) + [
        frag("POOL", 0.5, 0.11), frag("Title", 0.8, 0.11),
    ]
    lower = header_row(list(range(10)), y_top=0.60)
    context = LayoutContext.from_fragments(lower + upper)
    assert context.header.digits == [9, 8, 7, 6, 5, 4, 3, 2, 1, 0]


def test_header_prefers_fewer_fragments_within_region():
    noisy = header_row(list(range(10)), y_top=0.05) + [frag("X", 0.5, 0.05), frag("Y", 0.6, 0.05)]
    clean = header_row([5, 6, 7, 8, 9, 0, 1, 2, 3, 4], y_top=0.25)
    context = LayoutContext.from_fragments(noisy + clean)
    assert context.header.row_index == 1
    assert context.header.digits == [5, 6, 7, 8, 9, 0, 1, 2, 3, 4]


def test_header_relaxed_pass_accepts_partial_row():
    partial = header_row([3, 1, 4, 0, 5, 9, 2, 6], centers=COL_CENTERS[:8])
    context = LayoutContext.from_fragments(partial + [frag("Ann", 0.3, 0.3)])
    header = context.header
    assert header is not None
    assert not header.strict
    assert header.digits == [3, 1, 4, 0, 5, 9, 2, 6]


def test_header_relaxed_pass_truncates_to_ten():
    centers = [0.1 + 0.07 * i for i in range(12)]
    wide = [frag(str(i % 10), cx, 0.05, w=0.02) for i, cx in enumerate(centers)]
    context = LayoutContext.from_fragments(wide)
    assert not context.header.strict
    assert context.header.digits == [0, 1, 2, 3, 4, 5, 6, 7, 8, 9]


def test_header_none_when_too_few_digits():
    context = LayoutContext.from_fragments(header_row([1, 2, 3], centers=COL_CENTERS[:3]))
    assert context.header is None


# ---------------------------
# Column binning
# ---------------------------


def test_header_bounds_from_centers():
    bounds = header_bounds(COL_CENTERS, margin=0.08)
    assert len(bounds) == 11
    assert bounds[0] == pytest.approx(0.07)
    assert bounds[10] == pytest.approx(0.995)
    assert bounds[1] == pytest.approx((COL_CENTERS[0] + COL_CENTERS[1]) / 2)
    assert all(b2 > b1 for b1, b2 in zip(bounds, bounds[1:]))
    assert header_bounds(list(reversed(COL_CENTERS))) == bounds


def test_header_bounds_clamped_to_page():
    centers = [0.03 + 0.105 * i for i in range(10)]
    bounds = header_bounds(centers, margin=0.08)
    assert bounds[0] == 0.0
    assert bounds[10] == 1.0


def test_header_bounds_degenerate_centers_stay_ascending():
    bounds = header_bounds([0.5] * 10, margin=0.08)
    assert all(b2 > b1 for b1, b2 in zip(bounds, bounds[1:]))
    assert bounds[0] == pytest.approx(0.42)
    assert bounds[10] == pytest.approx(0.58)


def test_partial_header_bounds_span_padded_range():
    bounds = header_bounds(COL_CENTERS[:7], margin=0.08)
    assert bounds[0] == pytest.approx(0.07)
    assert bounds[10] == pytest.approx(COL_CENTERS[6] + 0.08)
    assert np.allclose(np.diff(bounds), np.diff(bounds)[0])


def test_even_bounds_cover_unit_interval():
    bounds = even_bounds()
    columns = [column_for(float(x), bounds) for x in np.linspace(0.0, 1.0, 1001)]
    assert all(c is not None and 0 <= c <= 9 for c in columns)
    assert columns == sorted(columns)
    assert column_for(0.0, bounds) == 0
    assert column_for(0.55, bounds) == 5
    assert column_for(1.0, bounds) == 9


def test_column_lookup_against_header_bounds():
    bounds = header_bounds(COL_CENTERS)
    for c, cx in enumerate(COL_CENTERS):
        assert column_for(cx, bounds) == c
    assert column_for(0.03, bounds) is None
    assert column_for(0.999, bounds) == 9
    assert column_for(1.5, bounds) == 9


def test_row_id_cutoff():
    assert row_id_cutoff(0.15) == pytest.approx(0.06)
    assert row_id_cutoff(0.07) == pytest.approx(0.04)
    assert row_id_cutoff(None) == pytest.approx(0.06)
    assert row_id_cutoff(None, zone=0.1) == pytest.approx(0.1)


# ---------------------------
# Sequence repair
# ---------------------------


def test_repair_keeps_valid_permutation():
    digits, repaired = repair_sequence([9, 6, 4, 1, 5, 7, 8, 2, 3, 0])
    assert digits == (9, 6, 4, 1, 5, 7, 8, 2, 3, 0)
    assert not repaired


@pytest.mark.parametrize("values", [
    [],
    [1, 2, 3],
    [0, 1, 2, 3, 4, 5, 6, 7, 8, 8],
    [0, 1, 2, None, 4, 5, 6, 7, 8, 9],
    list(range(11)),
])
def test_repair_replaces_bad_sequences(values):
    digits, repaired = repair_sequence(values)
    assert repaired
    assert is_permutation(digits)


def test_repair_filler_is_seedable():
    first, _ = repair_sequence([], np.random.default_rng(7))
    second, _ = repair_sequence([], np.random.default_rng(7))
    assert first == second


def test_config_from_settings_ignores_unrelated_keys():
    assert LayoutConfig().row_tolerance == 0.04
    config = LayoutConfig.from_settings({"row_tolerance": 0.05, "grid_backend_url": "x"})
    assert config.row_tolerance == 0.05
    assert config.column_margin == 0.08
