"""Tests for error/warning aggregation."""

from __future__ import annotations

from locpopup.core.aggregator import count_diagnostics
from locpopup.host.types import AggregateCounts, Category
from tests.helpers import entry


def test_empty_list_counts_nothing() -> None:
    assert count_diagnostics([]) == AggregateCounts(errors=0, warnings=0)


def test_counts_cover_every_line_regardless_of_cursor() -> None:
    entries = [
        entry(1, 1, "E"),
        entry(40, 2, "W"),
        entry(40, 9, "E"),
        entry(7, 3, "I"),
        entry(8, 1, ""),
    ]

    counts = count_diagnostics(entries)

    assert counts == AggregateCounts(errors=2, warnings=1)


def test_counts_plus_other_categories_equal_total() -> None:
    entries = [entry(n, n % 5, code) for n, code in enumerate("EWEWINEEW")]

    counts = count_diagnostics(entries)
    others = sum(1 for item in entries if item.category is Category.OTHER)

    assert counts.errors + counts.warnings + others == len(entries)


def test_lowercase_codes_are_not_counted() -> None:
    assert count_diagnostics([entry(1, 1, "e"), entry(1, 2, "w")]) == AggregateCounts()
