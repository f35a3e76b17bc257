"""
Filter, search and aggregation over the in-memory vehicle sequence.

These are plain functions with no state: the controller owns the
sequence and the current filter/search values and calls in here each
time one of them changes.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .schemas import ALL, Statistics, Vehicle


def _lower(s: Optional[str]) -> str:
    return (s or "").lower()


def matches_search(vehicle: Vehicle, term: str) -> bool:
    """True when ``term`` occurs in make, model or chassis, ignoring case."""
    needle = _lower(term)
    return (
        needle in _lower(vehicle.make)
        or needle in _lower(vehicle.model)
        or needle in _lower(vehicle.chassis)
    )


def filter_vehicles(
    vehicles: Sequence[Vehicle],
    current_filter: str = ALL,
    search_term: str = "",
) -> List[Vehicle]:
    """Return the display subset for a category filter and a search term.

    Parameters
    ----------
    vehicles : Sequence[Vehicle]
        The full in-memory sequence, in fetch order.
    current_filter : str
        ``"All"`` or a category name. Any other value is compared as-is
        and therefore matches nothing.
    search_term : str
        Free text. An empty string disables the search constraint; the
        term is not trimmed.

    Returns
    -------
    List[Vehicle]
        Matching vehicles in source order. No sorting is applied.
    """
    items = list(vehicles)

    if current_filter != ALL:
        items = [v for v in items if v.category == current_filter]

    if search_term:
        items = [v for v in items if matches_search(v, search_term)]

    return items


def compute_statistics(vehicles: Iterable[Vehicle]) -> Statistics:
    """Count, total value and per-category counts over the full sequence.

    Missing or non-numeric prices count as zero.
    """
    stats = Statistics()
    for v in vehicles:
        stats.total += 1
        stats.total_value += v.price if v.price is not None else 0.0
        if v.category in stats.by_category:
            stats.by_category[v.category] += 1
    return stats


def count_label(count: int) -> str:
    return f"{count} VEHICLE{'' if count == 1 else 'S'} AVAILABLE"
