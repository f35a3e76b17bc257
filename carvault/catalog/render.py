"""HTML fragments for the catalogue display regions."""

import math
from html import escape
from typing import Optional, Sequence

from .schemas import CATEGORIES, Statistics, Vehicle


EMPTY_PLACEHOLDER = "No vehicles found matching your criteria."
LOAD_ERROR = "⚠️ Error loading vehicles"


def _group_indian(digits: str) -> str:
    """Group an integer digit string the Indian way: 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_inr(value: Optional[float]) -> str:
    """Format an amount in en-IN style with up to three decimals.

    A missing or non-finite amount renders as ``NaN``.
    """
    if value is None or not math.isfinite(value):
        return "NaN"
    sign = "-" if value < 0 else ""
    whole, frac = f"{abs(value):.3f}".split(".")
    frac = frac.rstrip("0")
    text = _group_indian(whole) + (f".{frac}" if frac else "")
    if text == "0":
        sign = ""
    return f"{sign}{text}"


def _text(value: object) -> str:
    return escape("NaN" if value is None else str(value))


def render_card(vehicle: Vehicle) -> str:
    vid = escape(vehicle.id, quote=True)
    return (
        '<div class="car-card">'
        '<div class="card-content">'
        f'<span class="chassis-no">VIN: {_text(vehicle.chassis)}</span>'
        f"<h3>{_text(vehicle.make)} {_text(vehicle.model)}</h3>"
        f"<p>{_text(vehicle.year)} | {_text(vehicle.category)}</p>"
        f'<p class="price">₹{format_inr(vehicle.price)}</p>'
        '<div class="card-actions">'
        f'<button class="btn-edit" data-action="open_edit" data-vehicle-id="{vid}">EDIT</button>'
        f'<button class="btn-remove" data-action="delete" data-vehicle-id="{vid}">REMOVE</button>'
        "</div>"
        "</div>"
        "</div>"
    )


def render_grid(vehicles: Sequence[Vehicle]) -> str:
    if not vehicles:
        return f'<p class="empty">{EMPTY_PLACEHOLDER}</p>'
    return "".join(render_card(v) for v in vehicles)


def render_statistics(stats: Statistics) -> str:
    rows = [
        f'<div class="stat"><span id="totalCars">{stats.total}</span> Total</div>',
        f'<div class="stat"><span id="totalValue">₹{format_inr(stats.total_value)}</span> Value</div>',
    ]
    for name in CATEGORIES:
        rows.append(
            f'<div class="stat"><span id="{name.lower()}Count">'
            f"{stats.by_category.get(name, 0)}</span> {name}</div>"
        )
    return "".join(rows)


def render_load_error() -> str:
    return f'<p class="error">{LOAD_ERROR}</p>'
