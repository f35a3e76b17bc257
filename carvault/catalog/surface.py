"""
Presentation surface for the catalogue.

``PageSurface`` stands in for the browser page: it holds the markup of
each display region, queues user notices, answers confirmation prompts,
tracks the add form and the edit surface, and keeps the event handlers
the controller registers for the card buttons. ``render_page()`` builds
the full HTML document from the current region contents.
"""

import inspect
import logging
from html import escape
from typing import Any, Callable, Dict, List, Optional

from .schemas import ALL, CATEGORIES, EditForm


logger = logging.getLogger(__name__)

REGIONS = ("stats", "grid", "count")

# Oldest entries are dropped once a queue reaches this length
MAX_PENDING = 50


class PageSurface:
    def __init__(self, confirm_answer: bool = True) -> None:
        self.regions: Dict[str, str] = {name: "" for name in REGIONS}
        self.notices: List[str] = []
        self.prompts: List[str] = []
        self.confirm_answer = confirm_answer
        self.edit_form: Optional[EditForm] = None
        self.add_form_resets = 0
        self._handlers: Dict[str, Callable[..., Any]] = {}

    # -- regions ----------------------------------------------------------

    def write(self, region: str, markup: str) -> None:
        if region not in self.regions:
            raise KeyError(f"Unknown display region: {region}")
        self.regions[region] = markup

    # -- user interaction -------------------------------------------------

    def notify(self, message: str) -> None:
        logger.info("Notice: %s", message)
        self.notices.append(message)
        del self.notices[:-MAX_PENDING]

    def drain_notices(self) -> List[str]:
        pending, self.notices = self.notices, []
        return pending

    def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        del self.prompts[:-MAX_PENDING]
        return self.confirm_answer

    def reset_add_form(self) -> None:
        self.add_form_resets += 1

    @property
    def edit_open(self) -> bool:
        return self.edit_form is not None

    def open_edit(self, form: EditForm) -> None:
        self.edit_form = form

    def close_edit(self) -> None:
        self.edit_form = None

    # -- event handlers ---------------------------------------------------

    def bind(self, name: str, handler: Callable[..., Any]) -> None:
        self._handlers[name] = handler

    @property
    def actions(self) -> List[str]:
        return sorted(self._handlers)

    async def trigger(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Invoke the handler bound to ``name``, awaiting it if needed."""
        try:
            handler = self._handlers[name]
        except KeyError:
            raise KeyError(f"No handler bound for action: {name}") from None
        result = handler(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    # -- page -------------------------------------------------------------

    def _edit_markup(self) -> str:
        form = self.edit_form
        if form is None:
            return '<div id="editModal" hidden></div>'
        names = CATEGORIES if form.category in CATEGORIES else [form.category] + CATEGORIES
        options = "".join(
            f'<option{" selected" if name == form.category else ""}>{escape(name)}</option>'
            for name in names
        )
        return (
            '<div id="editModal">'
            f'<form id="editForm" data-vehicle-id="{escape(form.vehicle_id, quote=True)}">'
            f'<input name="make" value="{escape(form.make, quote=True)}">'
            f'<input name="model" value="{escape(form.model, quote=True)}">'
            f'<input name="chassis" value="{escape(form.chassis, quote=True)}" readonly>'
            f'<select name="category">{options}</select>'
            f'<input name="year" value="{escape(form.year, quote=True)}">'
            f'<input name="price" value="{escape(form.price, quote=True)}">'
            "</form>"
            '<button data-action="close_edit">×</button>'
            "</div>"
        )

    def render_page(self, title: str, current_filter: str = ALL, search_term: str = "") -> str:
        buttons = "".join(
            f'<button class="filter-btn{" active" if name == current_filter else ""}" '
            f'data-filter="{name}">{name}</button>'
            for name in [ALL] + CATEGORIES
        )
        options = "".join(f"<option>{name}</option>" for name in CATEGORIES)
        return (
            "<!DOCTYPE html>"
            f"<html><head><meta charset=\"utf-8\"><title>{escape(title)}</title></head><body>"
            f'<section id="stats">{self.regions["stats"]}</section>'
            '<form id="carForm">'
            '<input name="make"><input name="model"><input name="chassis">'
            f'<select name="category">{options}</select>'
            '<input name="year"><input name="price">'
            "</form>"
            f'<nav id="filters">{buttons}</nav>'
            f'<input id="searchInput" value="{escape(search_term, quote=True)}">'
            f'<p id="carCount">{self.regions["count"]}</p>'
            f'<section id="carGrid">{self.regions["grid"]}</section>'
            f"{self._edit_markup()}"
            "</body></html>"
        )
