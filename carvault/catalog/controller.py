"""
Catalogue controller.

One ``CatalogController`` owns the in-memory vehicle sequence, the
current category filter and the search term. Every mutation goes to the
document store first and is followed by a full re-synchronization: the
local sequence is never patched in place.

Store failures are caught where the call is made, logged and turned into
a user notice plus an ``ActionResult``. Nothing is retried.

Overlapping mutations are not serialized. If two handlers run at once,
their synchronizations may finish out of order and the last one to
finish decides what is displayed.
"""

import enum
import logging
from typing import Callable, List, Optional

from ..exceptions import StoreError
from ..storage import DocumentStore
from .pipeline import compute_statistics, count_label, filter_vehicles
from .render import render_grid, render_load_error, render_statistics
from .schemas import ALL, EditForm, Statistics, Vehicle, VehicleForm, utc_timestamp
from .surface import PageSurface


logger = logging.getLogger(__name__)

DUPLICATE_CHASSIS = "Error: Chassis number already exists in the vault!"
ADDED = "✅ Vehicle added to Vault!"
ADD_FAILED = "❌ Failed to add vehicle. Check console for details."
UPDATED = "✅ Vehicle updated successfully!"
UPDATE_FAILED = "❌ Failed to update vehicle"
CONFIRM_REMOVE = "🗑️ Remove this vehicle from vault?"
REMOVED = "✅ Vehicle removed successfully!"
REMOVE_FAILED = "❌ Failed to remove vehicle"


class ActionResult(str, enum.Enum):
    OK = "ok"
    CONFLICT = "conflict"
    FAILED = "failed"
    CANCELLED = "cancelled"
    NOT_FOUND = "not_found"


class CatalogController:
    def __init__(
        self,
        store: DocumentStore,
        surface: PageSurface,
        collection: str = "cars",
        clock: Callable[[], str] = utc_timestamp,
    ) -> None:
        self.store = store
        self.surface = surface
        self.collection = collection
        self.clock = clock

        self.vehicles: List[Vehicle] = []
        self.visible: List[Vehicle] = []
        self.statistics = Statistics()
        self.current_filter = ALL
        self.search_term = ""

        surface.bind("open_edit", self.open_edit)
        surface.bind("close_edit", self.close_edit)
        surface.bind("delete", self.delete_vehicle)

    async def start(self, timeout: float) -> None:
        """Wait once for the store to be ready, then load the catalogue."""
        await self.store.wait_ready(timeout)
        logger.info("Catalogue controller started on collection '%s'", self.collection)
        await self.synchronize()

    # -- reading ----------------------------------------------------------

    async def synchronize(self) -> bool:
        """Replace the in-memory sequence with a fresh read of the store."""
        try:
            snapshot = await self.store.fetch_all(self.collection)
        except StoreError as exc:
            logger.error("Error fetching vehicles: %s", exc)
            self.surface.write("grid", render_load_error())
            return False

        self.vehicles = [Vehicle.from_document(rid, doc) for rid, doc in snapshot]
        self.statistics = compute_statistics(self.vehicles)
        self.surface.write("stats", render_statistics(self.statistics))
        self.apply_filters()
        logger.debug("Synchronized %d vehicle(s)", len(self.vehicles))
        return True

    def apply_filters(self) -> List[Vehicle]:
        self.visible = filter_vehicles(self.vehicles, self.current_filter, self.search_term)
        self.surface.write("grid", render_grid(self.visible))
        self.surface.write("count", count_label(len(self.visible)))
        return self.visible

    def set_filter(self, category: str) -> List[Vehicle]:
        self.current_filter = category
        return self.apply_filters()

    def set_search(self, term: str) -> List[Vehicle]:
        self.search_term = term
        return self.apply_filters()

    def find(self, vehicle_id: str) -> Optional[Vehicle]:
        return next((v for v in self.vehicles if v.id == vehicle_id), None)

    # -- mutations --------------------------------------------------------

    async def create_vehicle(self, form: VehicleForm) -> ActionResult:
        record = form.to_record(created_at=self.clock())
        try:
            existing = await self.store.query_equals(self.collection, "chassis", record["chassis"])
            if existing:
                logger.info("Rejected duplicate chassis %s", record["chassis"])
                self.surface.notify(DUPLICATE_CHASSIS)
                return ActionResult.CONFLICT
            vehicle_id = await self.store.insert(self.collection, record)
        except StoreError as exc:
            logger.error("Error adding vehicle: %s", exc)
            self.surface.notify(ADD_FAILED)
            return ActionResult.FAILED

        logger.info("Added vehicle %s (chassis %s)", vehicle_id, record["chassis"])
        self.surface.notify(ADDED)
        self.surface.reset_add_form()
        await self.synchronize()
        return ActionResult.OK

    def open_edit(self, vehicle_id: str) -> ActionResult:
        vehicle = self.find(vehicle_id)
        if vehicle is None:
            return ActionResult.NOT_FOUND
        self.surface.open_edit(EditForm.from_vehicle(vehicle))
        return ActionResult.OK

    def close_edit(self) -> ActionResult:
        self.surface.close_edit()
        return ActionResult.OK

    async def update_vehicle(self, form: EditForm) -> ActionResult:
        changes = form.to_changes(updated_at=self.clock())
        try:
            await self.store.update_by_id(self.collection, form.vehicle_id, changes)
        except StoreError as exc:
            logger.error("Error updating vehicle %s: %s", form.vehicle_id, exc)
            self.surface.notify(UPDATE_FAILED)
            return ActionResult.FAILED

        logger.info("Updated vehicle %s", form.vehicle_id)
        self.surface.notify(UPDATED)
        self.close_edit()
        await self.synchronize()
        return ActionResult.OK

    async def delete_vehicle(
        self,
        vehicle_id: str,
        confirm: Optional[Callable[[str], bool]] = None,
    ) -> ActionResult:
        confirm = confirm or self.surface.confirm
        if not confirm(CONFIRM_REMOVE):
            return ActionResult.CANCELLED
        try:
            await self.store.delete_by_id(self.collection, vehicle_id)
        except StoreError as exc:
            logger.error("Error deleting vehicle %s: %s", vehicle_id, exc)
            self.surface.notify(REMOVE_FAILED)
            return ActionResult.FAILED

        logger.info("Deleted vehicle %s", vehicle_id)
        self.surface.notify(REMOVED)
        await self.synchronize()
        return ActionResult.OK
