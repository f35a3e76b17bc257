"""
Route definitions for the vehicle catalogue API.

Endpoints under /api/catalog:
- GET    /vehicles                : cards currently displayed
- PUT    /view                    : change category filter and/or search term
- POST   /vehicles                : add a vehicle
- POST   /vehicles/{id}/edit      : open the edit surface for a vehicle
- POST   /edit/close              : close the edit surface
- PUT    /vehicles/{id}           : save the edit form
- DELETE /vehicles/{id}?confirm=  : remove a vehicle
- GET    /statistics              : aggregates over the whole catalogue
- POST   /sync                    : re-read the store
- GET    /notices                 : pending user notices (drained)
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from .controller import (
    ADD_FAILED,
    ADDED,
    DUPLICATE_CHASSIS,
    REMOVE_FAILED,
    REMOVED,
    UPDATE_FAILED,
    UPDATED,
    ActionResult,
    CatalogController,
)
from .pipeline import count_label
from .schemas import CatalogView, EditFields, EditForm, Statistics, VehicleForm, ViewState


router = APIRouter(prefix="/api/catalog", tags=["catalog"])


def get_controller(request: Request) -> CatalogController:
    return request.app.state.controller


def _view(controller: CatalogController) -> CatalogView:
    return CatalogView(
        filter=controller.current_filter,
        search=controller.search_term,
        count_label=count_label(len(controller.visible)),
        total_matches=len(controller.visible),
        items=controller.visible,
    )


@router.get("/vehicles", response_model=CatalogView)
async def list_vehicles(controller: CatalogController = Depends(get_controller)) -> CatalogView:
    return _view(controller)


@router.put("/view", response_model=CatalogView)
async def update_view(
    state: ViewState,
    controller: CatalogController = Depends(get_controller),
) -> CatalogView:
    """Apply a filter button and/or a search keystroke.

    Omitted fields keep their current value.
    """
    if state.category is not None:
        controller.current_filter = state.category
    if state.search is not None:
        controller.search_term = state.search
    controller.apply_filters()
    return _view(controller)


@router.post("/vehicles", status_code=201)
async def create_vehicle(
    form: VehicleForm,
    controller: CatalogController = Depends(get_controller),
):
    result = await controller.create_vehicle(form)
    if result is ActionResult.CONFLICT:
        raise HTTPException(status_code=409, detail=DUPLICATE_CHASSIS)
    if result is ActionResult.FAILED:
        raise HTTPException(status_code=502, detail=ADD_FAILED)
    return {"status": result.value, "notice": ADDED}


@router.post("/vehicles/{vehicle_id}/edit", response_model=EditForm)
async def open_edit(
    vehicle_id: str,
    controller: CatalogController = Depends(get_controller),
) -> EditForm:
    result = await controller.surface.trigger("open_edit", vehicle_id)
    if result is ActionResult.NOT_FOUND:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return controller.surface.edit_form


@router.post("/edit/close")
async def close_edit(controller: CatalogController = Depends(get_controller)):
    await controller.surface.trigger("close_edit")
    return {"status": "ok"}


@router.put("/vehicles/{vehicle_id}")
async def update_vehicle(
    vehicle_id: str,
    fields: EditFields,
    controller: CatalogController = Depends(get_controller),
):
    form = EditForm(vehicle_id=vehicle_id, **fields.model_dump())
    result = await controller.update_vehicle(form)
    if result is ActionResult.FAILED:
        raise HTTPException(status_code=502, detail=UPDATE_FAILED)
    return {"status": result.value, "notice": UPDATED}


@router.delete("/vehicles/{vehicle_id}")
async def delete_vehicle(
    vehicle_id: str,
    confirm: bool = Query(default=False, description="Answer to the removal prompt"),
    controller: CatalogController = Depends(get_controller),
):
    result = await controller.surface.trigger(
        "delete", vehicle_id, confirm=lambda prompt: confirm
    )
    if result is ActionResult.FAILED:
        raise HTTPException(status_code=502, detail=REMOVE_FAILED)
    if result is ActionResult.CANCELLED:
        return {"status": "cancelled"}
    return {"status": "deleted", "notice": REMOVED}


@router.get("/statistics", response_model=Statistics)
async def get_statistics(controller: CatalogController = Depends(get_controller)) -> Statistics:
    return controller.statistics


@router.post("/sync", response_model=CatalogView)
async def synchronize(controller: CatalogController = Depends(get_controller)) -> CatalogView:
    if not await controller.synchronize():
        raise HTTPException(status_code=502, detail="Error loading vehicles")
    return _view(controller)


@router.get("/notices", response_model=List[str])
async def drain_notices(controller: CatalogController = Depends(get_controller)) -> List[str]:
    return controller.surface.drain_notices()
