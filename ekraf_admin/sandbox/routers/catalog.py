"""
Reference data: business categories, subsectors and the master-data views.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from ekraf_admin.business_categories.schemas import BusinessCategory, BusinessCategoryPayload
from ekraf_admin.sandbox.dependencies import get_state, require_admin
from ekraf_admin.sandbox.state import SandboxState, now
from ekraf_admin.subsectors.schemas import Subsector, SubsectorPayload
from ekraf_admin.users.schemas import User

categories_router = APIRouter()
subsectors_router = APIRouter()
master_data_router = APIRouter()


def _get_category_or_404(state: SandboxState, category_id: int) -> BusinessCategory:
    category = state.categories.get(category_id)
    if category is None:
        raise HTTPException(status_code=404, detail="Business category not found")
    return category


def _get_subsector_or_404(state: SandboxState, subsector_id: str) -> Subsector:
    subsector = state.subsectors.get(subsector_id)
    if subsector is None:
        raise HTTPException(status_code=404, detail="Subsector not found")
    return subsector


@categories_router.get("")
async def list_categories(state: SandboxState = Depends(get_state)):
    data = [state.dump_category(c) for c in state.categories.values()]
    return {"message": "Business categories retrieved", "data": data}


@categories_router.get("/{category_id}")
async def get_category(category_id: int, state: SandboxState = Depends(get_state)):
    category = _get_category_or_404(state, category_id)
    return {"message": "Business category retrieved", "data": state.dump_category(category)}


@categories_router.post("", status_code=status.HTTP_201_CREATED)
async def create_category(
        payload: BusinessCategoryPayload,
        admin: User = Depends(require_admin),
        state: SandboxState = Depends(get_state),
):
    _get_subsector_or_404(state, payload.sub_sector_id)
    category = state.add_category(**payload.model_dump())
    return {"message": "Business category created", "data": state.dump_category(category)}


@categories_router.put("/{category_id}")
async def update_category(
        category_id: int,
        payload: BusinessCategoryPayload,
        admin: User = Depends(require_admin),
        state: SandboxState = Depends(get_state),
):
    category = _get_category_or_404(state, category_id)
    _get_subsector_or_404(state, payload.sub_sector_id)
    updated = category.model_copy(update=dict(payload, updated_at=now()))
    state.categories[category_id] = updated
    return {"message": "Business category updated", "data": state.dump_category(updated)}


@categories_router.delete("/{category_id}")
async def delete_category(category_id: int, admin: User = Depends(require_admin),
                          state: SandboxState = Depends(get_state)):
    _get_category_or_404(state, category_id)
    if any(p.business_category_id == category_id for p in state.products.values()):
        raise HTTPException(status_code=409, detail="Business category is still used by products")
    del state.categories[category_id]
    return {"message": "Business category deleted"}


@subsectors_router.get("")
async def list_subsectors(state: SandboxState = Depends(get_state)):
    return {"message": "Subsectors retrieved", "data": [s.model_dump(mode="json") for s in state.subsectors.values()]}


@subsectors_router.get("/{subsector_id}")
async def get_subsector(subsector_id: str, state: SandboxState = Depends(get_state)):
    subsector = _get_subsector_or_404(state, subsector_id)
    return {"message": "Subsector retrieved", "data": subsector.model_dump(mode="json")}


@subsectors_router.post("", status_code=status.HTTP_201_CREATED)
async def create_subsector(payload: SubsectorPayload, admin: User = Depends(require_admin),
                           state: SandboxState = Depends(get_state)):
    subsector = state.add_subsector(payload.title)
    return {"message": "Subsector created", "data": subsector.model_dump(mode="json")}


@subsectors_router.put("/{subsector_id}")
async def update_subsector(subsector_id: str, payload: SubsectorPayload, admin: User = Depends(require_admin),
                           state: SandboxState = Depends(get_state)):
    subsector = _get_subsector_or_404(state, subsector_id)
    updated = subsector.model_copy(update={
        "title": payload.title,
        "slug": payload.title.lower().replace(" ", "-"),
        "updated_at": now(),
    })
    state.subsectors[subsector_id] = updated
    return {"message": "Subsector updated", "data": updated.model_dump(mode="json")}


@subsectors_router.delete("/{subsector_id}")
async def delete_subsector(subsector_id: str, admin: User = Depends(require_admin),
                           state: SandboxState = Depends(get_state)):
    _get_subsector_or_404(state, subsector_id)
    del state.subsectors[subsector_id]
    return {"message": "Subsector deleted"}


@master_data_router.get("/business-categories")
async def master_business_categories(state: SandboxState = Depends(get_state)):
    return await list_categories(state)


@master_data_router.get("/levels")
async def master_levels(state: SandboxState = Depends(get_state)):
    return {"message": "Levels retrieved", "data": [lvl.model_dump(mode="json") for lvl in state.levels.values()]}


@master_data_router.get("/subsectors")
async def master_subsectors(state: SandboxState = Depends(get_state)):
    return await list_subsectors(state)
