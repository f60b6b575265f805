import math
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ekraf_admin.products.schemas import (
    OnlineStoreLinkPayload, OnlineStoreLinkUpdate, ProductPayload,
)
from ekraf_admin.sandbox.dependencies import get_current_user, get_state
from ekraf_admin.sandbox.state import SandboxState, now
from ekraf_admin.users.schemas import User

router = APIRouter()


def _get_product_or_404(state: SandboxState, product_id: int):
    product = state.products.get(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def _check_category(state: SandboxState, category_id: int) -> None:
    if category_id not in state.categories:
        raise HTTPException(status_code=400, detail=f"Business category {category_id} does not exist")


@router.get("")
async def list_products(
        page: int = Query(1, ge=1, description="Page number"),
        limit: int = Query(10, ge=1, le=100, description="Items per page"),
        q: Optional[str] = Query(None, description="Search query"),
        kategori: Optional[int] = Query(None, description="Business category id"),
        subsector: Optional[int] = Query(None, description="Subsector id"),
        state: SandboxState = Depends(get_state),
):
    """
    Get one page of products, optionally filtered by text, category and subsector.
    """
    matches = state.search_products(q, kategori, subsector)
    total_pages = math.ceil(len(matches) / limit)
    if total_pages and page > total_pages:
        raise HTTPException(status_code=400, detail=f"Page {page} is out of range")

    offset = (page - 1) * limit
    return {
        "message": "Products retrieved",
        "totalPages": total_pages,
        "currentPage": page,
        "data": [state.dump_product(p) for p in matches[offset:offset + limit]],
    }


@router.get("/{product_id}")
async def get_product(product_id: int, state: SandboxState = Depends(get_state)):
    product = _get_product_or_404(state, product_id)
    return {"message": "Product retrieved", "data": state.dump_product(product)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
        payload: ProductPayload,
        user: User = Depends(get_current_user),
        state: SandboxState = Depends(get_state),
):
    _check_category(state, payload.business_category_id)
    product = state.add_product(user_id=user.id, **payload.model_dump())
    return {"message": "Product created", "data": state.dump_product(product)}


@router.put("/{product_id}")
async def update_product(
        product_id: int,
        payload: ProductPayload,
        user: User = Depends(get_current_user),
        state: SandboxState = Depends(get_state),
):
    """
    Replace a product. The complete record is validated, like the live backend does.
    """
    product = _get_product_or_404(state, product_id)
    _check_category(state, payload.business_category_id)
    updated = product.model_copy(update=dict(payload, updated_at=now()))
    state.products[product_id] = updated
    return {"message": "Product updated", "data": state.dump_product(updated)}


@router.delete("/{product_id}")
async def delete_product(
        product_id: int,
        user: User = Depends(get_current_user),
        state: SandboxState = Depends(get_state),
):
    _get_product_or_404(state, product_id)
    del state.products[product_id]
    for link_id in [link.id for link in state.links.values() if link.product_id == product_id]:
        del state.links[link_id]
    return {"message": "Product deleted"}


@router.post("/{product_id}/links", status_code=status.HTTP_201_CREATED)
async def create_link(
        product_id: int,
        payload: OnlineStoreLinkPayload,
        user: User = Depends(get_current_user),
        state: SandboxState = Depends(get_state),
):
    _get_product_or_404(state, product_id)
    link = state.add_link(product_id, payload.url, payload.platform_name)
    return {"message": "Link created", "data": link.model_dump()}


@router.put("/{product_id}/links/{link_id}")
async def update_link(
        product_id: int,
        link_id: int,
        payload: OnlineStoreLinkUpdate,
        user: User = Depends(get_current_user),
        state: SandboxState = Depends(get_state),
):
    link = state.links.get(link_id)
    if link is None or link.product_id != product_id:
        raise HTTPException(status_code=404, detail="Link not found")
    updated = link.model_copy(update=payload.model_dump(exclude_none=True))
    state.links[link_id] = updated
    return {"message": "Link updated", "data": updated.model_dump()}
