from fastapi import APIRouter, Depends, HTTPException

from ekraf_admin.sandbox.dependencies import get_current_user, get_state, require_admin
from ekraf_admin.sandbox.state import SandboxState, now
from ekraf_admin.users.schemas import User, UserUpdate

router = APIRouter()


def _get_user_or_404(state: SandboxState, user_id: str) -> User:
    user = state.users.get(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/profile")
async def get_profile(user: User = Depends(get_current_user), state: SandboxState = Depends(get_state)):
    return {"message": "Profile retrieved", "data": state.dump_user(user)}


@router.get("")
async def list_users(admin: User = Depends(require_admin), state: SandboxState = Depends(get_state)):
    return {"message": "Users retrieved", "data": [state.dump_user(u) for u in state.users.values()]}


@router.get("/{user_id}")
async def get_user(user_id: str, admin: User = Depends(require_admin), state: SandboxState = Depends(get_state)):
    return {"message": "User retrieved", "data": state.dump_user(_get_user_or_404(state, user_id))}


@router.put("/{user_id}")
async def update_user(
        user_id: str,
        payload: UserUpdate,
        admin: User = Depends(require_admin),
        state: SandboxState = Depends(get_state),
):
    """
    Replace the editable fields of a user. Every field is validated.
    """
    user = _get_user_or_404(state, user_id)
    changes = payload.model_dump()
    level = state.levels.get(payload.level_id)
    if level is None:
        raise HTTPException(status_code=400, detail=f"Level {payload.level_id} does not exist")
    changes.update(levels=level, level=level.name, updated_at=now())
    state.users[user_id] = user.model_copy(update=changes)
    return {"message": "User updated"}


@router.delete("/{user_id}")
async def delete_user(user_id: str, admin: User = Depends(require_admin), state: SandboxState = Depends(get_state)):
    _get_user_or_404(state, user_id)
    del state.users[user_id]
    state.passwords.pop(user_id, None)
    for token in [t for t, owner in state.tokens.items() if owner == user_id]:
        del state.tokens[token]
    return {"message": "User deleted"}


@router.get("/{user_id}/products")
async def list_user_products(user_id: str, admin: User = Depends(require_admin),
                             state: SandboxState = Depends(get_state)):
    _get_user_or_404(state, user_id)
    products = [state.dump_product(p) for p in state.products.values() if p.user_id == user_id]
    return {"message": "Products retrieved", "data": products}


@router.get("/{user_id}/articles")
async def list_user_articles(user_id: str, admin: User = Depends(require_admin),
                             state: SandboxState = Depends(get_state)):
    _get_user_or_404(state, user_id)
    articles = [state.dump_article(a) for a in state.articles.values() if a.author_id == user_id]
    return {"message": "Articles retrieved", "data": articles}
