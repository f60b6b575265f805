from fastapi import APIRouter, Depends, HTTPException, status

from ekraf_admin.articles.schemas import Article, ArticlePayload
from ekraf_admin.sandbox.dependencies import get_current_user, get_state
from ekraf_admin.sandbox.state import SandboxState, now
from ekraf_admin.users.schemas import User

router = APIRouter()


def _get_article_or_404(state: SandboxState, article_id: int) -> Article:
    article = state.articles.get(article_id)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return article


@router.get("")
async def list_articles(user: User = Depends(get_current_user), state: SandboxState = Depends(get_state)):
    return {"message": "Articles retrieved", "data": [state.dump_article(a) for a in state.articles.values()]}


@router.get("/{article_id}")
async def get_article(article_id: int, user: User = Depends(get_current_user),
                      state: SandboxState = Depends(get_state)):
    return {"message": "Article retrieved", "data": state.dump_article(_get_article_or_404(state, article_id))}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_article(payload: ArticlePayload, user: User = Depends(get_current_user),
                         state: SandboxState = Depends(get_state)):
    article = state.add_article(user.id, **payload.model_dump())
    return {"message": "Article created", "data": state.dump_article(article)}


@router.put("/{article_id}")
async def update_article(article_id: int, payload: ArticlePayload, user: User = Depends(get_current_user),
                         state: SandboxState = Depends(get_state)):
    article = _get_article_or_404(state, article_id)
    updated = article.model_copy(update=dict(payload, updated_at=now()))
    state.articles[article_id] = updated
    return {"message": "Article updated", "data": state.dump_article(updated)}


@router.delete("/{article_id}")
async def delete_article(article_id: int, user: User = Depends(get_current_user),
                         state: SandboxState = Depends(get_state)):
    _get_article_or_404(state, article_id)
    del state.articles[article_id]
    return {"message": "Article deleted"}
