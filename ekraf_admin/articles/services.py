"""
Client for the article endpoints.
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from ekraf_admin.articles.schemas import Article, ArticlePayload
from ekraf_admin.common.errors import invalid_payload, parse_model
from ekraf_admin.common.schemas import ApiResponse, MessageResponse
from ekraf_admin.common.scope import RequestScope
from ekraf_admin.common.transport import Transport


class ArticlesService:
    def __init__(self, transport: Transport):
        self._private = transport.private

    async def list(self, scope: Optional[RequestScope] = None) -> List[Article]:
        context = "listing articles"
        body = await self._private.get("/articles", context=context, scope=scope)
        return parse_model(ApiResponse[List[Article]], body, context).data

    async def get(self, article_id: int, scope: Optional[RequestScope] = None) -> Article:
        context = f"fetching article #{article_id}"
        body = await self._private.get(f"/articles/{article_id}", context=context, scope=scope)
        return parse_model(ApiResponse[Article], body, context).data

    async def create(
        self,
        payload: Union[ArticlePayload, Dict[str, Any]],
        scope: Optional[RequestScope] = None,
    ) -> ApiResponse[Article]:
        context = "creating article"
        try:
            payload = ArticlePayload.model_validate(payload)
        except ValidationError as exc:
            raise invalid_payload(exc, context) from exc
        body = await self._private.post("/articles", json=payload.model_dump(), context=context, scope=scope)
        return parse_model(ApiResponse[Article], body, context)

    async def update(
        self,
        article_id: int,
        changes: Union[ArticlePayload, Dict[str, Any]],
        current: Optional[Article] = None,
        scope: Optional[RequestScope] = None,
    ) -> ApiResponse[Article]:
        """Update an article, merging ``changes`` onto the full current record."""
        context = f"updating article #{article_id}"
        if isinstance(changes, ArticlePayload):
            payload = changes
        else:
            if current is None:
                current = await self.get(article_id, scope=scope)
            try:
                data = ArticlePayload.from_article(current).model_dump()
                data.update(changes)
                payload = ArticlePayload.model_validate(data)
            except ValidationError as exc:
                raise invalid_payload(exc, context) from exc

        body = await self._private.put(
            f"/articles/{article_id}", json=payload.model_dump(), context=context, scope=scope
        )
        return parse_model(ApiResponse[Article], body, context)

    async def delete(self, article_id: int, scope: Optional[RequestScope] = None) -> MessageResponse:
        context = f"deleting article #{article_id}"
        body = await self._private.delete(f"/articles/{article_id}", context=context, scope=scope)
        return parse_model(MessageResponse, body, context)
