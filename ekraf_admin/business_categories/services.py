"""
Client for the business category endpoints.
"""
import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from ekraf_admin.business_categories.schemas import BusinessCategory, BusinessCategoryPayload
from ekraf_admin.common.errors import invalid_payload, parse_model
from ekraf_admin.common.schemas import ApiResponse, MessageResponse
from ekraf_admin.common.scope import RequestScope
from ekraf_admin.common.transport import Transport

logger = logging.getLogger(__name__)


class BusinessCategoriesService:
    def __init__(self, transport: Transport):
        self._public = transport.public
        self._private = transport.private

    async def list(self, scope: Optional[RequestScope] = None) -> List[BusinessCategory]:
        context = "listing business categories"
        body = await self._public.get("/business-categories", context=context, scope=scope)
        return parse_model(ApiResponse[List[BusinessCategory]], body, context).data

    async def get(self, category_id: int, scope: Optional[RequestScope] = None) -> BusinessCategory:
        context = f"fetching business category #{category_id}"
        body = await self._public.get(f"/business-categories/{category_id}", context=context, scope=scope)
        return parse_model(ApiResponse[BusinessCategory], body, context).data

    async def create(
        self,
        payload: Union[BusinessCategoryPayload, Dict[str, Any]],
        scope: Optional[RequestScope] = None,
    ) -> ApiResponse[BusinessCategory]:
        context = "creating business category"
        try:
            payload = BusinessCategoryPayload.model_validate(payload)
        except ValidationError as exc:
            raise invalid_payload(exc, context) from exc
        body = await self._private.post(
            "/business-categories", json=payload.model_dump(), context=context, scope=scope
        )
        return parse_model(ApiResponse[BusinessCategory], body, context)

    async def update(
        self,
        category_id: int,
        changes: Union[BusinessCategoryPayload, Dict[str, Any]],
        current: Optional[BusinessCategory] = None,
        scope: Optional[RequestScope] = None,
    ) -> ApiResponse[BusinessCategory]:
        """
        Update a business category, always sending the complete record.

        Args:
            category_id: Category to update
            changes: Fields to change, or a complete payload
            current: Last known state; fetched when not given
            scope: Cancellation scope owning the requests
        """
        context = f"updating business category #{category_id}"
        if isinstance(changes, BusinessCategoryPayload):
            payload = changes
        else:
            if current is None:
                current = await self.get(category_id, scope=scope)
            try:
                data = BusinessCategoryPayload.from_category(current).model_dump()
                data.update(changes)
                payload = BusinessCategoryPayload.model_validate(data)
            except ValidationError as exc:
                raise invalid_payload(exc, context) from exc

        body = await self._private.put(
            f"/business-categories/{category_id}", json=payload.model_dump(), context=context, scope=scope
        )
        return parse_model(ApiResponse[BusinessCategory], body, context)

    async def delete(self, category_id: int, scope: Optional[RequestScope] = None) -> MessageResponse:
        context = f"deleting business category #{category_id}"
        body = await self._private.delete(f"/business-categories/{category_id}", context=context, scope=scope)
        logger.info("Deleted business category #%s", category_id)
        return parse_model(MessageResponse, body, context)
