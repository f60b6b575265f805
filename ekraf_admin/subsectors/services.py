"""
Client for the subsector endpoints.
"""
from typing import List, Optional

from pydantic import ValidationError

from ekraf_admin.common.errors import invalid_payload, parse_model
from ekraf_admin.common.schemas import ApiResponse, MessageResponse
from ekraf_admin.common.scope import RequestScope
from ekraf_admin.common.transport import Transport
from ekraf_admin.subsectors.schemas import Subsector, SubsectorPayload


class SubsectorsService:
    def __init__(self, transport: Transport):
        self._public = transport.public
        self._private = transport.private

    def _payload(self, title: str, context: str) -> dict:
        try:
            return SubsectorPayload(title=title).model_dump()
        except ValidationError as exc:
            raise invalid_payload(exc, context) from exc

    async def list(self, scope: Optional[RequestScope] = None) -> List[Subsector]:
        context = "listing subsectors"
        body = await self._public.get("/subsectors", context=context, scope=scope)
        return parse_model(ApiResponse[List[Subsector]], body, context).data

    async def get(self, subsector_id: str, scope: Optional[RequestScope] = None) -> Subsector:
        context = f"fetching subsector #{subsector_id}"
        body = await self._public.get(f"/subsectors/{subsector_id}", context=context, scope=scope)
        return parse_model(ApiResponse[Subsector], body, context).data

    async def create(self, title: str, scope: Optional[RequestScope] = None) -> ApiResponse[Subsector]:
        context = "creating subsector"
        body = await self._private.post(
            "/subsectors", json=self._payload(title, context), context=context, scope=scope
        )
        return parse_model(ApiResponse[Subsector], body, context)

    async def update(self, subsector_id: str, title: str,
                     scope: Optional[RequestScope] = None) -> ApiResponse[Subsector]:
        # The title is the whole record, so this is already a full update
        context = f"updating subsector #{subsector_id}"
        body = await self._private.put(
            f"/subsectors/{subsector_id}", json=self._payload(title, context), context=context, scope=scope
        )
        return parse_model(ApiResponse[Subsector], body, context)

    async def delete(self, subsector_id: str, scope: Optional[RequestScope] = None) -> MessageResponse:
        context = f"deleting subsector #{subsector_id}"
        body = await self._private.delete(f"/subsectors/{subsector_id}", context=context, scope=scope)
        return parse_model(MessageResponse, body, context)
