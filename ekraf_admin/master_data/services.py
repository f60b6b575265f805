"""
Client for the read-only master data endpoints used to fill form pickers.
"""
from typing import List, Optional

from ekraf_admin.business_categories.schemas import BusinessCategory
from ekraf_admin.common.errors import parse_model
from ekraf_admin.common.schemas import ApiResponse
from ekraf_admin.common.scope import RequestScope
from ekraf_admin.common.transport import Transport
from ekraf_admin.subsectors.schemas import Subsector
from ekraf_admin.users.schemas import Level


class MasterDataService:
    def __init__(self, transport: Transport):
        self._public = transport.public

    async def business_categories(self, scope: Optional[RequestScope] = None) -> List[BusinessCategory]:
        context = "fetching business categories"
        body = await self._public.get("/master-data/business-categories", context=context, scope=scope)
        return parse_model(ApiResponse[List[BusinessCategory]], body, context).data

    async def levels(self, scope: Optional[RequestScope] = None) -> List[Level]:
        context = "fetching user levels"
        body = await self._public.get("/master-data/levels", context=context, scope=scope)
        return parse_model(ApiResponse[List[Level]], body, context).data

    async def subsectors(self, scope: Optional[RequestScope] = None) -> List[Subsector]:
        context = "fetching subsectors"
        body = await self._public.get("/master-data/subsectors", context=context, scope=scope)
        return parse_model(ApiResponse[List[Subsector]], body, context).data
