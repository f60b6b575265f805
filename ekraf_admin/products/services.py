"""
Client for the product endpoints.
"""
import logging
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from ekraf_admin.common.errors import invalid_payload, invalid_value, parse_model
from ekraf_admin.common.schemas import ApiResponse, MessageResponse, PaginatedResponse
from ekraf_admin.common.scope import RequestScope
from ekraf_admin.common.transport import Transport
from ekraf_admin.products.schemas import (
    OnlineStoreLink, OnlineStoreLinkPayload, OnlineStoreLinkUpdate, Product, ProductFilters,
    ProductPayload, ProductStatus,
)

logger = logging.getLogger(__name__)


class ProductsService:
    """
    Products are public to read; writes need an authenticated session.
    """

    def __init__(self, transport: Transport):
        self._public = transport.public
        self._private = transport.private

    async def list(
        self,
        filters: Optional[Union[ProductFilters, Dict[str, Any]]] = None,
        scope: Optional[RequestScope] = None,
    ) -> PaginatedResponse[Product]:
        """
        Retrieve one page of products.

        Args:
            filters: Page, page size, free-text query and category/subsector ids
            scope: Cancellation scope owning the request

        Returns:
            PaginatedResponse with the products of the requested page

        Raises:
            ApiError: If the request fails; no partial results are returned
        """
        context = "listing products"
        if isinstance(filters, dict):
            try:
                filters = ProductFilters.model_validate(filters)
            except ValidationError as exc:
                raise invalid_payload(exc, context) from exc
        params = filters.to_params() if filters is not None else None

        body = await self._public.get("/products", params=params, context=context, scope=scope)
        return parse_model(PaginatedResponse[Product], body, context)

    async def get(self, product_id: int, scope: Optional[RequestScope] = None) -> Product:
        context = f"fetching product #{product_id}"
        body = await self._public.get(f"/products/{product_id}", context=context, scope=scope)
        return parse_model(ApiResponse[Product], body, context).data

    async def create(
        self,
        payload: Union[ProductPayload, Dict[str, Any]],
        scope: Optional[RequestScope] = None,
    ) -> ApiResponse[Product]:
        """
        Create a product.

        Raises:
            ApiValidationError: If the payload misses required fields, locally or on the server
        """
        context = "creating product"
        if isinstance(payload, dict):
            try:
                payload = ProductPayload.model_validate(payload)
            except ValidationError as exc:
                raise invalid_payload(exc, context) from exc

        body = await self._private.post(
            "/products", json=payload.model_dump(mode="json"), context=context, scope=scope
        )
        response = parse_model(ApiResponse[Product], body, context)
        logger.info("Created product #%s", response.data.id)
        return response

    async def update(
        self,
        product_id: int,
        changes: Union[ProductPayload, Dict[str, Any]],
        current: Optional[Product] = None,
        scope: Optional[RequestScope] = None,
    ) -> ApiResponse[Product]:
        """
        Update a product.

        The backend validates the complete record even for partial intent, so
        ``changes`` are merged onto the current record and the full payload is
        sent. When ``current`` is not given it is fetched first.

        Args:
            product_id: Product to update
            changes: Fields to change, or a complete payload
            current: Last known state of the product
            scope: Cancellation scope owning the requests

        Returns:
            ApiResponse with the updated product
        """
        context = f"updating product #{product_id}"
        if isinstance(changes, ProductPayload):
            payload = changes
        else:
            if current is None:
                current = await self.get(product_id, scope=scope)
            try:
                payload = ProductPayload.from_product(current).merged(changes)
            except ValidationError as exc:
                raise invalid_payload(exc, context) from exc

        body = await self._private.put(
            f"/products/{product_id}", json=payload.model_dump(mode="json"), context=context, scope=scope
        )
        return parse_model(ApiResponse[Product], body, context)

    async def set_status(
        self,
        product_id: int,
        status: Union[ProductStatus, str],
        current: Optional[Product] = None,
        scope: Optional[RequestScope] = None,
    ) -> ApiResponse[Product]:
        """
        Change only the moderation status; still sends the full record.

        Raises:
            ApiValidationError: If ``status`` is not a known status, before any request is sent
        """
        try:
            status = ProductStatus.parse(status)
        except ValueError as exc:
            raise invalid_value("status", str(exc), f"updating product #{product_id}") from exc
        return await self.update(product_id, {"status": status}, current=current, scope=scope)

    async def delete(self, product_id: int, scope: Optional[RequestScope] = None) -> MessageResponse:
        context = f"deleting product #{product_id}"
        body = await self._private.delete(f"/products/{product_id}", context=context, scope=scope)
        logger.info("Deleted product #%s", product_id)
        return parse_model(MessageResponse, body, context)

    async def create_link(
        self,
        product_id: int,
        data: Union[OnlineStoreLinkPayload, Dict[str, Any]],
        scope: Optional[RequestScope] = None,
    ) -> ApiResponse[OnlineStoreLink]:
        context = f"adding a link to product #{product_id}"
        try:
            payload = OnlineStoreLinkPayload.model_validate(data)
        except ValidationError as exc:
            raise invalid_payload(exc, context) from exc
        body = await self._private.post(
            f"/products/{product_id}/links", json=payload.model_dump(), context=context, scope=scope
        )
        return parse_model(ApiResponse[OnlineStoreLink], body, context)

    async def update_link(
        self,
        product_id: int,
        link_id: int,
        data: Union[OnlineStoreLinkUpdate, Dict[str, Any]],
        scope: Optional[RequestScope] = None,
    ) -> ApiResponse[OnlineStoreLink]:
        context = f"updating link #{link_id}"
        try:
            payload = OnlineStoreLinkUpdate.model_validate(data)
        except ValidationError as exc:
            raise invalid_payload(exc, context) from exc
        body = await self._private.put(
            f"/products/{product_id}/links/{link_id}",
            json=payload.model_dump(exclude_none=True),
            context=context,
            scope=scope,
        )
        return parse_model(ApiResponse[OnlineStoreLink], body, context)
