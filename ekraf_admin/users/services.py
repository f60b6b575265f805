"""
Client for the user endpoints, plus the partner ("mitra") helpers built on them.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from ekraf_admin.articles.schemas import Article
from ekraf_admin.common.errors import invalid_payload, parse_model
from ekraf_admin.common.schemas import ApiResponse, MessageResponse
from ekraf_admin.common.scope import RequestScope
from ekraf_admin.common.transport import Transport
from ekraf_admin.products.schemas import Product
from ekraf_admin.users.schemas import PartnerFilter, PartnerStats, User, UserUpdate

logger = logging.getLogger(__name__)


def filter_partners(
    users: Iterable[User],
    status: Union[PartnerFilter, str] = PartnerFilter.ALL,
    query: str = "",
) -> List[User]:
    """
    Filter partners by activation status and a case-insensitive name search.

    Args:
        users: Partners to filter
        status: "all", "active" (verified) or "inactive" (not verified)
        query: Substring to look for in the partner name

    Returns:
        The matching partners, in their original order
    """
    status = PartnerFilter(status)
    needle = query.strip().lower()
    result = []
    for user in users:
        if status is PartnerFilter.ACTIVE and not user.is_active:
            continue
        if status is PartnerFilter.INACTIVE and user.is_active:
            continue
        if needle and needle not in user.name.lower():
            continue
        result.append(user)
    return result


def summarize_partners(users: Iterable[User]) -> PartnerStats:
    users = list(users)
    active = sum(1 for user in users if user.is_active)
    return PartnerStats(total=len(users), active=active, inactive=len(users) - active)


class UsersService:
    """
    Every user endpoint requires an authenticated session.
    """

    def __init__(self, transport: Transport):
        self._private = transport.private

    async def get_profile(self, scope: Optional[RequestScope] = None) -> User:
        context = "fetching profile"
        body = await self._private.get("/users/profile", context=context, scope=scope)
        return parse_model(ApiResponse[User], body, context).data

    async def list(self, scope: Optional[RequestScope] = None) -> List[User]:
        context = "listing users"
        body = await self._private.get("/users", context=context, scope=scope)
        return parse_model(ApiResponse[List[User]], body, context).data

    async def list_partners(self, scope: Optional[RequestScope] = None) -> List[User]:
        """Retrieve the users on the partner (UMKM) level."""
        users = await self.list(scope=scope)
        return [user for user in users if user.is_partner]

    async def get(self, user_id: str, scope: Optional[RequestScope] = None) -> User:
        context = f"fetching user #{user_id}"
        body = await self._private.get(f"/users/{user_id}", context=context, scope=scope)
        return parse_model(ApiResponse[User], body, context).data

    async def update(
        self,
        user_id: str,
        changes: Union[UserUpdate, Dict[str, Any]],
        current: Optional[User] = None,
        scope: Optional[RequestScope] = None,
    ) -> MessageResponse:
        """
        Update a user.

        The backend requires the full record, so ``changes`` are merged onto
        ``current`` (fetched when not given) before sending.

        Returns:
            MessageResponse; the endpoint does not echo the record
        """
        context = f"updating user #{user_id}"
        if isinstance(changes, UserUpdate):
            payload = changes
        else:
            if current is None:
                current = await self.get(user_id, scope=scope)
            try:
                data = UserUpdate.from_user(current).model_dump()
                data.update(changes)
                payload = UserUpdate.model_validate(data)
            except ValidationError as exc:
                raise invalid_payload(exc, context) from exc

        body = await self._private.put(
            f"/users/{user_id}", json=payload.model_dump(mode="json"), context=context, scope=scope
        )
        return parse_model(MessageResponse, body, context)

    async def delete(self, user_id: str, scope: Optional[RequestScope] = None) -> MessageResponse:
        context = f"deleting user #{user_id}"
        body = await self._private.delete(f"/users/{user_id}", context=context, scope=scope)
        logger.info("Deleted user #%s", user_id)
        return parse_model(MessageResponse, body, context)

    async def list_products(self, user_id: str, scope: Optional[RequestScope] = None) -> List[Product]:
        context = f"listing products of user #{user_id}"
        body = await self._private.get(f"/users/{user_id}/products", context=context, scope=scope)
        return parse_model(ApiResponse[List[Product]], body, context).data

    async def list_articles(self, user_id: str, scope: Optional[RequestScope] = None) -> List[Article]:
        context = f"listing articles of user #{user_id}"
        body = await self._private.get(f"/users/{user_id}/articles", context=context, scope=scope)
        return parse_model(ApiResponse[List[Article]], body, context).data
