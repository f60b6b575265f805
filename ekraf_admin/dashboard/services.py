"""
Dashboard summary assembled from several resource clients.
"""
import asyncio
import logging
from typing import Optional

from ekraf_admin import config
from ekraf_admin.api import AdminApi
from ekraf_admin.common.scope import RequestScope
from ekraf_admin.dashboard.schemas import DashboardSummary
from ekraf_admin.products.schemas import ProductFilters

logger = logging.getLogger(__name__)

RECENT_PRODUCTS = 5
RECENT_PARTNERS = 3


async def load_dashboard(api: AdminApi, scope: Optional[RequestScope] = None) -> DashboardSummary:
    """
    Load the dashboard counts and recent items.

    Users, the first page of products (``EKRAF_PAGE_SIZE`` items) and the business categories are
    fetched concurrently.

    Args:
        api: Admin API facade with an authenticated session
        scope: Cancellation scope owning the requests

    Returns:
        DashboardSummary; the product count covers the fetched first page only

    Raises:
        ApiError: If any of the three requests fails
    """
    users, products, categories = await asyncio.gather(
        api.users.list(scope=scope),
        api.products.list(ProductFilters(limit=config.DEFAULT_PAGE_SIZE), scope=scope),
        api.master_data.business_categories(scope=scope),
    )
    partners = [user for user in users if user.is_partner]
    logger.debug("Dashboard: %d users, %d partners", len(users), len(partners))

    return DashboardSummary(
        partner_count=len(partners),
        product_count=len(products.data),
        category_count=len(categories),
        recent_products=products.data[:RECENT_PRODUCTS],
        recent_partners=partners[:RECENT_PARTNERS],
        current_user=api.session.get_user(),
    )
