"""
This module defines the summary shown on the admin dashboard.
"""

from typing import List, Optional

from pydantic import BaseModel

from ekraf_admin.products.schemas import Product
from ekraf_admin.users.schemas import User


class DashboardSummary(BaseModel):
    partner_count: int = 0
    product_count: int = 0
    category_count: int = 0
    recent_products: List[Product] = []
    recent_partners: List[User] = []
    current_user: Optional[User] = None
