"""
This module defines the Pydantic models used for product management.

The backend reports product status under either ``status`` or
``status_produk``, with Indonesian values. The canonical model keeps a single
English ``status`` and translates at the boundary in both directions.
"""

from enum import Enum
from typing import Optional, List, Dict, Any

from pydantic import Field, field_serializer, field_validator, model_validator

from ekraf_admin.business_categories.schemas import BusinessCategory
from ekraf_admin.common.schemas import ApiModel, TimestampMixin, rename_legacy_fields
from ekraf_admin.config import DEFAULT_PAGE_SIZE
from ekraf_admin.users.schemas import User

PRODUCT_LEGACY_FIELDS = {
    "id_produk": "id",
    "nama_produk": "name",
    "nama_pelaku": "owner_name",
    "deskripsi": "description",
    "harga": "price",
    "stok": "stock",
    "nohp": "phone_number",
    "gambar": "image",
    "id_kategori_usaha": "business_category_id",
    "id_user": "user_id",
    "status_produk": "status",
}


class ProductStatus(str, Enum):
    """
    Moderation status of a product.
    """
    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"
    INACTIVE = "inactive"

    @classmethod
    def from_wire(cls, value: Any) -> 'ProductStatus':
        """Translate a backend value (Indonesian or English); unknown values become PENDING."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            status = _WIRE_TO_STATUS.get(normalized)
            if status is not None:
                return status
            try:
                return cls(normalized)
            except ValueError:
                pass
        return cls.PENDING

    @classmethod
    def parse(cls, value: Any) -> 'ProductStatus':
        """
        Strict variant of ``from_wire`` for values about to be written.

        Raises:
            ValueError: If ``value`` is neither a backend value nor a status name
        """
        if isinstance(value, cls):
            return value
        normalized = value.strip().lower() if isinstance(value, str) else value
        status = _WIRE_TO_STATUS.get(normalized)
        if status is not None:
            return status
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown product status {value!r}") from None

    def to_wire(self) -> str:
        return _STATUS_TO_WIRE[self]


_STATUS_TO_WIRE = {
    ProductStatus.APPROVED: "disetujui",
    ProductStatus.PENDING: "pending",
    ProductStatus.REJECTED: "ditolak",
    ProductStatus.INACTIVE: "tidak_aktif",
}
_WIRE_TO_STATUS = {wire: status for status, wire in _STATUS_TO_WIRE.items()}


class OnlineStoreLink(ApiModel):
    """
    A link to the product on an external marketplace.
    """
    id: int
    product_id: int
    platform_name: Optional[str] = None
    url: str


class OnlineStoreLinkPayload(ApiModel):
    platform_name: Optional[str] = None
    url: str = Field(..., min_length=1)


class OnlineStoreLinkUpdate(ApiModel):
    platform_name: Optional[str] = None
    url: Optional[str] = None


class ProductBase(ApiModel):
    """
    Fields shared by product records and product payloads.
    """
    name: str
    owner_name: Optional[str] = None
    description: str = ""
    price: int
    stock: int = 0
    image: str = ""
    phone_number: str = ""
    business_category_id: Optional[int] = None
    sub_sector_id: Optional[str] = None
    status: ProductStatus = ProductStatus.PENDING

    @model_validator(mode='before')
    @classmethod
    def translate_legacy_fields(cls, data):
        return rename_legacy_fields(data, PRODUCT_LEGACY_FIELDS)

    @field_validator('status', mode='before')
    @classmethod
    def parse_status(cls, value):
        return ProductStatus.from_wire(value)

    @field_validator('sub_sector_id', mode='before')
    @classmethod
    def stringify_sub_sector_id(cls, value):
        return str(value) if isinstance(value, int) else value

    @field_serializer('status')
    def serialize_status(self, status: ProductStatus) -> str:
        return status.to_wire()


class Product(ProductBase, TimestampMixin):
    """
    A product as returned by the backend, with its optional relations.
    """
    id: int
    user_id: Optional[str] = None
    uploaded_at: Optional[str] = None
    business_categories: Optional[BusinessCategory] = None
    users: Optional[User] = None
    online_store_links: List[OnlineStoreLink] = []

    @field_validator('user_id', mode='before')
    @classmethod
    def stringify_user_id(cls, value):
        return str(value) if isinstance(value, int) else value

    @property
    def category(self) -> Optional[BusinessCategory]:
        return self.business_categories

    @property
    def owner(self) -> Optional[User]:
        return self.users


class ProductPayload(ProductBase):
    """
    Request body for creating or fully updating a product.

    Name, price and category are mandatory; the backend re-validates the
    complete record on update, so updates always send every field.
    """
    name: str = Field(..., min_length=1)
    price: int = Field(..., gt=0)
    stock: int = Field(default=0, ge=0)
    business_category_id: int

    @field_validator('status', mode='before')
    @classmethod
    def parse_status(cls, value):
        # Unknown values are rejected here instead of falling back to pending
        return ProductStatus.parse(value)

    @classmethod
    def from_product(cls, product: Product) -> 'ProductPayload':
        """Build the full payload describing ``product`` as it is now."""
        return cls.model_validate(product.model_dump(include=set(cls.model_fields)))

    def merged(self, changes: Dict[str, Any]) -> 'ProductPayload':
        """Return a validated copy with ``changes`` applied on top."""
        data = self.model_dump()
        data.update(rename_legacy_fields(changes, PRODUCT_LEGACY_FIELDS))
        return type(self).model_validate(data)


class ProductFilters(ApiModel):
    """
    Query parameters accepted by the product list endpoint.
    """
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    q: Optional[str] = None
    kategori: Optional[int] = Field(default=None, description="Business category id")
    subsector: Optional[int] = Field(default=None, description="Subsector id")

    def to_params(self) -> Dict[str, Any]:
        params = self.model_dump(exclude_none=True)
        if not params.get("q"):
            params.pop("q", None)
        return params
