"""
In-memory data behind the sandbox backend.

Records are kept as the client's own models and serialized to the backend
wire format on the way out.
"""
import itertools
import secrets
from datetime import datetime
from typing import Any, Dict, List, Optional

from ekraf_admin.articles.schemas import Article
from ekraf_admin.business_categories.schemas import BusinessCategory
from ekraf_admin.config import DEFAULT_TIMEZONE
from ekraf_admin.products.schemas import OnlineStoreLink, Product, ProductStatus
from ekraf_admin.subsectors.schemas import Subsector
from ekraf_admin.users.schemas import Level, User

# Login endpoint level -> level name stored on the user
LOGIN_LEVELS = {"superadmin": "superadmin", "admin": "admin", "umkm": "user"}


def now() -> datetime:
    return datetime.now(DEFAULT_TIMEZONE)


class SandboxState:
    def __init__(self):
        self.levels: Dict[str, Level] = {}
        self.subsectors: Dict[str, Subsector] = {}
        self.categories: Dict[int, BusinessCategory] = {}
        self.users: Dict[str, User] = {}
        self.passwords: Dict[str, str] = {}
        self.products: Dict[int, Product] = {}
        self.links: Dict[int, OnlineStoreLink] = {}
        self.articles: Dict[int, Article] = {}
        self.tokens: Dict[str, str] = {}
        self.registrations: Dict[str, Dict[str, Any]] = {}
        self.reset_tokens: Dict[str, str] = {}

        self._user_ids = itertools.count(1)
        self._category_ids = itertools.count(1)
        self._subsector_ids = itertools.count(1)
        self._product_ids = itertools.count(1)
        self._link_ids = itertools.count(1)
        self._article_ids = itertools.count(1)
        self._registration_ids = itertools.count(1)

        for level_id, name in (("1", "superadmin"), ("2", "admin"), ("3", "user")):
            self.levels[level_id] = Level(id=level_id, name=name)

    # --- records -----------------------------------------------------

    def level_by_name(self, name: str) -> Level:
        for level in self.levels.values():
            if level.name == name:
                return level
        raise KeyError(name)

    def add_subsector(self, title: str, **fields) -> Subsector:
        subsector_id = str(next(self._subsector_ids))
        slug = title.lower().replace(" ", "-")
        subsector = Subsector(id=subsector_id, title=title, slug=slug, created_at=now(), **fields)
        self.subsectors[subsector_id] = subsector
        return subsector

    def add_category(self, name: str, sub_sector_id: str, **fields) -> BusinessCategory:
        category_id = next(self._category_ids)
        category = BusinessCategory(
            id=category_id, name=name, sub_sector_id=sub_sector_id, created_at=now(), **fields
        )
        self.categories[category_id] = category
        return category

    def add_user(self, name: str, email: str, password: str, level: str = "user",
                 verified: bool = False, **fields) -> User:
        user_id = str(next(self._user_ids))
        level_record = self.level_by_name(level)
        user = User(
            id=user_id,
            name=name,
            email=email,
            level_id=level_record.id,
            levels=level_record,
            level=level_record.name,
            verified_at=now() if verified else None,
            created_at=now(),
            **fields,
        )
        self.users[user_id] = user
        self.passwords[user_id] = password
        return user

    def add_product(self, name: str, price: int, business_category_id: int,
                    user_id: Optional[str] = None, **fields) -> Product:
        product_id = next(self._product_ids)
        fields.setdefault("status", ProductStatus.PENDING)
        product = Product(
            id=product_id,
            name=name,
            price=price,
            business_category_id=business_category_id,
            user_id=user_id,
            created_at=now(),
            **fields,
        )
        self.products[product_id] = product
        return product

    def add_link(self, product_id: int, url: str, platform_name: Optional[str] = None) -> OnlineStoreLink:
        link = OnlineStoreLink(id=next(self._link_ids), product_id=product_id, url=url,
                               platform_name=platform_name)
        self.links[link.id] = link
        return link

    def add_article(self, author_id: str, **fields) -> Article:
        article_id = next(self._article_ids)
        slug = fields.get("title", "").lower().replace(" ", "-")
        article = Article(id=article_id, author_id=author_id, slug=slug, created_at=now(), **fields)
        self.articles[article_id] = article
        return article

    def add_registration(self, data: Dict[str, Any]) -> Dict[str, Any]:
        token = secrets.token_urlsafe(16)
        registration = dict(
            data,
            id=next(self._registration_ids),
            level_id=self.level_by_name("user").id,
            verificationToken=token,
            createdAt=now().isoformat(),
        )
        self.registrations[token] = registration
        return registration

    # --- sessions ----------------------------------------------------

    def find_account(self, username_or_email: str, password: str) -> Optional[User]:
        for user in self.users.values():
            if username_or_email in (user.email, user.username) and self.passwords.get(user.id) == password:
                return user
        return None

    def issue_token(self, user: User) -> str:
        token = secrets.token_hex(24)
        self.tokens[token] = user.id
        return token

    def user_for_token(self, token: str) -> Optional[User]:
        user_id = self.tokens.get(token)
        return self.users.get(user_id) if user_id else None

    # --- wire format -------------------------------------------------

    def dump_user(self, user: User) -> Dict[str, Any]:
        data = user.model_dump(mode="json", by_alias=True)
        data["productCount"] = sum(1 for p in self.products.values() if p.user_id == user.id)
        return data

    def dump_category(self, category: BusinessCategory) -> Dict[str, Any]:
        data = category.model_dump(mode="json", exclude={"sub_sectors"})
        subsector = self.subsectors.get(category.sub_sector_id or "")
        data["sub_sectors"] = subsector.model_dump(mode="json") if subsector else None
        return data

    def dump_product(self, product: Product) -> Dict[str, Any]:
        data = product.model_dump(
            mode="json", by_alias=True,
            exclude={"business_categories", "users", "online_store_links"},
        )
        # The live backend reports the status under both names
        data["status_produk"] = data["status"]
        category = self.categories.get(product.business_category_id)
        data["business_categories"] = category.model_dump(mode="json") if category else None
        owner = self.users.get(product.user_id or "")
        data["users"] = owner.model_dump(mode="json", by_alias=True) if owner else None
        data["online_store_links"] = [
            link.model_dump() for link in self.links.values() if link.product_id == product.id
        ]
        return data

    def dump_article(self, article: Article) -> Dict[str, Any]:
        data = article.model_dump(mode="json", exclude={"users", "author"})
        author = self.users.get(article.author_id)
        data["author"] = {"name": author.name, "email": author.email} if author else None
        return data

    def search_products(self, q: Optional[str] = None, category_id: Optional[int] = None,
                        subsector_id: Optional[int] = None) -> List[Product]:
        needle = (q or "").strip().lower()
        result = []
        for product in self.products.values():
            if needle and needle not in product.name.lower() and needle not in product.description.lower():
                continue
            if category_id is not None and product.business_category_id != category_id:
                continue
            if subsector_id is not None:
                category = self.categories.get(product.business_category_id)
                sub_sector_id = product.sub_sector_id or (category.sub_sector_id if category else None)
                if sub_sector_id != str(subsector_id):
                    continue
            result.append(product)
        return result


def seed_demo_data(state: SandboxState) -> SandboxState:
    """Fill ``state`` with a small, realistic data set for local development."""
    kuliner = state.add_subsector("Kuliner")
    kriya = state.add_subsector("Kriya")
    state.add_subsector("Fesyen")

    kopi = state.add_category("Kopi & Minuman", kuliner.id, description="Kedai dan roastery")
    snacks = state.add_category("Makanan Ringan", kuliner.id)
    crafts = state.add_category("Kerajinan Tangan", kriya.id)

    state.add_user("Super Admin", "superadmin@ekraf.test", "superadmin123", level="superadmin", verified=True)
    state.add_user("Admin Ekraf", "admin@ekraf.test", "admin123", level="admin", verified=True,
                   username="admin")
    sari = state.add_user("Sari Wulandari", "sari@umkm.test", "sari12345", verified=True,
                          phone_number="081234567890", business_name="Kopi Sari",
                          business_category_id=kopi.id)
    budi = state.add_user("Budi Santoso", "budi@umkm.test", "budi12345",
                          phone_number="081298765432", business_name="Anyaman Budi",
                          business_category_id=crafts.id)

    state.add_product("Kopi Arabika Gayo 250g", 85000, kopi.id, user_id=sari.id, stock=40,
                      owner_name=sari.name, phone_number=sari.phone_number,
                      description="Biji kopi sangrai medium", status=ProductStatus.APPROVED)
    state.add_product("Kopi Susu Literan", 60000, kopi.id, user_id=sari.id, stock=15,
                      owner_name=sari.name, phone_number=sari.phone_number)
    state.add_product("Keripik Tempe Pedas", 15000, snacks.id, user_id=sari.id, stock=100,
                      owner_name=sari.name, phone_number=sari.phone_number, status=ProductStatus.REJECTED)
    state.add_product("Tas Anyaman Pandan", 120000, crafts.id, user_id=budi.id, stock=8,
                      owner_name=budi.name, phone_number=budi.phone_number, status=ProductStatus.INACTIVE)
    return state
