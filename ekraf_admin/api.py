"""
Facade wiring every resource client onto one transport and session.
"""
from typing import Optional

import httpx

from ekraf_admin import config
from ekraf_admin.articles.services import ArticlesService
from ekraf_admin.auth.services import AuthService
from ekraf_admin.business_categories.services import BusinessCategoriesService
from ekraf_admin.common.session import SessionStore, create_session_store
from ekraf_admin.common.transport import Transport
from ekraf_admin.master_data.services import MasterDataService
from ekraf_admin.products.services import ProductsService
from ekraf_admin.subsectors.services import SubsectorsService
from ekraf_admin.uploader.services import UploaderService
from ekraf_admin.users.services import UsersService


class AdminApi:
    """
    All resource clients of the admin panel.

    Args:
        session: Session store; the configured one is used when omitted
        base_url: Backend API root
        uploader_url: External image upload endpoint
        http_transport: Optional httpx transport for the backend, used to plug in fakes
        uploader_transport: Optional httpx transport for the image host
    """

    def __init__(
        self,
        session: Optional[SessionStore] = None,
        base_url: str = config.API_BASE_URL,
        uploader_url: str = config.UPLOADER_URL,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
        uploader_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = session if session is not None else create_session_store()
        self.transport = Transport(self.session, base_url=base_url, http_transport=http_transport)

        self.auth = AuthService(self.transport, self.session)
        self.products = ProductsService(self.transport)
        self.users = UsersService(self.transport)
        self.business_categories = BusinessCategoriesService(self.transport)
        self.subsectors = SubsectorsService(self.transport)
        self.master_data = MasterDataService(self.transport)
        self.articles = ArticlesService(self.transport)
        self.uploader = UploaderService(httpx.AsyncClient(transport=uploader_transport), url=uploader_url)

    async def aclose(self) -> None:
        await self.transport.aclose()
        await self.uploader.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
