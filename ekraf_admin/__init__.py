"""
Typed async client for the Ekraf partner admin backend.
"""

from ekraf_admin.api import AdminApi
from ekraf_admin.common.errors import (
    ApiError, ApiValidationError, AuthorizationError, ConnectivityError,
    MalformedResponseError, NotFoundError, RequestCancelledError, ServerError,
)
from ekraf_admin.common.scope import RequestScope
from ekraf_admin.common.session import SessionStore, create_session_store

__all__ = [
    "AdminApi",
    "ApiError",
    "ApiValidationError",
    "AuthorizationError",
    "ConnectivityError",
    "MalformedResponseError",
    "NotFoundError",
    "RequestCancelledError",
    "RequestScope",
    "ServerError",
    "SessionStore",
    "create_session_store",
]
