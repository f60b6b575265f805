"""
Client for the authentication endpoints.

``login`` is the only call with a side effect outside its own resource: it
writes the returned token and user snapshot into the session store.
"""
import logging
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from ekraf_admin.auth.schemas import (
    ForgotPasswordRequest, LoginLevel, LoginRequest, LoginResponse, RegisterResponse,
    RegistrationData, ResetPasswordRequest, VerifyEmailRequest, VerifyEmailResponse,
)
from ekraf_admin.common.errors import invalid_payload, invalid_value, parse_model
from ekraf_admin.common.schemas import MessageResponse
from ekraf_admin.common.scope import RequestScope
from ekraf_admin.common.session import SessionStore
from ekraf_admin.common.transport import Transport

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, transport: Transport, session: SessionStore):
        self._public = transport.public
        self._session = session

    async def login(
        self,
        username_or_email: str,
        password: str,
        level: Union[LoginLevel, str] = LoginLevel.UMKM,
        scope: Optional[RequestScope] = None,
    ) -> LoginResponse:
        """
        Log in and store the session.

        Args:
            username_or_email: Username or email of the account
            password: Account password
            level: Account level, selects the login endpoint
            scope: Cancellation scope owning the request

        Returns:
            LoginResponse with the token and the user profile

        Raises:
            ApiError: If the credentials are rejected or the request fails;
                the stored session is left untouched
        """
        context = "logging in"
        try:
            level = LoginLevel(level)
        except ValueError as exc:
            raise invalid_value("level", f"Unknown account level {level!r}", context) from exc
        try:
            request = LoginRequest(username_or_email=username_or_email, password=password)
        except ValidationError as exc:
            raise invalid_payload(exc, context) from exc

        body = await self._public.post(
            f"/auth/login/{level.value}", json=request.model_dump(by_alias=True), context=context, scope=scope
        )
        response = parse_model(LoginResponse, body, context)
        self._session.set(response.token, response.user)
        logger.info("Logged in as %s (%s)", response.user.email, level.value)
        return response

    def logout(self) -> None:
        """Forget the stored session; the backend keeps no logout state."""
        self._session.clear()

    async def register(
        self,
        data: Union[RegistrationData, Dict[str, Any]],
        scope: Optional[RequestScope] = None,
    ) -> RegisterResponse:
        context = "registering"
        try:
            data = RegistrationData.model_validate(data)
        except ValidationError as exc:
            raise invalid_payload(exc, context) from exc
        body = await self._public.post(
            "/auth/register/umkm", json=data.model_dump(mode="json", exclude_none=True), context=context, scope=scope
        )
        return parse_model(RegisterResponse, body, context)

    async def forgot_password(self, email: str, scope: Optional[RequestScope] = None) -> MessageResponse:
        context = "requesting a password reset"
        try:
            request = ForgotPasswordRequest(email=email)
        except ValidationError as exc:
            raise invalid_payload(exc, context) from exc
        body = await self._public.post(
            "/auth/forgot-password", json=request.model_dump(), context=context, scope=scope
        )
        return parse_model(MessageResponse, body, context)

    async def reset_password(self, token: str, password: str,
                             scope: Optional[RequestScope] = None) -> MessageResponse:
        context = "resetting the password"
        try:
            request = ResetPasswordRequest(token=token, password=password)
        except ValidationError as exc:
            raise invalid_payload(exc, context) from exc
        body = await self._public.post(
            "/auth/reset-password", json=request.model_dump(), context=context, scope=scope
        )
        return parse_model(MessageResponse, body, context)

    async def verify_email(self, token: str, scope: Optional[RequestScope] = None) -> VerifyEmailResponse:
        context = "verifying the email address"
        try:
            request = VerifyEmailRequest(token=token)
        except ValidationError as exc:
            raise invalid_payload(exc, context) from exc
        body = await self._public.post(
            "/auth/verify-email", json=request.model_dump(), context=context, scope=scope
        )
        return parse_model(VerifyEmailResponse, body, context)
