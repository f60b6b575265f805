"""
Error normalization for every backend call.

Transport failures, non-2xx responses and malformed bodies are all turned into
an ``ApiError`` carrying the attempted operation (``context``) and a
human-readable ``message``.
"""
import json
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

CONNECTIVITY_MESSAGE = "Cannot reach the server. Check your internet connection."

M = TypeVar('M', bound=BaseModel)


class ApiError(Exception):
    """
    Base class for every failure surfaced by the resource clients.

    Attributes:
        message: Human-readable message, safe to show to the user
        context: Description of the attempted operation, e.g. "deleting product #42"
        status_code: HTTP status of the response, None when no response was received
        field_errors: Field-level validation details, when the server supplied them
    """

    def __init__(
        self,
        message: str,
        context: str = "",
        status_code: Optional[int] = None,
        field_errors: Optional[List[Dict[str, str]]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context
        self.status_code = status_code
        self.field_errors = field_errors or []

    def __str__(self):
        return self.message

    def __repr__(self):
        return (
            f"{type(self).__name__}(message={self.message!r}, context={self.context!r}, "
            f"status_code={self.status_code!r})"
        )


class ConnectivityError(ApiError):
    """No response was received at all."""


class MalformedResponseError(ApiError):
    """The response body could not be decoded into the expected shape."""


class RequestCancelledError(ApiError):
    """The request was abandoned because its scope was cancelled."""


class ServerError(ApiError):
    """The server answered with a status outside 2xx."""


class NotFoundError(ServerError):
    pass


class AuthorizationError(ServerError):
    pass


class ApiValidationError(ServerError):
    """Create/update rejected because of missing or invalid fields."""


def fallback_message(context: str) -> str:
    return f"Failed while {context}."


def unexpected_message(context: str) -> str:
    return f"An unexpected error occurred while {context}."


def _error_body(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}


def _field_errors(body: Dict[str, Any]) -> List[Dict[str, str]]:
    """Extract field-level details from ``errors`` as a list or a field -> message mapping."""
    errors = body.get("errors")
    if isinstance(errors, dict):
        return [{"field": str(field), "message": str(msg)} for field, msg in errors.items()]
    if isinstance(errors, list):
        return [
            {"field": str(err.get("field", "")), "message": str(err.get("message", ""))}
            for err in errors if isinstance(err, dict)
        ]
    return []


def _error_class_for(status_code: int) -> Type[ServerError]:
    if status_code == 404:
        return NotFoundError
    if status_code in (401, 403):
        return AuthorizationError
    if status_code in (400, 422):
        return ApiValidationError
    return ServerError


def normalize_error(exc: BaseException, context: str) -> ApiError:
    """
    Map a failure raised while talking to the backend into an ``ApiError``.

    Args:
        exc: The exception raised by httpx, JSON decoding or model validation
        context: Description of the attempted operation

    Returns:
        The normalized error; already-normalized errors are returned unchanged
    """
    if isinstance(exc, ApiError):
        return exc

    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        body = _error_body(response)
        message = body.get("message") or fallback_message(context)
        error_class = _error_class_for(response.status_code)
        error = error_class(
            str(message),
            context=context,
            status_code=response.status_code,
            field_errors=_field_errors(body),
        )
    elif isinstance(exc, httpx.TransportError):
        error = ConnectivityError(CONNECTIVITY_MESSAGE, context=context)
    elif isinstance(exc, (ValidationError, ValueError)):
        # json.JSONDecodeError is a ValueError as well
        error = MalformedResponseError(fallback_message(context), context=context)
    else:
        error = ApiError(unexpected_message(context), context=context)

    logger.error("API error in %s: %s (%s)", context, error.message, type(exc).__name__)
    return error


def parse_model(model: Type[M], payload: Any, context: str) -> M:
    """
    Validate a decoded response body against ``model``.

    Raises:
        MalformedResponseError: If the body does not have the expected shape
    """
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise normalize_error(exc, context) from exc


def invalid_payload(exc: ValidationError, context: str) -> ApiValidationError:
    """
    Turn a client-side payload validation failure into an ``ApiValidationError``.

    Used before a request is sent, so the error never has a status code.
    """
    field_errors = [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]
    fields = ", ".join(err["field"] for err in field_errors)
    error = ApiValidationError(
        f"Invalid data while {context}: {fields}.", context=context, field_errors=field_errors
    )
    logger.error("Rejected payload in %s: %s", context, fields)
    return error


def invalid_value(field: str, message: str, context: str) -> ApiValidationError:
    """Client-side rejection of a single argument that is not a model payload."""
    error = ApiValidationError(
        f"Invalid data while {context}: {field}.",
        context=context,
        field_errors=[{"field": field, "message": message}],
    )
    logger.error("Rejected %s in %s: %s", field, context, message)
    return error
