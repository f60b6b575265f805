"""
Unit tests for error normalization.
"""
import httpx
import pytest
from pydantic import BaseModel, ValidationError

from ekraf_admin.common.errors import (
    CONNECTIVITY_MESSAGE, ApiError, ApiValidationError, AuthorizationError, ConnectivityError,
    MalformedResponseError, NotFoundError, ServerError, invalid_payload, normalize_error, parse_model,
)
from ekraf_admin.common.schemas import PaginatedResponse
from ekraf_admin.common.session import MemoryStorage, SessionStore
from ekraf_admin.common.transport import Transport
from ekraf_admin.products.services import ProductsService


def _status_error(status_code, body=None, content=b""):
    request = httpx.Request("DELETE", "https://ekraf.test/api/products/42")
    if body is not None:
        response = httpx.Response(status_code, json=body, request=request)
    else:
        response = httpx.Response(status_code, content=content, request=request)
    return httpx.HTTPStatusError("status error", request=request, response=response)


class Item(BaseModel):
    id: int
    name: str


class TestNormalizeError:
    """Test the mapping of failures to ApiError subclasses."""

    def test_not_found_uses_server_message(self):
        """Test a 404 keeps the server message and the attempted operation."""
        error = normalize_error(_status_error(404, {"message": "Product not found"}), "deleting product #42")

        assert isinstance(error, NotFoundError)
        assert error.message == "Product not found"
        assert error.context == "deleting product #42"
        assert error.status_code == 404

    def test_server_error_without_message_uses_fallback(self):
        error = normalize_error(_status_error(500, {}), "deleting product #42")

        assert type(error) is ServerError
        assert error.message == "Failed while deleting product #42."
        assert error.status_code == 500

    def test_non_json_error_body_uses_fallback(self):
        error = normalize_error(_status_error(502, content=b"<html>Bad gateway</html>"), "listing products")

        assert type(error) is ServerError
        assert error.message == "Failed while listing products."

    @pytest.mark.parametrize("status_code", [401, 403])
    def test_authorization_statuses(self, status_code):
        error = normalize_error(_status_error(status_code, {"message": "Invalid authentication token"}),
                                "listing users")

        assert isinstance(error, AuthorizationError)
        assert error.message == "Invalid authentication token"

    def test_validation_error_keeps_field_list(self):
        body = {
            "message": "Validation failed",
            "errors": [{"field": "name", "message": "Field required"}],
        }
        error = normalize_error(_status_error(400, body), "updating product #42")

        assert isinstance(error, ApiValidationError)
        assert error.field_errors == [{"field": "name", "message": "Field required"}]

    def test_validation_error_accepts_field_mapping(self):
        body = {"message": "Invalid data", "errors": {"price": "must be positive"}}
        error = normalize_error(_status_error(422, body), "creating product")

        assert isinstance(error, ApiValidationError)
        assert error.field_errors == [{"field": "price", "message": "must be positive"}]

    def test_transport_failure_is_connectivity(self):
        """Test that no response at all maps to the connectivity message."""
        error = normalize_error(httpx.ConnectError("connection refused"), "listing products")

        assert isinstance(error, ConnectivityError)
        assert error.message == CONNECTIVITY_MESSAGE
        assert error.status_code is None
        assert error.context == "listing products"

    def test_timeout_is_connectivity(self):
        error = normalize_error(httpx.ReadTimeout("timed out"), "listing products")
        assert isinstance(error, ConnectivityError)

    def test_decode_failure_is_malformed(self):
        error = normalize_error(ValueError("Expecting value"), "fetching product #1")

        assert isinstance(error, MalformedResponseError)
        assert error.message == "Failed while fetching product #1."

    def test_unknown_failure_is_unexpected(self):
        error = normalize_error(RuntimeError("boom"), "fetching product #1")

        assert type(error) is ApiError
        assert error.message == "An unexpected error occurred while fetching product #1."

    def test_normalized_errors_pass_through(self):
        original = NotFoundError("Product not found", context="fetching product #1", status_code=404)
        assert normalize_error(original, "something else") is original

    def test_str_is_the_message(self):
        error = ApiError("Failed while listing products.", context="listing products")
        assert str(error) == "Failed while listing products."
        assert "listing products" in repr(error)


class TestParseModel:
    """Test response body validation."""

    def test_valid_body(self):
        item = parse_model(Item, {"id": 1, "name": "Kopi"}, "fetching item")
        assert item.name == "Kopi"

    def test_wrong_shape_is_malformed(self):
        with pytest.raises(MalformedResponseError) as exc_info:
            parse_model(Item, {"id": "not-a-number"}, "fetching item")
        assert exc_info.value.context == "fetching item"

    def test_current_page_beyond_total_is_malformed(self):
        body = {"data": [], "totalPages": 2, "currentPage": 3}
        with pytest.raises(MalformedResponseError):
            parse_model(PaginatedResponse[Item], body, "listing items")

    @pytest.mark.parametrize("body", [{}, {"message": "x"}])
    def test_page_without_data_is_malformed(self, body):
        with pytest.raises(MalformedResponseError):
            parse_model(PaginatedResponse[Item], body, "listing items")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [httpx.Response(200), httpx.Response(200, json={"message": "oops"})])
    async def test_product_list_without_data_is_malformed(self, response):
        """Test an empty or data-less list body fails instead of reading as an empty page."""
        transport = Transport(SessionStore(MemoryStorage()), base_url="http://testserver/api",
                              http_transport=httpx.MockTransport(lambda request: response))
        async with transport:
            with pytest.raises(MalformedResponseError) as exc_info:
                await ProductsService(transport).list()

        assert exc_info.value.context == "listing products"


class TestInvalidPayload:
    def test_lists_offending_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            Item.model_validate({"id": 1})

        error = invalid_payload(exc_info.value, "creating item")

        assert isinstance(error, ApiValidationError)
        assert error.status_code is None
        assert error.message == "Invalid data while creating item: name."
        assert error.field_errors[0]["field"] == "name"
