"""
Integration tests for the sandbox backend endpoints.
"""
from fastapi.testclient import TestClient


def test_main_app_is_seeded():
    """Test the uvicorn entry point serves the demo data set."""
    from main import app

    response = TestClient(app).post(
        "/api/auth/login/admin",
        json={"usernameOrEmail": "admin@ekraf.test", "password": "admin123"},
    )

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "admin@ekraf.test"


class TestSandboxEndpoints:
    """Test the wire behaviour the clients rely on."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json() == {"message": "Ekraf Admin Sandbox API"}

    def test_list_products_envelope(self, client):
        response = client.get("/api/products?page=1&limit=2")

        assert response.status_code == 200
        body = response.json()
        assert body["totalPages"] == 2
        assert body["currentPage"] == 1
        assert len(body["data"]) == 2
        # Status is reported under both names with the backend's values
        assert body["data"][0]["status"] == "disetujui"
        assert body["data"][0]["status_produk"] == "disetujui"

    def test_page_out_of_range(self, client):
        response = client.get("/api/products?page=9&limit=2")
        assert response.status_code == 400

    def test_write_without_token(self, client):
        response = client.post("/api/products", json={"name": "X", "price": 1, "business_category_id": 1})

        assert response.status_code == 401
        assert response.json() == {"message": "Authorization header is required"}

    def test_unknown_token(self, client):
        response = client.delete("/api/products/1", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid authentication token"

    def test_partial_put_is_rejected(self, client, admin_token):
        """Test that the backend validates the complete record on update."""
        response = client.put(
            "/api/products/1",
            json={"stock": 3},
            headers={"Authorization": f"Bearer {admin_token}"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        fields = {err["field"] for err in body["errors"]}
        assert {"name", "price", "business_category_id"} <= fields

    def test_unknown_category_on_create(self, client, admin_token):
        response = client.post(
            "/api/products",
            json={"name": "X", "price": 1000, "business_category_id": 99},
            headers={"Authorization": f"Bearer {admin_token}"},
        )
        assert response.status_code == 400

    def test_missing_product(self, client):
        response = client.get("/api/products/404")

        assert response.status_code == 404
        assert response.json() == {"message": "Product not found"}

    def test_unknown_route_uses_message_body(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert "message" in response.json()

    def test_delete_removes_links(self, client, admin_token, sandbox_state):
        sandbox_state.add_link(1, "https://shopee.test/kopi", "Shopee")

        response = client.delete("/api/products/1", headers={"Authorization": f"Bearer {admin_token}"})

        assert response.status_code == 200
        assert sandbox_state.links == {}

    def test_partner_cannot_manage_users(self, client):
        login = client.post(
            "/api/auth/login/umkm",
            json={"usernameOrEmail": "sari@umkm.test", "password": "sari12345"},
        )
        token = login.json()["token"]

        response = client.get("/api/users", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403

    def test_user_list_reports_verification(self, client, admin_token):
        response = client.get("/api/users", headers={"Authorization": f"Bearer {admin_token}"})

        users = {u["email"]: u for u in response.json()["data"]}
        assert users["sari@umkm.test"]["verifiedAt"] is not None
        assert users["budi@umkm.test"]["verifiedAt"] is None
        assert users["sari@umkm.test"]["productCount"] == 3
