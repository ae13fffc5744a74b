import unittest
from unittest.mock import MagicMock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from products_backend.app import app, create_app
from products_backend.config import Settings
from products_backend.dependencies import Backends, in_memory_backends
from products_backend.errors import BackendError


def _settings(**overrides) -> Settings:
    values = {"supabase_url": None, "supabase_key": None}
    values.update(overrides)
    return Settings(**values)


class ProductsApiTests(unittest.TestCase):
    def setUp(self):
        self.backends = in_memory_backends()
        self.client = TestClient(create_app(_settings(), backends=self.backends))

    def test_product_lifecycle(self):
        created = self.client.post("/products", json={"name": "Widget", "price": 9.99})
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json(), [{"id": 1, "name": "Widget", "price": 9.99}])

        updated = self.client.put("/products/1", json={"name": "Widget", "price": 12.00})
        self.assertEqual(updated.status_code, 200)
        self.assertEqual(updated.json(), [{"id": 1, "name": "Widget", "price": 12.0}])

        deleted = self.client.delete("/products/1")
        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(deleted.json(), [{"id": 1, "name": "Widget", "price": 12.0}])

        listed = self.client.get("/products")
        self.assertEqual(listed.status_code, 200)
        self.assertEqual(listed.json(), [])

    def test_update_with_partial_body_keeps_other_fields(self):
        self.client.post("/products", json={"name": "Widget", "price": 9.99})
        response = self.client.put("/products/1", json={"price": 5})
        self.assertEqual(response.json(), [{"id": 1, "name": "Widget", "price": 5}])

    def test_update_and_delete_unknown_id_return_empty_list(self):
        self.assertEqual(self.client.put("/products/9", json={"name": "x"}).json(), [])
        response = self.client.delete("/products/9")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])

    def test_invalid_product_body_is_a_400_error(self):
        response = self.client.post("/products", json={"name": "Widget"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("price", response.json()["error"])
        self.assertEqual(self.client.get("/products").json(), [])

    def test_non_json_body_is_a_400_error(self):
        response = self.client.post(
            "/products",
            content="not json",
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "JSON decode error"})

    def test_non_finite_price_is_rejected_before_storing(self):
        for body in ('{"name": "x", "price": 1e400}', '{"name": "x", "price": NaN}'):
            response = self.client.post(
                "/products",
                content=body,
                headers={"Content-Type": "application/json"},
            )
            self.assertEqual(response.status_code, 400)
            self.assertIn("price", response.json()["error"])

        listed = self.client.get("/products")
        self.assertEqual(listed.status_code, 200)
        self.assertEqual(listed.json(), [])

    def test_update_with_non_finite_price_leaves_product_unchanged(self):
        self.client.post("/products", json={"name": "Widget", "price": 9.99})
        response = self.client.put(
            "/products/1",
            content='{"price": Infinity}',
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            self.client.get("/products").json(),
            [{"id": 1, "name": "Widget", "price": 9.99}],
        )

    def test_integer_price_is_returned_as_sent(self):
        response = self.client.post("/products", json={"name": "Widget", "price": 10})
        self.assertEqual(response.status_code, 201)
        price = response.json()[0]["price"]
        self.assertEqual(price, 10)
        self.assertIsInstance(price, int)

    def test_backend_errors_are_reported_as_400(self):
        store = MagicMock()
        store.select_all.side_effect = BackendError("permission denied for table products")
        backends = Backends(store=store, auth=MagicMock(), mode="live")
        client = TestClient(create_app(_settings(), backends=backends))

        response = client.get("/products")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json(), {"error": "permission denied for table products"}
        )

    def test_health_reports_mode(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok", "mode": "mock"})

    def test_cors_allows_any_origin_by_default(self):
        response = self.client.get("/products", headers={"Origin": "http://localhost:3000"})
        self.assertEqual(response.headers.get("access-control-allow-origin"), "*")

    def test_module_level_app_is_servable(self):
        self.assertIsInstance(app, FastAPI)
        self.assertIn(app.state.backends.mode, ("mock", "live"))

    def test_api_prefix_is_applied(self):
        client = TestClient(
            create_app(_settings(api_prefix="/api"), backends=in_memory_backends())
        )
        self.assertEqual(client.get("/api/products").status_code, 200)
        self.assertEqual(client.get("/products").status_code, 404)


class AuthApiTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(create_app(_settings(), backends=in_memory_backends()))

    def test_signup_then_login(self):
        credentials = {"email": "ana@example.com", "password": "s3cret"}
        signup = self.client.post("/signup", json=credentials)
        self.assertEqual(signup.status_code, 200)
        self.assertEqual(
            signup.json(),
            {"data": {"id": 1, "email": "ana@example.com", "password": "s3cret"}},
        )

        login = self.client.post("/login", json=credentials)
        self.assertEqual(login.status_code, 200)
        self.assertEqual(login.json(), signup.json())

    def test_duplicate_signup_is_rejected(self):
        credentials = {"email": "ana@example.com", "password": "s3cret"}
        self.client.post("/signup", json=credentials)
        response = self.client.post("/signup", json=credentials)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "User already exists"})

    def test_login_with_wrong_password_is_rejected(self):
        self.client.post("/signup", json={"email": "ana@example.com", "password": "s3cret"})
        response = self.client.post(
            "/login", json={"email": "ana@example.com", "password": "nope"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Invalid credentials"})

    def test_signup_without_password_is_a_400_error(self):
        response = self.client.post("/signup", json={"email": "ana@example.com"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("password", response.json()["error"])


if __name__ == "__main__":
    unittest.main()
