from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from src.db.CRUD import ProductRepository

# ----------------------------
# POST /api/products
# ----------------------------


def test_create_displays_validation_errors(client: TestClient):
    res = client.post("/api/products", json={})

    assert res.status_code == 400
    body = res.json()
    assert "errors" in body
    assert len(body["errors"]) == 4
    assert [e["path"] for e in body["errors"]] == ["name", "price", "price", "price"]


def test_create_validates_price_greater_than_zero(client: TestClient):
    res = client.post("/api/products", json={"name": "Keyboard - Testing", "price": 0})

    assert res.status_code == 400
    errors = res.json()["errors"]
    assert len(errors) == 1
    assert errors[0]["msg"] == "Invalid price"


def test_create_validates_price_is_number_and_greater_than_zero(client: TestClient):
    res = client.post("/api/products", json={"name": "Keyboard - Testing", "price": "hola"})

    assert res.status_code == 400
    errors = res.json()["errors"]
    assert len(errors) == 2
    assert [e["msg"] for e in errors] == ["Value no validate", "Invalid price"]
    assert errors[0]["value"] == "hola"


def test_create_product(client: TestClient):
    res = client.post("/api/products", json={"name": "Keyboard - Testing", "price": 200})

    assert res.status_code == 201
    body = res.json()
    assert "errors" not in body
    assert body["message"] == "created successfully"
    assert body["data"]["name"] == "Keyboard - Testing"
    assert body["data"]["price"] == 200
    assert body["data"]["availability"] is True
    assert set(body["data"]) == {"id", "name", "price", "availability"}


def test_create_ignores_availability_and_accepts_numeric_string(client: TestClient):
    res = client.post(
        "/api/products",
        json={"name": "Mouse", "price": "12.5", "availability": False},
    )

    assert res.status_code == 201
    data = res.json()["data"]
    assert data["price"] == 12.5
    assert data["availability"] is True


def test_create_with_malformed_json(client: TestClient):
    res = client.post(
        "/api/products",
        content=b"{name: ",
        headers={"content-type": "application/json"},
    )

    assert res.status_code == 400
    assert res.json()["errors"][0]["msg"] == "Invalid JSON body"


@pytest.mark.parametrize(
    "content",
    [b'{"name": "x", "price": NaN}', b'{"name": "x", "price": Infinity}', b'{"name": "x", "price": -Infinity}'],
)
def test_create_rejects_non_json_constants(client: TestClient, content: bytes):
    res = client.post("/api/products", content=content, headers={"content-type": "application/json"})

    assert res.status_code == 400
    assert [e["msg"] for e in res.json()["errors"]] == ["Invalid JSON body"]


def test_create_with_overflowing_price_literal(client: TestClient):
    res = client.post(
        "/api/products",
        content=b'{"name": "x", "price": 1e400}',
        headers={"content-type": "application/json"},
    )

    assert res.status_code == 400
    errors = res.json()["errors"]
    assert [e["msg"] for e in errors] == ["Value no validate", "Invalid price"]
    assert errors[0]["value"] is None


def test_create_with_huge_price_string(client: TestClient):
    res = client.post("/api/products", json={"name": "x", "price": "1" + "0" * 400})

    assert res.status_code == 400
    assert [e["msg"] for e in res.json()["errors"]] == ["Invalid price"]
    assert client.get("/api/products").json() == {"data": []}


def test_create_with_inf_price_string(client: TestClient):
    res = client.post("/api/products", json={"name": "x", "price": "inf"})

    assert res.status_code == 400
    assert [e["msg"] for e in res.json()["errors"]] == ["Value no validate", "Invalid price"]


# ----------------------------
# GET /api/products
# ----------------------------


def test_list_returns_json_data(client: TestClient, product: dict):
    res = client.get("/api/products")

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("application/json")
    assert res.json() == {"data": [product]}


def test_list_empty(client: TestClient):
    res = client.get("/api/products")

    assert res.status_code == 200
    assert res.json() == {"data": []}


def test_list_is_limited_and_ordered_by_id(client: TestClient):
    for i in range(12):
        client.post("/api/products", json={"name": f"Product {i}", "price": i + 1})

    data = client.get("/api/products").json()["data"]
    assert len(data) == 10
    ids = [p["id"] for p in data]
    assert ids == sorted(ids)
    assert data[0]["name"] == "Product 0"


# ----------------------------
# GET /api/products/{id}
# ----------------------------


def test_get_non_existent_product(client: TestClient):
    res = client.get("/api/products/2000")

    assert res.status_code == 404
    assert res.json() == {"error": "Product not found!"}


@pytest.mark.parametrize("method", ["get", "patch", "delete"])
def test_id_outside_key_range_is_not_found(client: TestClient, method: str):
    res = getattr(client, method)("/api/products/99999999999999999999")

    assert res.status_code == 404
    assert res.json() == {"error": "Product not found!"}


def test_update_id_outside_key_range_is_not_found(client: TestClient):
    res = client.put("/api/products/99999999999999999999", json=VALID_UPDATE)

    assert res.status_code == 404


def test_get_checks_valid_id(client: TestClient):
    res = client.get("/api/products/not-valid-url")

    assert res.status_code == 400
    errors = res.json()["errors"]
    assert len(errors) == 1
    assert errors[0]["msg"] == "Invalid Id"
    assert errors[0]["location"] == "params"


def test_get_single_product(client: TestClient, product: dict):
    res = client.get(f"/api/products/{product['id']}")

    assert res.status_code == 200
    assert res.json() == {"data": product}


def test_repeated_get_is_stable_until_mutation(client: TestClient, product: dict):
    url = f"/api/products/{product['id']}"
    first = client.get(url).json()
    assert client.get(url).json() == first

    client.patch(url)
    assert client.get(url).json() != first


# ----------------------------
# PUT /api/products/{id}
# ----------------------------

VALID_UPDATE = {"name": "Monitor Nuevo", "price": 444, "availability": True}


def test_update_checks_valid_id(client: TestClient):
    res = client.put("/api/products/no-valid-url", json=VALID_UPDATE)

    assert res.status_code == 400
    errors = res.json()["errors"]
    assert len(errors) == 1
    assert errors[0]["msg"] == "Invalid Id"
    assert "data" not in res.json()


def test_update_non_existent_product(client: TestClient):
    res = client.put("/api/products/2000", json=VALID_UPDATE)

    assert res.status_code == 404
    assert res.json() == {"error": "Product not found!"}


def test_update_displays_validation_errors(client: TestClient, product: dict):
    res = client.put(f"/api/products/{product['id']}", json={})

    assert res.status_code == 400
    assert len(res.json()["errors"]) == 6
    assert "data" not in res.json()


def test_update_validates_price_greater_than_zero(client: TestClient, product: dict):
    res = client.put(f"/api/products/{product['id']}", json={**VALID_UPDATE, "price": 0})

    assert res.status_code == 400
    errors = res.json()["errors"]
    assert len(errors) == 1
    assert errors[0]["msg"] == "Invalid price"


def test_update_validates_availability(client: TestClient, product: dict):
    res = client.put(
        f"/api/products/{product['id']}", json={**VALID_UPDATE, "availability": "yes"}
    )

    assert res.status_code == 400
    assert [e["msg"] for e in res.json()["errors"]] == ["Invalid availability"]


def test_update_existing_product(client: TestClient, product: dict):
    res = client.put(
        f"/api/products/{product['id']}",
        json={"name": "Monitor Nuevo", "price": 444, "availability": False},
    )

    assert res.status_code == 200
    assert res.json() == {
        "data": {"id": product["id"], "name": "Monitor Nuevo", "price": 444, "availability": False}
    }


# ----------------------------
# PATCH /api/products/{id}
# ----------------------------


def test_patch_checks_valid_id(client: TestClient):
    res = client.patch("/api/products/not-valid-id")

    assert res.status_code == 400
    assert res.json()["errors"][0]["msg"] == "Invalid Id"


def test_patch_non_existent_product(client: TestClient):
    res = client.patch("/api/products/2000")

    assert res.status_code == 404
    assert res.json()["error"] == "Product not found!"


def test_patch_toggles_availability(client: TestClient, product: dict):
    url = f"/api/products/{product['id']}"

    res = client.patch(url)
    assert res.status_code == 200
    assert res.json()["data"]["availability"] is False

    res = client.patch(url)
    assert res.json()["data"]["availability"] is True


# ----------------------------
# DELETE /api/products/{id}
# ----------------------------


def test_delete_checks_valid_id(client: TestClient):
    res = client.delete("/api/products/not-valid")

    assert res.status_code == 400
    assert res.json()["errors"][0]["msg"] == "Invalid Id"


def test_delete_non_existent_product(client: TestClient):
    res = client.delete("/api/products/2000")

    assert res.status_code == 404
    assert res.json()["error"] == "Product not found!"


def test_delete_product(client: TestClient, product: dict):
    url = f"/api/products/{product['id']}"

    res = client.delete(url)
    assert res.status_code == 200
    assert res.json() == {"data": "Removed Product"}

    assert client.delete(url).status_code == 404
    assert client.get(url).status_code == 404


def test_deleted_id_is_not_reused(client: TestClient, product: dict):
    client.delete(f"/api/products/{product['id']}")

    res = client.post("/api/products", json={"name": "Another", "price": 10})
    assert res.json()["data"]["id"] > product["id"]


# ----------------------------
# Storage failures, CORS, docs
# ----------------------------


def test_storage_error_is_reported_as_500(client: TestClient):
    error = OperationalError("SELECT", {}, Exception("connection lost"))
    with patch.object(ProductRepository, "find_all", side_effect=error):
        res = client.get("/api/products")

    assert res.status_code == 500
    assert res.json() == {"error": "Internal server error"}


def test_disallowed_origin_is_rejected(client: TestClient):
    res = client.get("/api/products", headers={"Origin": "http://evil.example"})

    assert res.status_code == 403
    assert res.json() == {"error": "Not allowed by CORS"}


def test_allowed_origin_gets_cors_headers(client: TestClient):
    res = client.get("/api/products", headers={"Origin": "http://localhost:5173"})

    assert res.status_code == 200
    assert res.headers["access-control-allow-origin"] == "http://localhost:5173"


def test_openapi_documents_products_routes(client: TestClient):
    spec = client.get("/openapi.json").json()

    assert spec["info"]["title"] == "Products REST API"
    paths = spec["paths"]
    assert set(paths["/api/products"]) == {"get", "post"}
    assert set(paths["/api/products/{id}"]) == {"get", "put", "patch", "delete"}
    assert "requestBody" in paths["/api/products"]["post"]
    assert paths["/api/products/{id}"]["put"]["parameters"][0]["name"] == "id"

    assert client.get("/docs").status_code == 200
