from saloon_directory.api.deps import get_saloon_service
from saloon_directory.main import app
from saloon_directory.services.saloon import build_saloon_service

OWNER = {"X-Caller-Principal": "u1"}
OTHER = {"X-Caller-Principal": "u2"}


def _create(client, headers=OWNER, **overrides) -> dict:
    body = {"name": "Joe's", "location": "NYC", "saloon_url": "http://a"}
    body.update(overrides)
    response = client.post("/api/v1/saloons", json=body, headers=headers)
    assert response.status_code == 201
    return response.json()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


# ============================================================================
# CREATE SALOON TESTS
# ============================================================================


def test_create_saloon_success(client):
    """Test successful saloon creation; the caller becomes the owner."""
    data = _create(client)
    assert data["id"] == 1
    assert data["owner"] == "u1"
    assert data["name"] == "Joe's"
    assert data["location"] == "NYC"
    assert data["saloon_url"] == "http://a"
    assert data["services"] == []
    assert isinstance(data["created_at"], int)
    assert data["updated_at"] is None


def test_create_saloon_without_principal(client):
    """Test saloon creation without a caller principal fails."""
    response = client.post(
        "/api/v1/saloons",
        json={"name": "Joe's", "location": "NYC", "saloon_url": "http://a"},
    )
    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"


def test_create_saloon_blank_location(client):
    """Test saloon creation with a whitespace-only location fails."""
    response = client.post(
        "/api/v1/saloons",
        json={"name": "Joe's", "location": "  ", "saloon_url": "http://a"},
        headers=OWNER,
    )
    assert response.status_code == 400
    assert response.json() == {"detail": "location must not be empty", "code": "VALIDATION_ERROR"}


def test_create_saloon_name_too_long(client):
    """Test saloon creation with an overlong name is a validation error, not a storage failure."""
    response = client.post(
        "/api/v1/saloons",
        json={"name": "x" * 70000, "location": "NYC", "saloon_url": "http://a"},
        headers=OWNER,
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert client.get("/api/v1/saloons").json() == []


def test_create_saloon_lone_surrogate(client):
    """Test saloon creation with text that cannot be stored as UTF-8 fails validation."""
    response = client.post(
        "/api/v1/saloons",
        content=b'{"name": "\\ud800", "location": "NYC", "saloon_url": "http://a"}',
        headers={**OWNER, "Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"detail": "name must be valid UTF-8 text", "code": "VALIDATION_ERROR"}


def test_create_saloon_missing_field(client):
    """Test saloon creation with a missing field is rejected by schema validation."""
    response = client.post(
        "/api/v1/saloons",
        json={"name": "Joe's", "location": "NYC"},
        headers=OWNER,
    )
    assert response.status_code == 422


# ============================================================================
# GET / LIST / SEARCH TESTS
# ============================================================================


def test_get_saloon_by_id(client):
    created = _create(client)
    response = client.get(f"/api/v1/saloons/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created


def test_get_saloon_not_found(client):
    response = client.get("/api/v1/saloons/999")
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"
    assert "id=999" in response.json()["detail"]


def test_list_saloons_with_offset_and_limit(client):
    for i in range(4):
        _create(client, name=f"Saloon {i}")

    response = client.get("/api/v1/saloons", params={"offset": 1, "limit": 2})
    assert response.status_code == 200
    assert [s["id"] for s in response.json()] == [2, 3]

    response = client.get("/api/v1/saloons", params={"offset": 4})
    assert response.status_code == 200
    assert response.json() == []


def test_list_saloons_rejects_negative_offset(client):
    response = client.get("/api/v1/saloons", params={"offset": -1})
    assert response.status_code == 422


def test_search_saloons(client):
    _create(client, name="Joe's", location="NYC")
    _create(client, name="Ann's", location="LA")
    _create(client, name="Joe's", location="LA")

    response = client.get("/api/v1/saloons/search/by-name", params={"name": "Joe's"})
    assert response.status_code == 200
    assert [s["id"] for s in response.json()] == [1, 3]

    response = client.get("/api/v1/saloons/search/by-location", params={"location": "LA"})
    assert response.status_code == 200
    assert [s["id"] for s in response.json()] == [2, 3]

    response = client.get("/api/v1/saloons/search/by-location", params={"location": "Paris"})
    assert response.status_code == 200
    assert response.json() == []


# ============================================================================
# UPDATE SALOON TESTS
# ============================================================================


def test_update_saloon_as_owner(client):
    created = _create(client)
    response = client.put(
        f"/api/v1/saloons/{created['id']}",
        json={"name": "Joe's Place", "location": "NYC", "saloon_url": "http://b"},
        headers=OWNER,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Joe's Place"
    assert data["saloon_url"] == "http://b"
    assert data["updated_at"] is not None


def test_update_saloon_as_non_owner(client):
    created = _create(client)
    response = client.put(
        f"/api/v1/saloons/{created['id']}",
        json={"name": "Hijacked", "location": "NYC", "saloon_url": "http://b"},
        headers=OTHER,
    )
    assert response.status_code == 403
    assert response.json()["code"] == "NOT_AUTHORIZED"
    assert client.get(f"/api/v1/saloons/{created['id']}").json() == created


def test_update_missing_saloon_with_invalid_payload(client):
    response = client.put(
        "/api/v1/saloons/999",
        json={"name": "", "location": "NYC", "saloon_url": "http://b"},
        headers=OWNER,
    )
    assert response.status_code == 400


# ============================================================================
# SERVICE COLLECTION TESTS
# ============================================================================


def test_add_and_delete_services(client):
    created = _create(client)
    url = f"/api/v1/saloons/{created['id']}/services"

    response = client.post(url, json={"service_name": "Cut", "service_description": "Haircut"}, headers=OWNER)
    assert response.status_code == 200
    assert [s["service_name"] for s in response.json()["services"]] == ["Cut"]

    response = client.post(url, json={"service_name": "Cut", "service_description": "Haircut"}, headers=OTHER)
    assert response.status_code == 403

    response = client.delete(f"{url}/Cut", headers=OTHER)
    assert response.status_code == 403

    response = client.delete(f"{url}/Shave", headers=OWNER)
    assert response.status_code == 404
    assert "Shave" in response.json()["detail"]

    response = client.delete(f"{url}/Cut", headers=OWNER)
    assert response.status_code == 200
    assert response.json()["services"] == []


def test_add_service_to_missing_saloon(client):
    response = client.post(
        "/api/v1/saloons/999/services",
        json={"service_name": "Cut", "service_description": "Haircut"},
        headers=OWNER,
    )
    assert response.status_code == 404


# ============================================================================
# DELETE SALOON TESTS
# ============================================================================


def test_delete_saloon_as_non_owner_keeps_it(client):
    created = _create(client)
    response = client.delete(f"/api/v1/saloons/{created['id']}", headers=OTHER)
    assert response.status_code == 403
    assert client.get(f"/api/v1/saloons/{created['id']}").json() == created


def test_delete_saloon_as_owner(client):
    created = _create(client)
    response = client.delete(f"/api/v1/saloons/{created['id']}", headers=OWNER)
    assert response.status_code == 200
    assert response.json() == created

    assert client.get(f"/api/v1/saloons/{created['id']}").status_code == 404
    assert client.delete(f"/api/v1/saloons/{created['id']}", headers=OWNER).status_code == 404


# ============================================================================
# STORAGE FAILURE TESTS
# ============================================================================


def test_storage_failure_maps_to_internal_error(client, engine, clock):
    """Test a value over a misconfigured storage bound surfaces as a 500, not a crash."""
    tiny_service = build_saloon_service(engine, max_value_size=64, clock=clock)
    app.dependency_overrides[get_saloon_service] = lambda: tiny_service

    response = client.post(
        "/api/v1/saloons",
        json={"name": "Joe's", "location": "NYC", "saloon_url": "http://a"},
        headers=OWNER,
    )
    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"
