"""Tests for owner endpoints."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.integration


async def test_create_and_get_owner(client: AsyncClient) -> None:
    """Test explicit owner registration."""
    response = await client.post(
        "/api/v1/owners/",
        json={"national_id": "11122233344", "name": "João", "email": "joao@example.com"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["national_id"] == "11122233344"
    assert data["email"] == "joao@example.com"

    response = await client.get("/api/v1/owners/11122233344")
    assert response.status_code == 200
    assert response.json()["name"] == "João"


async def test_create_duplicate_owner(client: AsyncClient, test_owner) -> None:
    """Test that a national ID can only be registered once."""
    response = await client.post("/api/v1/owners/", json={"national_id": test_owner.national_id})
    assert response.status_code == 409
    assert response.json()["error_code"] == "CONFLICT"


async def test_create_owner_invalid_email(client: AsyncClient) -> None:
    """Test email validation."""
    response = await client.post(
        "/api/v1/owners/", json={"national_id": "11122233344", "email": "not-an-email"}
    )
    assert response.status_code == 422


async def test_list_owners(client: AsyncClient, test_investments) -> None:
    """Test listing owners, including those created implicitly."""
    response = await client.get("/api/v1/owners/")
    assert response.status_code == 200
    assert {o["national_id"] for o in response.json()} == {"12345678901", "98765432100"}


async def test_update_owner(client: AsyncClient, test_owner) -> None:
    """Test updating an owner's optional fields."""
    response = await client.put(
        f"/api/v1/owners/{test_owner.national_id}",
        json={"attributes": {"risk_profile": "moderate"}},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["attributes"] == {"risk_profile": "moderate"}
    assert data["name"] == "Maria Silva"


async def test_get_unknown_owner(client: AsyncClient) -> None:
    """Test 404 for an unregistered national ID."""
    response = await client.get("/api/v1/owners/00000000000")
    assert response.status_code == 404


async def test_delete_owner_conflict_then_success(client: AsyncClient, test_investments) -> None:
    """An owner can be deleted only after their investments are gone."""
    response = await client.delete("/api/v1/owners/12345678901")
    assert response.status_code == 409

    for investment in test_investments[:2]:
        response = await client.delete(f"/api/v1/investments/{investment.id}")
        assert response.status_code == 204

    response = await client.delete("/api/v1/owners/12345678901")
    assert response.status_code == 204

    response = await client.get("/api/v1/owners/12345678901")
    assert response.status_code == 404
