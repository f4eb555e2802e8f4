"""
HTTP helpers shared by the route tests.
"""
from httpx import AsyncClient


async def register(client: AsyncClient, username: str, password: str, company: str) -> dict:
    """Register through the API and return the created user."""
    response = await client.post(
        "/api/auth/register",
        json={"username": username, "password": password, "companyName": company},
    )
    assert response.status_code == 200, response.text
    return response.json()["user"]


async def create_object(client: AsyncClient, **attrs) -> dict:
    response = await client.post("/api/objects", json=attrs)
    assert response.status_code == 200, response.text
    return response.json()
