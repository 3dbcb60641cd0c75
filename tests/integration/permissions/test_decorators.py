"""Integration tests for permission decorators.

These tests verify the permission decorator behavior on routes including:
- require_permission
- require_any_permission
- require_all_permissions
"""

import pytest
from fastapi import APIRouter
from httpx import ASGITransport, AsyncClient

from rbac_admin.api.dependencies import DBSession
from rbac_admin.core.auth.dependencies import CurrentUser
from rbac_admin.core.permissions.decorators import (
    require_all_permissions,
    require_any_permission,
    require_permission,
)


pytestmark = pytest.mark.integration


# Create a test router with protected endpoints
test_router = APIRouter()


@test_router.get("/protected-single")
@require_permission("dashboard.view")
async def protected_single(current_user: CurrentUser, db: DBSession):
    """Endpoint requiring single permission."""
    return {"status": "ok", "user_id": str(current_user.id)}


@test_router.get("/protected-any")
@require_any_permission(["users.view", "dashboard.view"])
async def protected_any(current_user: CurrentUser, db: DBSession):
    """Endpoint requiring any of the permissions."""
    return {"status": "ok", "user_id": str(current_user.id)}


@test_router.get("/protected-all")
@require_all_permissions(["users.view", "dashboard.view"])
async def protected_all(current_user: CurrentUser, db: DBSession):
    """Endpoint requiring all permissions."""
    return {"status": "ok", "user_id": str(current_user.id)}


class TestPermissionDecorators:
    """Tests for permission decorators on routes."""

    @pytest.fixture
    async def test_client(self, app):
        """Create test client for the app with the test router mounted."""
        app.include_router(test_router, prefix="/test")
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as client:
            yield client

    async def test_single_permission_granted(self, test_client, member_headers) -> None:
        response = await test_client.get("/test/protected-single", headers=member_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    async def test_any_permission_granted(self, test_client, member_headers) -> None:
        response = await test_client.get("/test/protected-any", headers=member_headers)

        assert response.status_code == 200

    async def test_all_permissions_denied(self, test_client, member_headers) -> None:
        response = await test_client.get("/test/protected-all", headers=member_headers)

        assert response.status_code == 403
        body = response.json()
        assert body["type"].endswith("/permission_denied")
        assert body["required_permissions"] == ["users.view", "dashboard.view"]

    async def test_all_permissions_granted(self, test_client, admin_headers) -> None:
        response = await test_client.get("/test/protected-all", headers=admin_headers)

        assert response.status_code == 200

    async def test_unauthenticated(self, test_client, seeded) -> None:
        response = await test_client.get("/test/protected-single")

        assert response.status_code == 401
