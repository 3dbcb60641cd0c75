"""Root API router: probes, app info and the versioned API."""

from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from rbac_admin import __version__
from rbac_admin.api.dependencies import DBSession
from rbac_admin.config import settings
from rbac_admin.core.auth.routes import router as auth_router
from rbac_admin.core.errors import CatalogIntegrityError
from rbac_admin.core.permissions.catalog import PermissionCatalog
from rbac_admin.core.permissions.menu import MenuTreeBuilder
from rbac_admin.core.permissions.repos import AccessRepository
from rbac_admin.modules import discover_modules


class HealthResponse(BaseModel):
    status: str


class ReadinessResponse(BaseModel):
    """Per-check results; anything other than ``ok`` means degraded."""

    status: str
    checks: dict[str, str]


async def _check_catalog(db: DBSession) -> dict[str, str]:
    repository = AccessRepository(db)
    checks: dict[str, str] = {}

    problems = PermissionCatalog(await repository.get_permission_records()).problems()
    checks["permission_catalog"] = (
        "ok" if not problems else f"{len(problems)} problem(s)"
    )

    try:
        MenuTreeBuilder(await repository.get_menu_records())
        checks["menu_catalog"] = "ok"
    except CatalogIntegrityError as e:
        checks["menu_catalog"] = e.message

    return checks


health_router = APIRouter(tags=["health"])


@health_router.get(
    "/health/live",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Returns 200 if the process is running.",
)
async def liveness() -> HealthResponse:
    return HealthResponse(status="alive")


@health_router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description=(
        "Checks database connectivity and that the permission and menu "
        "catalogs can be resolved."
    ),
)
async def readiness(db: DBSession) -> JSONResponse:
    """Readiness probe endpoint.

    A menu cycle would fail every session request, so it is reported
    here as well.
    """
    checks: dict[str, str] = {}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
        checks.update(await _check_catalog(db))
    except SQLAlchemyError as e:
        checks["database"] = str(e)

    ready = all(v == "ok" for v in checks.values())
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=ReadinessResponse(
            status="ready" if ready else "degraded",
            checks=checks,
        ).model_dump(),
    )


@health_router.get(
    "/info",
    summary="Application info",
    description="Returns application metadata.",
)
async def info() -> dict[str, Any]:
    return {
        "app": settings.app_name,
        "version": __version__,
        "environment": settings.environment,
        "debug": settings.debug,
    }


def build_v1_router() -> APIRouter:
    """Mount the session routes and every discovered module under /api/v1."""
    v1 = APIRouter(prefix="/api/v1")
    v1.include_router(auth_router)
    for module_router in discover_modules():
        v1.include_router(module_router)
    return v1


api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(build_v1_router())
