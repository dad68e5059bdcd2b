"""Root API router: probes, application info and the versioned API."""

from typing import Any

import structlog
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from todolist import __version__
from todolist.api.dependencies import DatabaseHandle
from todolist.config import settings
from todolist.core.auth.routes import router as auth_router
from todolist.core.tenancy import OptionalTenantCache
from todolist.modules import discover_modules


logger = structlog.get_logger()


class HealthResponse(BaseModel):
    status: str


class ReadinessResponse(BaseModel):
    """``checks`` maps each dependency to "ok" or "unavailable"."""

    status: str
    checks: dict[str, str]


# ============================================================
# Probes (served on every host, outside tenant resolution)
# ============================================================

health_router = APIRouter(tags=["health"])


@health_router.get(
    "/health/live",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Returns 200 while the process is running.",
)
async def liveness() -> HealthResponse:
    return HealthResponse(status="alive")


@health_router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description=(
        "503 when the database is unreachable. The tenant cache is reported "
        "when enabled but never fails the probe, since lookups fall back to "
        "the database."
    ),
    responses={503: {"model": ReadinessResponse}},
)
async def readiness(database: DatabaseHandle, tenant_cache: OptionalTenantCache) -> JSONResponse:
    checks = {"database": await _check("database", database.ping)}
    if tenant_cache is not None:
        checks["tenant_cache"] = await _check("tenant_cache", tenant_cache.ping)

    ready = checks["database"] == "ok"
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=ReadinessResponse(
            status="ready" if ready else "degraded",
            checks=checks,
        ).model_dump(),
    )


async def _check(name: str, probe: Any) -> str:
    try:
        await probe()
    except Exception as e:
        logger.warning("readiness_check_failed", check=name, error=str(e))
        return "unavailable"
    return "ok"


@health_router.get(
    "/info",
    summary="Application info",
)
async def info() -> dict[str, Any]:
    return {
        "app": settings.app_name,
        "version": __version__,
        "environment": settings.environment,
        "main_domain": settings.main_domain,
    }


# ============================================================
# Versioned API
# ============================================================

v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(auth_router)
for module_router in discover_modules():
    v1_router.include_router(module_router)

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(v1_router)
