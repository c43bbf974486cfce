# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
Member Directory Service
========================
Manages a directory of members, each assigned to exactly one role.
Enforces unique usernames, emails and role names, keeps every member
pointing at an existing role, and serves flattened member views
(member fields + role name/description).

Storage: in-memory by default, SQL when DATABASE_URL is set.

Port: 8005
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from member_directory.controllers import member_controller, role_controller, system_controller
from member_directory.core.config import settings
from member_directory.core.dependencies import get_engine, get_member_service, get_role_service
from member_directory.core.logging import get_logger
from member_directory.middleware import MetricsMiddleware, RequestIDMiddleware

logger = get_logger("member-directory")


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    if settings.SEED_DEFAULT_DATA:
        get_role_service().seed_defaults()
        get_member_service().seed_defaults()
    logger.info("Member directory started (storage=%s)",
                "sql" if settings.uses_database else "memory")
    yield
    engine = get_engine()
    if engine is not None:
        engine.dispose()
        logger.info("Shutting down — connection pool disposed")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Member Directory Service",
    description="Members and roles with uniqueness and referential integrity.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    return JSONResponse(status_code=500, content={"error": "internal_server_error", "detail": str(exc)})


app.include_router(system_controller.router)
app.include_router(role_controller.router)
app.include_router(member_controller.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
