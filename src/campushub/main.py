"""
# campushub - Main Application Module

Entry point for the campushub API: the REST backend of a school organization-management
admin panel.

## Lifespan

**Startup**
1. **Database Connection**: connects to MongoDB with retry and exponential backoff.
2. **Index Creation**: creates or verifies the unique and lookup indexes for every collection.

**Shutdown**
1. **Database Disconnection**: closes the MongoDB connection pool.

Each phase is timed and reported through `log_application_lifecycle()`.

## Middleware

- **CORS** for the admin panel origins (`CORS_ORIGINS`), with credentials so the `token`
  cookie is sent.
- **RequestLoggingMiddleware** for per-request access logging.

## Routers

Every resource router is mounted under `settings.API_PREFIX` (`/api/v1` by default):
`auth`, `users`, `otp`, `school-events`, `orgs`, `officers`, `calendar-entries`,
`event-notifications`, `reports`, `audit-logs`.

## Observability

- `GET /health` reports database connectivity.
- `GET /metrics` exposes Prometheus metrics (`prometheus-fastapi-instrumentator`).
"""

from contextlib import asynccontextmanager
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
import uvicorn

from campushub.config import settings
from campushub.database import db_manager
from campushub.managers.logging_manager import get_logger
from campushub.routes.audit_logs import router as audit_logs_router
from campushub.routes.auth.routes import router as auth_router
from campushub.routes.calendar_entries import router as calendar_entries_router
from campushub.routes.event_notifications import router as event_notifications_router
from campushub.routes.officers import router as officers_router
from campushub.routes.organizations import router as organizations_router
from campushub.routes.otp import router as otp_router
from campushub.routes.reports import router as reports_router
from campushub.routes.school_events import router as school_events_router
from campushub.routes.users import router as users_router
from campushub.utils.exceptions import register_exception_handlers
from campushub.utils.logging_utils import (
    RequestLoggingMiddleware,
    log_application_lifecycle,
    log_error_with_context,
)

logger = get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Connect to MongoDB and ensure indexes before serving; disconnect on shutdown.

    A failed database connection aborts startup.
    """
    startup_start_time = time.time()
    log_application_lifecycle(
        "startup_initiated",
        {"app_name": settings.APP_NAME, "host": settings.HOST, "port": settings.PORT, "debug": settings.DEBUG},
    )

    try:
        db_connect_start = time.time()
        await db_manager.connect()
        log_application_lifecycle(
            "database_connected",
            {"database": settings.database_name, "duration": f"{time.time() - db_connect_start:.3f}s"},
        )
    except Exception as e:
        log_error_with_context(e, {"operation": "database_connection", "phase": "startup"})
        raise

    try:
        index_start = time.time()
        await db_manager.create_indexes()
        log_application_lifecycle("database_indexes_ready", {"duration": f"{time.time() - index_start:.3f}s"})
    except Exception as e:
        # Serving without indexes is degraded but functional
        log_error_with_context(e, {"operation": "database_index_creation", "phase": "startup"})

    log_application_lifecycle("startup_completed", {"duration": f"{time.time() - startup_start_time:.3f}s"})

    yield

    shutdown_start_time = time.time()
    log_application_lifecycle("shutdown_initiated")
    try:
        await db_manager.disconnect()
    except Exception as e:
        log_error_with_context(e, {"operation": "database_disconnection", "phase": "shutdown"})
    log_application_lifecycle("shutdown_completed", {"duration": f"{time.time() - shutdown_start_time:.3f}s"})


app = FastAPI(
    title=settings.APP_NAME,
    description="REST backend for the school organization-management admin panel.",
    version="1.0.0",
    lifespan=lifespan,
    redirect_slashes=False,
)

cors_origins = settings.cors_origins_list
logger.info("Configuring CORS with origins: %s", cors_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

routers_config = [
    ("auth", auth_router, "Sign-up, sign-in, password reset and profile"),
    ("users", users_router, "User account management"),
    ("otp", otp_router, "One-time password issue and verification"),
    ("school_events", school_events_router, "School event management"),
    ("organizations", organizations_router, "Student organization management"),
    ("officers", officers_router, "Organization officer terms"),
    ("calendar_entries", calendar_entries_router, "Event calendar bookmarks"),
    ("event_notifications", event_notifications_router, "SMS event notifications"),
    ("reports", reports_router, "Organization reports and approvals"),
    ("audit_logs", audit_logs_router, "Audit trail"),
]

included_routers = []
for router_name, router, description in routers_config:
    app.include_router(router, prefix=settings.API_PREFIX)
    included_routers.append({"name": router_name, "description": description})
    logger.info("Included %s router: %s", router_name, description)

log_application_lifecycle(
    "routers_configured", {"total_routers": len(routers_config), "routers": [r["name"] for r in included_routers]}
)


@app.get("/health", tags=["System"])
async def health():
    """Liveness plus database connectivity."""
    database_ok = await db_manager.health_check()
    return JSONResponse(
        status_code=200 if database_ok else 503,
        content={"success": database_ok, "status": "ok" if database_ok else "degraded", "database": database_ok},
    )


instrumentator = Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=True,
    should_respect_env_var=False,
)
instrumentator.instrument(app).expose(app, include_in_schema=False, endpoint="/metrics")
log_application_lifecycle("prometheus_configured", {"metrics_endpoint": "/metrics"})


if __name__ == "__main__":
    uvicorn.run(
        "campushub.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
