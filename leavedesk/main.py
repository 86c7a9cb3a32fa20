import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError
from starlette.exceptions import HTTPException

from leavedesk.core.config import settings
from leavedesk.core.exceptions import LeaveDeskError, StoreUnavailable
from leavedesk.middleware.request_log import RequestLogMiddleware

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from leavedesk.core.database import engine, init_db

    if settings.CREATE_TABLES_ON_STARTUP:
        await init_db()
    logger.info("%s started", settings.APP_NAME)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Middleware (order matters — outermost first)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLogMiddleware)


# ── Error rendering: every failure is {"error": message} ─────────────────────


@app.exception_handler(LeaveDeskError)
async def leavedesk_error_handler(request: Request, exc: LeaveDeskError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(DBAPIError)
async def store_error_handler(request: Request, exc: DBAPIError):
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    err = StoreUnavailable()
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = [
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}"
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "; ".join(problems) or "Invalid request"},
    )


# ── Routers ───────────────────────────────────────────────────────────────────
from leavedesk.api.v1.auth import router as auth_router  # noqa: E402
from leavedesk.api.v1.profile import router as profile_router  # noqa: E402
from leavedesk.api.v1.employees import router as employees_router  # noqa: E402
from leavedesk.api.v1.leave import router as leave_router  # noqa: E402
from leavedesk.api.v1.holidays import router as holidays_router  # noqa: E402
from leavedesk.api.v1.analytics import router as analytics_router  # noqa: E402

app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(profile_router, prefix=settings.API_PREFIX)
app.include_router(employees_router, prefix=settings.API_PREFIX)
app.include_router(leave_router, prefix=settings.API_PREFIX)
app.include_router(holidays_router, prefix=settings.API_PREFIX)
app.include_router(analytics_router, prefix=settings.API_PREFIX)


@app.get("/health")
async def health_check():
    return {
        "status": "ok",
        "service": settings.APP_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
