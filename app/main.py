import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.core.errors import ApiError, error_body, validation_errors_from_pydantic
from app.core.rate_limiter import rate_limiter
from app.database import init_db, engine
from app.logging_config import setup_logging
from app.routers import admin, auth, feedback, jobs, realtime

setup_logging()
logger = logging.getLogger(__name__)

API_PREFIX = "/api"

app = FastAPI(
    title="Job Tracker API",
    description="Job application tracking, public feedback and admin dashboard.",
    version="1.0.0",
)

cors_origins = [o.strip() for o in settings.cors_allow_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix=API_PREFIX)
app.include_router(jobs.router, prefix=API_PREFIX)
app.include_router(feedback.router, prefix=API_PREFIX)
app.include_router(admin.router, prefix=API_PREFIX)
app.include_router(realtime.router)


@app.exception_handler(ApiError)
async def api_error_handler(request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.detail, exc.errors))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request, exc: RequestValidationError):
    errors = validation_errors_from_pydantic(exc.errors())
    logger.info("Validation failed on %s %s: %d error(s)", request.method, request.url.path, len(errors))
    return JSONResponse(status_code=400, content=error_body("Validation failed", errors))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    logger.exception("Unhandled server error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content=error_body("Server error"))


def _rate_limit_for(method: str, path: str) -> int | None:
    if path in {f"{API_PREFIX}/auth/login", f"{API_PREFIX}/auth/register"}:
        return settings.rate_limit_auth_per_min
    if method == "POST" and path == f"{API_PREFIX}/feedback":
        return settings.rate_limit_feedback_per_min
    return None


@app.middleware("http")
async def apply_rate_limits(request, call_next):
    if request.method == "OPTIONS":
        return await call_next(request)

    path = request.url.path
    limit = _rate_limit_for(request.method, path)
    if limit is not None and limit > 0:
        client_ip = request.client.host if request.client else "unknown"
        key = f"{client_ip}:{path}"
        allowed, retry_after = rate_limiter.allow(key, limit=limit, window_seconds=60)
        if not allowed:
            logger.warning("Rate limit hit: %s %s", client_ip, path)
            return JSONResponse(
                status_code=429,
                content=error_body("Too many requests. Please retry shortly."),
                headers={"Retry-After": str(retry_after)},
            )

    return await call_next(request)


@app.get("/health/live")
def health_live():
    return {"status": "ok"}


@app.get("/health/ready")
def health_ready():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ready"}
    except Exception:
        logger.exception("Readiness check failed")
        return JSONResponse(status_code=503, content={"status": "not_ready"})


@app.on_event("startup")
def on_startup():
    logger.info("Starting Job Tracker API (env=%s)", settings.app_env)
    problems = settings.placeholder_problems()
    if problems and settings.is_production:
        raise RuntimeError("Refusing to start in production: " + "; ".join(problems))
    for problem in problems:
        logger.warning("%s. Set it in .env before deploying.", problem)
    init_db()


@app.get("/")
def root():
    return {"message": "Job Tracker API. See /docs for the endpoint reference."}
