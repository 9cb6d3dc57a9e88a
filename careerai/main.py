import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from careerai.config import settings
from careerai.core.errors import DispatchError
from careerai.core.rate_limiter import rate_limiter
from careerai.database import init_db, engine
from careerai.logging_config import setup_logging
from careerai.routers import ai, applications

setup_logging()
logger = logging.getLogger(__name__)

PLACEHOLDER_SECRET_KEY = "replace-with-a-long-random-secret-key"

app = FastAPI(
    title="CareerAI API",
    description="AI career actions (jobs, resumes, cover letters, interviews) and application records.",
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

app.include_router(ai.router)
app.include_router(applications.router)


@app.exception_handler(DispatchError)
async def dispatch_error_handler(request, exc: DispatchError):
    if exc.status_code >= 500:
        logger.error("AI dispatch failed on %s: %s", request.url.path, exc)
    else:
        logger.info("AI dispatch rejected on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    logger.exception("Unhandled server error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Server error"})


def _rate_limit_for(path: str) -> int | None:
    if path == "/ai":
        return settings.rate_limit_ai_per_min
    if path == "/applications/bulk-apply":
        return settings.rate_limit_bulk_apply_per_min
    return None


@app.middleware("http")
async def apply_rate_limits(request, call_next):
    if request.method == "OPTIONS":
        return await call_next(request)

    path = request.url.path
    limit = _rate_limit_for(path)
    if limit is not None and limit > 0:
        client_ip = request.client.host if request.client else "unknown"
        allowed, retry_after = rate_limiter.allow(f"{client_ip}:{path}", limit=limit, window_seconds=60)
        if not allowed:
            return JSONResponse(
                status_code=429,
                content={"error": "Too many requests. Please retry shortly."},
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
    logger.info("Starting CareerAI API")
    env = (settings.app_env or "development").lower()
    if env in {"production", "prod"}:
        if settings.secret_key == PLACEHOLDER_SECRET_KEY:
            raise RuntimeError("SECRET_KEY placeholder is not allowed in production")
        if not settings.ai_api_key:
            raise RuntimeError("AI_API_KEY must be set in production")
    else:
        if settings.secret_key == PLACEHOLDER_SECRET_KEY:
            logger.warning("SECRET_KEY is using placeholder default. Set SECRET_KEY in .env for secure deployments.")
        if not settings.ai_api_key:
            logger.warning("AI_API_KEY is not set; every /ai request will fail with a configuration error.")
    init_db()


@app.get("/")
def root():
    return {"message": "CareerAI API. POST {action, payload} to /ai."}
