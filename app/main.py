import logging
import time
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.config import Settings, settings as default_settings
from app.core.errors import ValidationError
from app.core.state import build_marketplace
from app.routers import health, jobs, profiles, onboarding, dashboard
from app.routers import auth as auth_router
from app.storage.adapter import DataStoreAdapter

logger = logging.getLogger("app.requests")


def create_app(config: Optional[Settings] = None, store: Optional[DataStoreAdapter] = None) -> FastAPI:
    config = config or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        mp = build_marketplace(config, store)
        app.state.marketplace = mp
        mode = await mp.store.start()
        logger.info("stitch-cloud started app_id=%s store_mode=%s", config.APP_ID, mode)
        try:
            yield
        finally:
            await mp.store.aclose()

    app = FastAPI(title=config.APP_NAME, lifespan=lifespan)

    # CORS
    origins = config.cors_origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins if origins != ["*"] else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    prefix = config.API_PREFIX
    app.include_router(health.router, prefix=prefix)
    app.include_router(auth_router.router, prefix=prefix)
    app.include_router(profiles.router, prefix=prefix)
    app.include_router(onboarding.router, prefix=prefix)
    app.include_router(jobs.router, prefix=prefix)
    app.include_router(dashboard.router, prefix=prefix)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.code, "message": exc.message})

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000
        logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, duration_ms)
        return response

    @app.get("/")
    async def root():
        return {"name": config.APP_NAME, "env": config.APP_ENV}

    return app


app = create_app()
