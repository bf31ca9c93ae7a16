import os
from contextlib import asynccontextmanager

import httpx
import sentry_sdk
import structlog
from fastapi import FastAPI, Request
from sentry_sdk.integrations.starlette import StarletteIntegration
from slowapi.errors import RateLimitExceeded
from starlette.middleware.cors import CORSMiddleware

from geocache import db
from geocache.api import errors
from geocache.api.routers.geo import router as geo_router
from geocache.api.routers.healthz import router as healthz_router
from geocache.api.routers.readyz import router as readyz_router
from geocache.core.config import Settings, settings
from geocache.logging import setup_logging
from geocache.middleware.rate_limit import (
    limiter,
    rate_limit_middleware,
    rate_limited_response,
)
from geocache.middleware.request_id import request_id_middleware
from geocache.middleware.security_headers import security_headers_middleware
from geocache.providers.addresses import AddressLookupProvider, UserAgentPool
from geocache.providers.astro import AstroServiceProvider
from geocache.providers.geonames import GeoNamesProvider
from geocache.providers.geotimezone import GeoTimeZoneProvider
from geocache.providers.postal_zones import PostalZoneRepository
from geocache.services.cache_store import CacheStore
from geocache.services.container import Providers, ServiceContainer, build_container

logger = structlog.get_logger(__name__)


def _init_sentry(env: str) -> None:
    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return
    # traces_sample_rate: clamp to [0.0, 0.2]
    try:
        rate_raw = float(os.getenv("SENTRY_TRACES_RATE", "0"))
    except ValueError:
        rate_raw = 0.0
    sentry_sdk.init(
        dsn=dsn,
        environment=env,
        release=os.getenv("RELEASE"),
        integrations=[StarletteIntegration()],
        traces_sample_rate=max(0.0, min(0.2, rate_raw)),
        send_default_pii=False,
    )


def build_providers(client: httpx.AsyncClient, store: CacheStore, cfg: Settings) -> Providers:
    timeout = cfg.upstream_timeout_seconds
    geotz = GeoTimeZoneProvider(client, base_url=cfg.geotimezone_api, timeout=timeout)
    return Providers(
        places=geotz,
        timezones=geotz,
        postal_zones=PostalZoneRepository(db.SessionLocal),
        addresses=AddressLookupProvider(
            client,
            url=cfg.addresses_api,
            user_agents=UserAgentPool(store, cfg.user_agent_strings_file),
            timeout=timeout,
        ),
        nearby=GeoNamesProvider(
            client,
            base_url=cfg.geonames_api,
            username=cfg.geonames_username,
            timeout=timeout,
        ),
        astro=AstroServiceProvider(client, base_url=cfg.astro_api, timeout=timeout),
    )


@asynccontextmanager
async def _lifespan(app: FastAPI):
    if getattr(app.state, "services", None) is not None:
        yield
        return

    redis = db.create_redis()
    client = httpx.AsyncClient(timeout=settings.upstream_timeout_seconds)
    providers = build_providers(client, CacheStore(redis), settings)
    app.state.services = build_container(
        redis,
        providers,
        postal_zone_countries=settings.postal_zone_countries,
        session_factory=db.SessionLocal,
    )
    logger.info("services_ready", countries=settings.postal_zone_countries)
    try:
        yield
    finally:
        await client.aclose()
        await redis.aclose()
        await db.engine.dispose()


def create_app(services: ServiceContainer | None = None) -> FastAPI:
    setup_logging()

    env = os.getenv("APP_ENV", "dev")
    _init_sentry(env)

    app = FastAPI(title="Geo Cache", lifespan=_lifespan)
    app.state.services = services
    app.state.limiter = limiter
    errors.install(app)

    app.middleware("http")(request_id_middleware)
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(rate_limit_middleware)

    # CORS from ALLOW_ORIGINS env (comma-separated)
    allow_origins = [o.strip() for o in os.getenv("ALLOW_ORIGINS", "").split(",") if o.strip()]
    if allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allow_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS", "HEAD"],
            allow_headers=["*"],
        )
    app.include_router(geo_router)
    app.include_router(healthz_router)
    app.include_router(readyz_router)

    @app.get("/health")
    def health():
        return {"status": "ok", "env": os.getenv("APP_ENV", "dev")}

    @app.exception_handler(RateLimitExceeded)
    async def _rate_limit_handler(request: Request, exc: RateLimitExceeded):
        info = getattr(request.state, "rate_limit_info", None)
        if not isinstance(info, dict):
            info = {
                "method": request.method,
                "ip": (request.client.host if request.client else None) or "-",
                "limit": "-",
            }
        return rate_limited_response(info)

    logger.info("app_startup", env=env)
    return app


app = create_app()
