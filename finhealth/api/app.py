"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from finhealth.api.cache import MemoryCache, RedisCache, ResultCache
from finhealth.api.routes import amortization, budgets, score
from finhealth.config import settings
from finhealth.engine.weights import DEFAULT_SCORING_CONFIG, ScoringConfig, load_scoring_config
from finhealth.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _default_cache() -> ResultCache:
    if settings.redis_url:
        return RedisCache(settings.redis_url)
    return MemoryCache()


def _default_scoring_config() -> ScoringConfig:
    if settings.scoring_config_path:
        config = load_scoring_config(settings.scoring_config_path)
        logger.info("Loaded scoring config %s from %s", config.version, settings.scoring_config_path)
        return config
    return DEFAULT_SCORING_CONFIG


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    logger.info("Scoring config version %s", app.state.scoring_config.version)
    yield


def create_app(
    cache: ResultCache | None = None,
    scoring_config: ScoringConfig | None = None,
) -> FastAPI:
    app = FastAPI(
        title="Financial Health",
        description="Financial health scoring and amortization analysis",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.cache = cache if cache is not None else _default_cache()
    app.state.scoring_config = scoring_config or _default_scoring_config()

    app.include_router(score.router)
    app.include_router(amortization.router)
    app.include_router(budgets.router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "scoring_config_version": app.state.scoring_config.version}

    return app


app = create_app()
