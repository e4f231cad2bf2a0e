"""FastAPI dependency injection."""

from fastapi import Request

from finhealth.api.cache import ResultCache
from finhealth.engine.weights import ScoringConfig


def get_cache(request: Request) -> ResultCache:
    return request.app.state.cache


def get_scoring_config(request: Request) -> ScoringConfig:
    return request.app.state.scoring_config
