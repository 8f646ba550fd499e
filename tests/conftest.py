"""Shared test fixtures."""

from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.auction import router as auction_router
from src.api.health import router as health_router
from src.core.auction import FacetExtractor, OptionTypeRegistry, PredicateEvaluator
from src.services.metadata_service import MetadataCache

METADATA_DIR = Path("src/data/meta")


@pytest.fixture()
def registry() -> OptionTypeRegistry:
    """기본 옵션 타입 레지스트리"""
    return OptionTypeRegistry.default()


@pytest.fixture()
def evaluator(registry: OptionTypeRegistry) -> PredicateEvaluator:
    return PredicateEvaluator(registry)


@pytest.fixture()
def client(registry: OptionTypeRegistry) -> TestClient:
    """FastAPI TestClient. lifespan 대신 app.state를 직접 채운다."""
    app = FastAPI()
    app.include_router(health_router)
    app.include_router(auction_router)
    app.state.registry = registry
    app.state.evaluator = PredicateEvaluator(registry)
    app.state.extractor = FacetExtractor(registry)
    app.state.metadata = MetadataCache(METADATA_DIR)
    return TestClient(app)
