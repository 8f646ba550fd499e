"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from src.api.auction import router as auction_router
from src.api.health import router as health_router
from src.config import settings
from src.core.auction import FacetExtractor, OptionTypeRegistry, PredicateEvaluator
from src.core.event_bus import EventBus
from src.core.logging import get_logger, setup_logging
from src.services.auction_filter_service import AuctionFilterService
from src.services.metadata_service import MetadataCache

setup_logging(settings.LOG_LEVEL, debug=settings.DEBUG)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Initializing option type registry...")
    registry = OptionTypeRegistry.default()
    app.state.registry = registry
    app.state.evaluator = PredicateEvaluator(registry)
    app.state.extractor = FacetExtractor(registry)
    logger.info("Registry initialized (%d option types).", registry.count())

    logger.info("Loading metadata from %s...", settings.METADATA_DIR)
    metadata = MetadataCache(settings.METADATA_DIR)
    await metadata.load_common()
    app.state.metadata = metadata

    event_bus = EventBus()
    app.state.event_bus = event_bus
    filter_service = AuctionFilterService(
        event_bus=event_bus,
        registry=registry,
        evaluator=app.state.evaluator,
        metadata=metadata,
        defer_seconds=settings.filter_defer_seconds,
    )
    app.state.filter_service = filter_service
    logger.info("AuctionFilterService initialized.")

    yield

    logger.info("Shutting down...")
    filter_service.close()
    event_bus.clear()


app = FastAPI(title="Auction Option Filter", lifespan=lifespan)

app.include_router(health_router)
app.include_router(auction_router)
