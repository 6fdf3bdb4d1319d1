from contextlib import asynccontextmanager
import logging

from dotenv import load_dotenv
from fastapi import FastAPI

from showreel.api.routes_api import router as api_router
from showreel.core.config import get_settings
from showreel.media import registry

load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    """Application lifespan context manager."""
    settings = get_settings()
    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
    try:
        yield
    finally:
        # Flush and close frame channels that are still registered
        for element in registry.elements():
            if hasattr(element, "drain"):
                await element.drain()
            if hasattr(element, "close"):
                try:
                    element.close()
                except Exception as e:
                    logger.error(f"Error closing media element {element!r}: {e}")
        registry.clear()


app = FastAPI(
    title="Showreel",
    description="Season and episode browsing with single-source playback",
    version="0.1.0",
    lifespan=app_lifespan,
)

app.include_router(api_router, prefix="/api")
