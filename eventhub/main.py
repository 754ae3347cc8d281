# eventhub/main.py
from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator, Dict

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .core.config import is_running_tests, settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, LOCAL_UPLOADS_URL_PREFIX
from .database import init_db
from .errors import register_error_handlers
from .routes import bookings, prometheus

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    logger.info(f"{API_TITLE} starting up...")
    logger.info(f"Environment: {settings.environment}")
    if is_running_tests():
        logger.info("Running under pytest (test mode active)")

    if settings.auto_create_tables:
        init_db()

    yield

    logger.info(f"{API_TITLE} shutting down...")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    lifespan=app_lifespan,
)

register_error_handlers(app)

app.include_router(bookings.router)
app.include_router(prometheus.router)

# Locally stored reference images (non-production fallback store)
if not settings.is_production:
    app.mount(
        LOCAL_UPLOADS_URL_PREFIX,
        StaticFiles(directory=settings.uploads_dir, check_dir=False),
        name="uploads",
    )


@app.get("/health", tags=["health"])
def health_check() -> Dict[str, str]:
    """Liveness probe that avoids touching external dependencies."""
    return {"status": "ok"}
