# Standard library imports
from pathlib import Path
from contextlib import asynccontextmanager
import logging

# External package imports
from dotenv import load_dotenv
from fastapi import FastAPI
from pymongo.errors import PyMongoError

# Local application imports
from .api.v1 import users_router
from .core.config import get_settings
from .di.container import get_container, reset_container
from .utils.db import close_client, ensure_user_indexes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.

    Builds the DI container, makes sure the users collection has its unique
    email index, and closes the MongoDB client on shutdown.
    """
    container = get_container()
    try:
        ensure_user_indexes(container.get("user_collection"))
    except PyMongoError as e:
        # Duplicate emails go undetected until the index exists
        logger.error(f"Failed to ensure user indexes: {e}", exc_info=True)

    yield

    reset_container()
    close_client()
    logger.info("Application shutdown complete")


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application.

    This function sets up the FastAPI application with:
    - Environment variable loading
    - Logging configuration
    - API route registration

    Returns:
        Configured FastAPI application instance
    """
    # Load environment variables from .env file
    env_path = Path(__file__).resolve().parent.parent / ".env"
    load_dotenv(env_path)

    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    application = FastAPI(
        title="Mongo Users API",
        version="1.0.0",
        description="User management over MongoDB (native driver and repository implementations)",
        lifespan=lifespan
    )

    # Register API routers
    application.include_router(users_router, prefix="/api/v1/users")

    return application


# Create application instance
app = create_application()
