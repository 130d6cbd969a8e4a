"""FastAPI application for the username proofs service."""

import contextlib
import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from .env file
load_dotenv()

from .. import __version__
from ..infrastructure.dependencies import get_service_container
from .endpoints import health, proofs

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize outbound adapters on startup and close them on shutdown."""
    container = get_service_container()
    for problem in container.configuration_errors():
        logger.error(f"🛑 Configuration error: {problem}")
    await container.initialize()

    yield  # Application runs here

    await container.shutdown()


# Create FastAPI application
app = FastAPI(
    title="Username Proofs API",
    description="Issues one-time discount signatures to verified accounts",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(proofs.router)
