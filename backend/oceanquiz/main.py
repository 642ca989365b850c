import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from datetime import datetime

from .config import settings
from .api.routes import router, get_weight_store
from .api.middleware import setup_middleware

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting Ocean Season Quiz scoring service...")

    if not os.path.exists(settings.WEIGHTS_FILE):
        logger.error(f"Startup failed: weights file not found: {settings.WEIGHTS_FILE}")
        raise FileNotFoundError(f"Weights file not found: {settings.WEIGHTS_FILE}")

    store = get_weight_store()
    if store.question_count != settings.DEFAULT_QUESTION_COUNT:
        logger.warning(
            f"Weight table covers {store.question_count} questions, "
            f"expected {settings.DEFAULT_QUESTION_COUNT}"
        )
    logger.info(f"Scoring ready with weights from {settings.WEIGHTS_FILE}")

    yield

    # Shutdown
    logger.info("Shutting down...")

app = FastAPI(
    title="Ocean Season Quiz",
    description="Trait scoring and weight-table analysis for the Ocean/Season personality quiz",
    version="1.0.0",
    lifespan=lifespan
)

setup_middleware(app)

app.include_router(router, prefix="/api/v1")

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "timestamp": datetime.now().isoformat()
        }
    )
