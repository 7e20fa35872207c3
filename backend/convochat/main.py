"""
Main FastAPI application.
This is the entry point for the backend server.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from convochat.core.config import settings
from convochat.db.database import init_db
from convochat.api.deps import get_ai_gateway
from convochat.api.endpoints import auth, chat

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    await init_db()
    logger.info("Database initialized")
    if not get_ai_gateway().is_configured():
        logger.warning("AI_API_KEY is not set; chat replies will be connection-failure fallbacks")

    yield

    logger.info("Shutting down...")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Conversational chat backend with LLM integration",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render request validation failures as 400 with a field -> message map"""
    errors = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body") or "body"
        errors.setdefault(field, error["msg"])

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"status": "error", "message": "Validation failed", "errors": errors},
    )


# Include routers
app.include_router(auth.router)
app.include_router(chat.router)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": settings.APP_NAME,
        "version": settings.VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("convochat.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
